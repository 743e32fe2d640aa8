"""Pytest configuration and fixtures."""

import textwrap

import pytest


@pytest.fixture
def user_module() -> str:
    """A small ES module exercising every extraction pass."""
    return textwrap.dedent("""\
        import { api } from "./api";

        const BASE = "/v1";

        function fetchUser(id) {
          return api.get(BASE + id);
        }

        export const loadAll = async (ids) => {
          const users = [];
          for (const id of ids) {
            users.push(await fetchUser(id));
          }
          return users;
        };
        """)


@pytest.fixture
def broken_module() -> str:
    """ECMAScript with an unclosed block; the structural parse must fail."""
    return textwrap.dedent("""\
        const ok = () => 1;
        function broken(x) {
          if (x {
            return 1;
        """)
