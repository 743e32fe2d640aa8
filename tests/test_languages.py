"""Tests for extension-based language classification."""

import pytest


class TestIsCode:
    """is_code() is a case-insensitive suffix match."""

    @pytest.mark.parametrize("filename", [
        "a.tsx", "src/app.js", "lib/mod.mjs", "main.go", "Main.JAVA", "script.R", "build.gradle",
    ])
    def test_source_files(self, filename):
        from repolens.languages import is_code

        assert is_code(filename)

    @pytest.mark.parametrize("filename", ["a.PNG", "README.md", "package.json", "Makefile", "styles.css"])
    def test_non_source_files(self, filename):
        from repolens.languages import is_code

        assert not is_code(filename)


class TestDetectFamily:
    """detect_family() picks the extraction strategy."""

    @pytest.mark.parametrize("filename,family", [
        ("x.js", "ECMASCRIPT"),
        ("x.cjs", "ECMASCRIPT"),
        ("x.TS", "ECMASCRIPT"),
        ("x.tsx", "ECMASCRIPT"),
        ("x.py", "PYTHON"),
        ("x.go", "GO"),
        ("x.java", "JAVA"),
        ("x.cs", "JAVA"),
        ("x.rs", "RUST"),
        ("x.rb", "RUBY"),
        ("x.php", "PHP"),
        ("x.c", "C"),
        ("x.cc", "C"),
        ("x.hpp", "C"),
        ("x.swift", "OTHER"),
        ("x.vue", "OTHER"),
        ("notes.txt", "OTHER"),
    ])
    def test_family(self, filename, family):
        from repolens.languages import LanguageFamily, detect_family

        assert detect_family(filename) is LanguageFamily[family]

    def test_type_annotated(self):
        from repolens.languages import is_type_annotated

        assert is_type_annotated("app.ts")
        assert is_type_annotated("View.TSX")
        assert not is_type_annotated("app.js")
