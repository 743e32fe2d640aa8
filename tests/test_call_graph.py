"""Tests for intra-file call resolution."""

import textwrap


def _defs(*names):
    from repolens.models import FunctionDef

    return [
        FunctionDef(name=name, file="m.js", line=1, code=name, type="function", is_top_level=True)
        for name in names
    ]


class TestStructuralCalls:
    """ECMAScript call sites carry their enclosing function."""

    def test_calls_with_caller(self):
        from repolens.call_graph import find_calls

        call_map = find_calls("function main(){ helper(); helper(); }", "m.js", _defs("helper"))

        assert call_map["helper"].total_calls == 2
        assert [site.caller for site in call_map["helper"].call_sites] == ["main", "main"]

    def test_member_and_subscript_calls(self):
        from repolens.call_graph import find_calls

        content = "obj.helper();\nobj['helper']();\nthis.helper?.();\n"
        call_map = find_calls(content, "m.js", _defs("helper"))

        assert call_map["helper"].total_calls == 3
        assert [site.line for site in call_map["helper"].call_sites] == [1, 2, 3]

    def test_top_level_calls_have_no_caller(self):
        from repolens.call_graph import find_calls

        call_map = find_calls("setup();\n", "m.js", _defs("setup"))

        site = call_map["setup"].call_sites[0]
        assert site.caller is None
        assert site.to_dict() == {"line": 1}

    def test_arrow_caller_context(self):
        from repolens.call_graph import find_calls

        content = textwrap.dedent("""\
            const run = () => {
              helper();
            };
            function outer() {
              const inner = function () { helper(); };
              helper();
            }
            """)
        call_map = find_calls(content, "m.js", _defs("helper"))

        sites = [(site.line, site.caller) for site in call_map["helper"].call_sites]
        assert sites == [(2, "run"), (5, "inner"), (6, "outer")]

    def test_unknown_callees_ignored(self):
        from repolens.call_graph import find_calls

        call_map = find_calls("console.log(1);\nhelper();\n", "m.js", _defs("helper"))

        assert set(call_map) == {"helper"}

    def test_uncalled_functions_absent(self):
        from repolens.call_graph import find_calls

        assert find_calls("function lonely() {}\n", "m.js", _defs("lonely")) == {}

    def test_no_known_definitions(self):
        from repolens.call_graph import find_calls

        assert find_calls("helper();", "m.js", []) == {}

    def test_to_dict(self):
        from repolens.call_graph import find_calls

        call_map = find_calls("function main(){ helper(); }", "m.js", _defs("helper"))

        assert call_map["helper"].to_dict() == {
            "totalCalls": 1,
            "callSites": [{"line": 1, "caller": "main"}],
        }


class TestPatternCalls:
    """Line scanning for other languages and unparseable ECMAScript."""

    def test_python(self):
        from repolens.call_graph import find_calls
        from repolens.extractor import extract

        content = textwrap.dedent("""\
            def helper():
                return 1

            def main():
                helper()
                x = helper() + helper()
            """)
        call_map = find_calls(content, "mod.py", extract(content, "mod.py"))

        assert set(call_map) == {"helper"}
        assert call_map["helper"].total_calls == 3
        assert [site.line for site in call_map["helper"].call_sites] == [5, 6, 6]
        assert all(site.caller is None for site in call_map["helper"].call_sites)

    def test_go_receiver_definition_not_a_call(self):
        from repolens.call_graph import find_calls
        from repolens.extractor import extract

        content = "func (s *Server) Start() error {\n\treturn nil\n}\n\nfunc main() {\n\ts.Start()\n}\n"
        call_map = find_calls(content, "main.go", extract(content, "main.go"))

        assert call_map["Start"].total_calls == 1
        assert call_map["Start"].call_sites[0].line == 6

    def test_malformed_javascript(self):
        from repolens.call_graph import find_calls

        content = "function helper() {}\nhelper();\nfunction broken( {\n"
        call_map = find_calls(content, "m.js", _defs("helper", "broken"))

        assert set(call_map) == {"helper"}
        assert call_map["helper"].total_calls == 1
        assert call_map["helper"].call_sites[0].line == 2
        assert call_map["helper"].call_sites[0].caller is None

    def test_const_definition_line_skipped(self, broken_module):
        from repolens.call_graph import find_calls

        call_map = find_calls(broken_module + "ok();\n", "m.js", _defs("ok"))

        assert [site.line for site in call_map["ok"].call_sites] == [5]
