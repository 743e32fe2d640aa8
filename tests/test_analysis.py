"""Tests for whole-file analysis and the command-line entry point."""

import json


class TestAnalyzeFile:
    def test_module_summary(self, user_module):
        from repolens.analysis import analyze_file

        analysis = analyze_file(user_module, "src/users.js")

        assert analysis.is_code
        assert analysis.language == "ecmascript"
        assert analysis.parse_source == "structural"
        assert analysis.parse_error is None
        assert [(fn.name, fn.line) for fn in analysis.functions] == [("fetchUser", 5), ("loadAll", 9)]
        assert analysis.imports == ["./api"]
        assert analysis.complexity == 2
        assert analysis.complexity_level == "low"
        assert analysis.security_issues == []

    def test_calls_written_back(self, user_module):
        from repolens.analysis import analyze_file

        analysis = analyze_file(user_module, "src/users.js")
        fetch_user, load_all = analysis.functions

        assert fetch_user.total_calls == 1
        assert [(s.line, s.caller) for s in fetch_user.call_sites] == [(12, "loadAll")]
        assert load_all.total_calls == 0
        assert load_all.call_sites == []
        assert set(analysis.calls) == {"fetchUser"}

    def test_usages_written_back(self, user_module):
        from repolens.analysis import analyze_file

        analysis = analyze_file(user_module, "src/users.js")
        variables = {var.name: var for var in analysis.variables}

        assert set(variables) == {"BASE", "loadAll", "users", "id"}
        assert variables["BASE"].usage_lines == [6]
        assert variables["BASE"].value_type == "string"
        assert variables["users"].usage_lines == [12, 14]
        assert variables["users"].total_usages == 2
        assert not variables["users"].is_top_level
        assert variables["loadAll"].total_usages == 0
        assert (variables["id"].kind, variables["id"].line) == ("const", 11)
        assert not variables["id"].is_top_level
        assert variables["id"].usage_lines == [5, 6, 12]

    def test_to_dict(self, user_module):
        from repolens.analysis import analyze_file

        data = analyze_file(user_module, "src/users.js").to_dict()

        assert data["complexity"] == {"score": 2, "level": "low"}
        assert data["parseSource"] == "structural"
        assert data["functions"][0]["totalCalls"] == 1
        assert data["calls"]["fetchUser"]["callSites"] == [{"line": 12, "caller": "loadAll"}]
        json.dumps(data)

    def test_non_code_file(self):
        from repolens.analysis import analyze_file

        analysis = analyze_file("eval(x)", "logo.png")

        assert not analysis.is_code
        assert analysis.functions == []
        assert analysis.security_issues == []
        assert analysis.complexity == 0

    def test_malformed_ecmascript(self, broken_module):
        from repolens.analysis import analyze_file

        analysis = analyze_file(broken_module, "broken.js")

        assert analysis.parse_source == "pattern"
        assert "syntax error" in analysis.parse_error
        assert [fn.name for fn in analysis.functions] == ["ok", "broken"]
        assert all(fn.source == "pattern" for fn in analysis.functions)

    def test_walker_fallback_marks_file_as_pattern(self, user_module, monkeypatch):
        from repolens import extractor
        from repolens.analysis import analyze_file

        def too_deep(*args):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(extractor._FunctionCollector, "collect", too_deep)
        monkeypatch.setattr(extractor, "_collect_variables", too_deep)
        analysis = analyze_file(user_module, "src/users.js")

        assert analysis.parse_source == "pattern"
        assert "nested too deeply" in analysis.parse_error
        assert [fn.name for fn in analysis.functions] == ["fetchUser", "loadAll"]
        assert {fn.source for fn in analysis.functions} == {"pattern"}

    def test_pattern_only_language(self):
        from repolens.analysis import analyze_file

        content = "import os\n\ndef helper():\n    return os.getcwd()\n\ndef main():\n    helper()\n"
        analysis = analyze_file(content, "tool.py")

        assert analysis.language == "python"
        assert analysis.parse_source is None
        assert analysis.imports == ["os"]
        assert analysis.functions[0].name == "helper"
        assert analysis.functions[0].total_calls == 1


class TestMain:
    def test_json_output(self, tmp_path, capsys, user_module):
        from repolens.cli import main

        path = tmp_path / "users.js"
        path.write_text(user_module)

        assert main([str(path)]) == 0
        output = json.loads(capsys.readouterr().out)
        assert [f["file"] for f in output["files"]] == [str(path)]
        assert output["files"][0]["functions"][0]["name"] == "fetchUser"

    def test_unreadable_file(self, tmp_path, capsys):
        from repolens.cli import main

        good = tmp_path / "a.py"
        good.write_text("def f():\n    pass\n")
        missing = tmp_path / "missing.js"

        assert main([str(good), str(missing)]) == 1
        captured = capsys.readouterr()
        assert len(json.loads(captured.out)["files"]) == 1
        assert f"cannot read {missing}" in captured.err

    def test_invalid_utf8_is_replaced(self, tmp_path, capsys):
        from repolens.cli import main

        path = tmp_path / "latin.js"
        path.write_bytes(b"const name = '\xe9';\nfunction go() {}\n")

        assert main([str(path), "--pretty"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert [fn["name"] for fn in output["files"][0]["functions"]] == ["go"]
