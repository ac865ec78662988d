"""Tests for the tree-sitter syntax check."""

from scriptcraft.core.cs_parser import check_syntax


class TestSyntaxCheck:

    def test_clean_source(self):
        assert check_syntax("public class A\n{\n    private int x = 1;\n}\n") == []

    def test_missing_brace_is_reported_with_line(self):
        problems = check_syntax("public class A\n{\n    void B()\n    {\n        Run();\n}\n")
        assert problems
        assert any("Line " in p or "parse errors" in p for p in problems)
