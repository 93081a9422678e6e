"""Unit tests for the no_defer_in_test rule."""

from pathlib import Path

import pytest

from nodefertest.context import FileContext, create_context
from nodefertest.parser import create_parser, parse_bytes
from nodefertest.rules.no_defer_in_test import (
    MESSAGE,
    NoDeferInTestRule,
    is_nested_test_context,
    is_test_entry_point,
    is_test_function_name,
    walk_test_body,
)
from nodefertest.syntax import get_body

HEADER = 'package a\n\nimport "testing"\n\n'


def _context(body: str, path: Path | None = None) -> FileContext:
    if path is None:
        path = Path("a_test.go")
    source = (HEADER + body).encode("utf-8")
    tree = parse_bytes(source, parser=create_parser())
    return FileContext(path=path, source=source, tree=tree)


def _run_rule(body: str) -> list:
    """Parse a Go snippet (package clause added), run NoDeferInTestRule, return findings."""
    return NoDeferInTestRule().run(_context(body), None)


def _lines(findings) -> list[int]:
    return [f.location.line for f in findings]


def _literals(node):
    if node.type == "func_literal":
        yield node
    for child in node.named_children:
        yield from _literals(child)


# Lines in snippets are counted from the line after HEADER
FIRST = HEADER.count("\n") + 1


class TestScenarios:
    def test_defer_in_test_function(self):
        findings = _run_rule("func TestFoo(t *testing.T) {\n\tdefer cleanup()\n}\n")
        assert len(findings) == 1
        f = findings[0]
        assert f.rule_id == "nodefertest"
        assert f.message == MESSAGE
        assert f.location.line == FIRST + 1
        assert f.location.column == 2
        assert f.location.snippet == "defer cleanup()"

    def test_cleanup_is_not_flagged(self):
        assert _run_rule("func TestFoo(t *testing.T) {\n\tt.Cleanup(cleanup)\n}\n") == []

    def test_plain_literal_is_skipped(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tfn := func() { defer cleanup() }\n"
            "\tfn()\n"
            "}\n"
        )
        assert _run_rule(body) == []

    def test_subtest_literal_is_walked(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            '\tt.Run("x", func(t *testing.T) {\n'
            "\t\tdefer cleanup()\n"
            "\t})\n"
            "}\n"
        )
        findings = _run_rule(body)
        assert _lines(findings) == [FIRST + 2]
        assert findings[0].location.column == 3

    def test_bare_test_name(self):
        assert _run_rule("func Test(t *testing.T) {\n\tdefer cleanup()\n}\n") == []

    def test_non_test_name(self):
        assert _run_rule("func Helper(t *testing.T) {\n\tdefer cleanup()\n}\n") == []


class TestWalker:
    def test_sequential_defers_all_reported(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tdefer a()\n"
            "\tdefer b()\n"
            "\tdefer c()\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 1, FIRST + 2, FIRST + 3]

    def test_control_constructs_are_transparent(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tif ok {\n"
            "\t\tdefer a()\n"
            "\t} else {\n"
            "\t\tdefer b()\n"
            "\t}\n"
            "\tfor i := range xs {\n"
            "\t\tdefer c(i)\n"
            "\t}\n"
            "\tswitch x {\n"
            "\tcase 1:\n"
            "\t\tdefer d()\n"
            "\t}\n"
            "\tselect {\n"
            "\tcase <-ch:\n"
            "\t\tdefer e()\n"
            "\t}\n"
            "\t{\n"
            "\t\tdefer f()\n"
            "\t}\n"
            "}\n"
        )
        assert len(_run_rule(body)) == 6

    def test_plain_literal_hides_nested_subtest(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tfunc() {\n"
            '\t\tt.Run("x", func(t *testing.T) { defer a() })\n'
            "\t}()\n"
            "}\n"
        )
        assert _run_rule(body) == []

    def test_goroutine_literals(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tgo func() { defer a() }()\n"
            "\tgo func(t *testing.T) { defer b() }(t)\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 2]

    def test_deferred_subtest_literal_reports_both(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tdefer func(t *testing.T) {\n"
            "\t\tdefer a()\n"
            "\t}(t)\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 1, FIRST + 2]

    def test_deferred_plain_literal_body_not_scanned(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tdefer func() {\n"
            "\t\tdefer a()\n"
            "\t}()\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 1]

    def test_deeply_nested_subtests(self):
        body = (
            "func BenchmarkFoo(b *testing.B) {\n"
            '\tb.Run("outer", func(b *testing.B) {\n'
            '\t\tb.Run("inner", func(b *testing.B) {\n'
            "\t\t\tdefer a()\n"
            "\t\t})\n"
            "\t})\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 3]

    def test_word_defer_in_identifiers_and_strings(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tdeferCount := 0\n"
            '\tmsg := "defer is a keyword"\n'
            "\t_, _ = deferCount, msg\n"
            "}\n"
        )
        assert _run_rule(body) == []

    def test_helper_literals_never_visited(self):
        body = (
            "func helper(t *testing.T) {\n"
            '\tt.Run("x", func(t *testing.T) { defer a() })\n'
            "}\n"
            "\n"
            "var sub = func(t *testing.T) { defer b() }\n"
        )
        assert _run_rule(body) == []

    def test_walk_test_body_none_is_empty(self):
        reported = []
        walk_test_body(_context(""), None, reported.append)
        assert reported == []

    def test_walk_test_body_reports_nodes(self):
        ctx = _context("func f() {\n\tdefer a()\n\tfunc() { defer b() }()\n}\n")
        (decl,) = ctx.declarations()
        reported = []
        walk_test_body(ctx, get_body(decl), reported.append)
        assert [n.type for n in reported] == ["defer_statement"]

    def test_deep_expression_does_not_exhaust_recursion(self):
        chain = " + ".join(["1"] * 3000)
        body = (
            "func TestDeep(t *testing.T) {\n"
            "\tdefer cleanup()\n"
            f"\tx := {chain}\n"
            "\t_ = x\n"
            '\tt.Run("x", func(t *testing.T) {\n'
            "\t\tdefer cleanup()\n"
            "\t})\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 1, FIRST + 5]

    def test_nested_context_findings_stay_in_source_order(self):
        body = (
            "func TestFoo(t *testing.T) {\n"
            "\tdefer a()\n"
            '\tt.Run("x", func(t *testing.T) {\n'
            "\t\tdefer b()\n"
            "\t})\n"
            "\tdefer c()\n"
            "}\n"
        )
        assert _lines(_run_rule(body)) == [FIRST + 1, FIRST + 3, FIRST + 5]

    def test_idempotent(self):
        ctx = _context("func TestFoo(t *testing.T) {\n\tdefer a()\n\tdefer b()\n}\n")
        rule = NoDeferInTestRule()
        assert rule.run(ctx, None) == rule.run(ctx, None)


class TestClassifier:
    @pytest.mark.parametrize("name", ["TestA", "TestFoo", "Testing", "BenchmarkX", "Benchmark_1"])
    def test_recognised_names(self, name):
        assert is_test_function_name(name)

    @pytest.mark.parametrize("name", ["Test", "Benchmark", "test", "ExampleFoo", "FuzzFoo", "Helper", "", None])
    def test_rejected_names(self, name):
        assert not is_test_function_name(name)

    def test_entry_point_needs_name_and_param(self):
        ctx = _context(
            "func TestA(t *testing.T) {}\n"
            "func TestB() {}\n"
            "func TestC(s string) {}\n"
            "func Helper(t *testing.T) {}\n"
            "func BenchmarkD(b *testing.B) {}\n"
        )
        result = {d.child_by_field_name("name").text.decode(): is_test_entry_point(ctx, d) for d in ctx.declarations()}
        assert result == {
            "TestA": True,
            "TestB": False,
            "TestC": False,
            "Helper": False,
            "BenchmarkD": True,
        }


class TestPropagationRule:
    def test_literal_qualifies_regardless_of_parent(self):
        ctx = _context(
            "func helper() {\n"
            "\t_ = func(t *testing.T) {}\n"
            "\t_ = func(b *testing.B) {}\n"
            "\t_ = func() {}\n"
            "\t_ = func(s string) {}\n"
            "}\n"
        )
        literals = list(_literals(ctx.root_node))
        assert [is_nested_test_context(ctx, lit) for lit in literals] == [True, True, False, False]


def test_finding_has_location(tmp_path):
    go_file = tmp_path / "a_test.go"
    go_file.write_bytes(b'package a\n\nimport "testing"\n\nfunc TestA(t *testing.T) {\n\tdefer cleanup()\n}\n')
    ctx = create_context(go_file)
    assert ctx is not None
    findings = NoDeferInTestRule().run(ctx, None)
    assert len(findings) == 1
    loc = findings[0].location
    assert loc.path == go_file
    assert (loc.line, loc.column) == (6, 2)
    assert findings[0].format_line() == f"{go_file}:6:2: {MESSAGE}"
