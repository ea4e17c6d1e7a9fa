"""Tests for structural path building and aggregation."""

from __future__ import annotations

from twstrata.cascade import aggregate_paths, build_path
from twstrata.model import Declaration
from twstrata.parser import parse_css


def _first_decl(css: str) -> Declaration:
    return next(parse_css(css).walk_decls())


class TestBuildPath:
    def test_top_level_rule(self) -> None:
        assert build_path(_first_decl(".btn { color: red; }")) == ".btn > color:red"

    def test_nested_frames_outermost_first(self) -> None:
        decl = _first_decl("@media (width >= 40rem) { .a { margin: 0; } }")
        assert build_path(decl) == "@media (width >= 40rem) > .a > margin:0"

    def test_rule_nested_at_rule(self) -> None:
        decl = _first_decl(".sm\\:flex { @media (width >= 40rem) { display: flex; } }")
        assert build_path(decl) == ".sm\\:flex > @media (width >= 40rem) > display:flex"

    def test_identical_nesting_gives_identical_paths(self) -> None:
        css = "@layer utilities { .a { color: red; } }"
        assert build_path(_first_decl(css)) == build_path(_first_decl(css))

    def test_at_rule_params_matter(self) -> None:
        a = _first_decl("@media (width >= 40rem) { .a { margin: 0; } }")
        b = _first_decl("@media (width >= 48rem) { .a { margin: 0; } }")
        assert build_path(a) != build_path(b)

    def test_selector_text_matters(self) -> None:
        a = _first_decl(".a { color: red; }")
        b = _first_decl(".b { color: red; }")
        assert build_path(a) != build_path(b)

    def test_value_matters(self) -> None:
        a = _first_decl(".a { color: red; }")
        b = _first_decl(".a { color: blue; }")
        assert build_path(a) != build_path(b)

    def test_no_semantic_normalization(self) -> None:
        a = _first_decl("@media (min-width: 40rem) { .a { margin: 0; } }")
        b = _first_decl("@media (width >= 40rem) { .a { margin: 0; } }")
        assert build_path(a) != build_path(b)

    def test_important_flag_matters(self) -> None:
        a = _first_decl(".a { color: red; }")
        b = _first_decl(".a { color: red !important; }")
        assert build_path(a) != build_path(b)

    def test_at_rule_without_params(self) -> None:
        decl = _first_decl("@font-face { font-display: swap; }")
        assert build_path(decl) == "@font-face > font-display:swap"


class TestAggregatePaths:
    def test_collects_every_declaration(self) -> None:
        tree = parse_css(".a { color: red; margin: 0; } @media print { .a { color: red; } }")
        assert aggregate_paths(tree) == {
            ".a > color:red",
            ".a > margin:0",
            "@media print > .a > color:red",
        }

    def test_duplicates_collapse(self) -> None:
        tree = parse_css(".a { color: red; } .a { color: red; }")
        assert aggregate_paths(tree) == {".a > color:red"}

    def test_empty_tree(self) -> None:
        assert aggregate_paths(parse_css("")) == set()
