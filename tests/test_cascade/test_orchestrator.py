"""Tests for the tier orchestrator."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from twstrata.cascade import CascadeResult, Expander, aggregate_paths, build_cascade
from twstrata.errors import CascadeError, ConfigurationError, ExpansionError
from twstrata.expansion import PassthroughEngine
from twstrata.model import SourceGroupMap


# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------


class RecordingEngine:
    """Passthrough engine that records inputs and can fail on chosen groups."""

    def __init__(self, failing: tuple[str, ...] = ()) -> None:
        self.failing = failing
        self.inputs: dict[str, str] = {}
        self._lock = threading.Lock()

    def expand(self, css: str, *, source_path: Path) -> str:
        name = source_path.stem
        with self._lock:
            self.inputs[name] = css
        if name in self.failing:
            raise ExpansionError(f"engine failed for {name}", group=name, stderr="boom")
        return css


def _sources(tmp_path: Path, **groups: str) -> Path:
    source_dir = tmp_path / "tw"
    source_dir.mkdir(exist_ok=True)
    for name, css in groups.items():
        (source_dir / f"{name}.css").write_text(css, encoding="utf-8")
    return source_dir


def _map(*pages: str, include_critical: bool = True) -> SourceGroupMap:
    group_map = SourceGroupMap(global_name="theme", critical_name="critical")
    if include_critical:
        group_map.ensure("critical")
    group_map.ensure("theme")
    for page in pages:
        group_map.ensure(page)
    return group_map


def _cascade(tmp_path: Path, group_map: SourceGroupMap, engine=None, **sources: str) -> CascadeResult:
    source_dir = _sources(tmp_path, **sources)
    return build_cascade(group_map, Expander(engine or PassthroughEngine(), source_dir))


# ---------------------------------------------------------------------------
# The cascade
# ---------------------------------------------------------------------------


class TestEndToEndScenario:
    @pytest.fixture()
    def result(self, tmp_path: Path) -> CascadeResult:
        return _cascade(
            tmp_path,
            _map("home"),
            critical=".btn { color: red; }",
            theme=".btn { color: red; } .card { padding: 4px; }",
            home=".btn { color: red; } .hero { margin: 0; }",
        )

    def test_critical_keeps_its_declaration(self, result: CascadeResult) -> None:
        assert aggregate_paths(result.outputs["critical"]) == {".btn > color:red"}

    def test_global_keeps_only_card(self, result: CascadeResult) -> None:
        assert result.outputs["theme"].to_css() == ".card {\n  padding: 4px;\n}\n"

    def test_page_keeps_only_hero(self, result: CascadeResult) -> None:
        assert result.outputs["home"].to_css() == ".hero {\n  margin: 0;\n}\n"

    def test_no_failures(self, result: CascadeResult) -> None:
        assert result.succeeded

    def test_output_order(self, result: CascadeResult) -> None:
        assert list(result.outputs) == ["critical", "theme", "home"]


class TestCascadeDisjointness:
    def test_tiers_do_not_share_paths(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path,
            _map("home", "checkout"),
            critical="@layer base { body { margin: 0; } } .btn { color: red; }",
            theme=(
                "@layer base { body { margin: 0; } html { line-height: 1.5; } }"
                " @media print { .btn { color: red; } }"
            ),
            home=(
                "@layer base { html { line-height: 1.5; } }"
                " @media print { .btn { color: red; } } .hero { margin: 0; }"
            ),
            checkout=".btn { color: red; } .pay { display: flex; }",
        )
        critical = aggregate_paths(result.outputs["critical"])
        theme = aggregate_paths(result.outputs["theme"])
        assert critical & theme == set()
        for page in ("home", "checkout"):
            assert aggregate_paths(result.outputs[page]) & (critical | theme) == set()
        assert aggregate_paths(result.outputs["home"]) == {".hero > margin:0"}
        assert aggregate_paths(result.outputs["checkout"]) == {".pay > display:flex"}

    def test_page_groups_are_not_deduplicated_against_each_other(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path,
            _map("home", "checkout"),
            critical="",
            theme="",
            home=".shared { color: blue; }",
            checkout=".shared { color: blue; }",
        )
        assert aggregate_paths(result.outputs["home"]) == {".shared > color:blue"}
        assert aggregate_paths(result.outputs["checkout"]) == {".shared > color:blue"}

    def test_different_breakpoints_are_kept(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path,
            _map("home"),
            critical="",
            theme="@media (width >= 40rem) { .a { margin: 0; } }",
            home="@media (width >= 48rem) { .a { margin: 0; } }",
        )
        assert aggregate_paths(result.outputs["home"]) == {
            "@media (width >= 48rem) > .a > margin:0"
        }


class TestEmptyGroups:
    def test_fully_deduplicated_page_still_has_output(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path,
            _map("home"),
            critical="",
            theme=".a { color: red; }",
            home=".a { color: red; }",
        )
        assert "home" in result.outputs
        assert result.outputs["home"].to_css() == ""

    def test_group_without_views_is_expanded(self, tmp_path: Path) -> None:
        engine = RecordingEngine()
        group_map = _map("empty")
        result = _cascade(tmp_path, group_map, engine, critical="", theme="", empty="")
        assert "empty" in result.outputs
        assert "@source" not in engine.inputs["empty"]


class TestSourceDirectives:
    def test_views_are_passed_as_source_directives(self, tmp_path: Path) -> None:
        engine = RecordingEngine()
        group_map = _map("home")
        group_map.add_view("home", tmp_path / "views" / "home.html")
        _cascade(tmp_path, group_map, engine, critical="", theme="", home=".a { color: red; }")
        composed = engine.inputs["home"]
        assert composed.startswith(f'@source "{(tmp_path / "views" / "home.html").as_posix()}";')
        assert composed.index("@source") < composed.index(".a")

    def test_leftover_source_directives_are_stripped(self, tmp_path: Path) -> None:
        group_map = _map("home")
        group_map.add_view("home", tmp_path / "home.html")
        result = _cascade(tmp_path, group_map, critical="", theme="", home=".a { color: red; }")
        assert "@source" not in result.outputs["home"].to_css()


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------


class TestMissingGroups:
    def test_missing_global_group_is_fatal(self, tmp_path: Path) -> None:
        group_map = SourceGroupMap(global_name="theme", critical_name="critical")
        group_map.ensure("critical")
        with pytest.raises(ConfigurationError):
            _cascade(tmp_path, group_map, critical="")

    def test_missing_critical_group_is_treated_as_empty(self, tmp_path: Path) -> None:
        engine = RecordingEngine()
        group_map = _map("home", include_critical=False)
        result = _cascade(
            tmp_path, group_map, engine,
            critical="", theme=".a { color: red; }", home=".b { color: red; }",
        )
        assert result.succeeded
        assert "@source" not in engine.inputs["critical"]
        assert aggregate_paths(result.outputs["theme"]) == {".a > color:red"}


class TestExpansionFailures:
    def test_global_failure_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(CascadeError):
            _cascade(
                tmp_path, _map("home"), RecordingEngine(failing=("theme",)),
                critical="", theme="", home="",
            )

    def test_page_failure_skips_only_that_group(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path, _map("home", "checkout"), RecordingEngine(failing=("home",)),
            critical="", theme="", home=".a { color: red; }", checkout=".b { color: red; }",
        )
        assert "home" not in result.outputs
        assert "home" in result.failures
        assert aggregate_paths(result.outputs["checkout"]) == {".b > color:red"}

    def test_missing_page_source_file_is_a_group_failure(self, tmp_path: Path) -> None:
        result = _cascade(tmp_path, _map("orphan"), critical="", theme=".a { color: red; }")
        assert "orphan" in result.failures
        assert "theme" in result.outputs

    def test_critical_failure_leaves_global_unpruned(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path, _map(), RecordingEngine(failing=("critical",)),
            critical=".a { color: red; }", theme=".a { color: red; }",
        )
        assert "critical" not in result.outputs
        assert "critical" in result.failures
        assert aggregate_paths(result.outputs["theme"]) == {".a > color:red"}

    def test_invalid_engine_output_is_a_group_failure(self, tmp_path: Path) -> None:
        result = _cascade(
            tmp_path, _map("broken"),
            critical="", theme="", broken=".a { color: red;",
        )
        assert "broken" in result.failures
        assert "theme" in result.outputs

    def test_undecodable_page_source_is_a_group_failure(self, tmp_path: Path) -> None:
        source_dir = _sources(tmp_path, critical="", theme="", other=".c { color: blue; }")
        (source_dir / "home.css").write_bytes(b".b{content:'\xff'}")
        result = build_cascade(
            _map("home", "other"), Expander(PassthroughEngine(), source_dir)
        )
        assert "home" in result.failures
        assert "home" not in result.outputs
        assert aggregate_paths(result.outputs["other"]) == {".c > color:blue"}
