"""
Tests for the check orchestration.

All checks and the page driver are mocked so the tests only exercise
gating, fan-out, result flattening and page release.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from checker import runner
from checker.config_loader import CheckerSettings
from checker.models import (
    LangAttrMissing,
    LangValues,
    LayoutDifferent,
    LogoWrapper,
    NameValues,
    StructureDirectoryMissing,
    TitleEmmet,
)

FANOUT_CHECKS = [
    "check_w3c",
    "check_css",
    "check_order_stylesheet_links",
    "check_alternative_fonts",
    "check_semantic_tags",
    "check_lang",
    "check_title_emmet",
    "check_reset_margins",
    "check_logo_wrapper",
    "check_prefix_for_email_and_phone",
    "check_layout",
]


class FakeBrowser:
    """Records page opening and closing."""

    def __init__(self) -> None:
        self.page = MagicMock(name="page")
        self.opened: list[Path] = []
        self.closed = 0

    @asynccontextmanager
    async def open_page(self, html_path, viewport=None, timeout_ms=None):
        self.opened.append(Path(html_path))
        try:
            yield self.page
        finally:
            self.closed += 1


@pytest.fixture
def browser():
    fake = FakeBrowser()
    with patch("checker.runner.open_page", side_effect=fake.open_page) as mock_open:
        fake.mock = mock_open
        yield fake


def _patch_fanout(results: dict[str, list]):
    """Patch every fan-out check; unspecified checks pass."""
    patches = {}
    for name in FANOUT_CHECKS:
        value = results.get(name, [])
        if name == "check_alternative_fonts":
            patches[name] = MagicMock(return_value=value)
        else:
            patches[name] = AsyncMock(return_value=value)
    return patch.multiple("checker.checks", **patches), patches


def test_structure_errors_stop_the_run(browser, project_dir: Path) -> None:
    structure_errors = [StructureDirectoryMissing(values=NameValues(name="fonts"))]
    fanout, mocks = _patch_fanout({})

    with patch("checker.checks.check_structure", return_value=structure_errors), fanout:
        errors = asyncio.run(runner.run_tests(project_dir, "ru"))

    assert errors == structure_errors
    assert browser.mock.call_count == 0
    for mock in mocks.values():
        assert mock.call_count == 0


def test_real_structure_check_gates_on_missing_directory(browser, tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text("", encoding="utf-8")
    (tmp_path / "styles").mkdir()
    (tmp_path / "styles" / "style.css").write_text("", encoding="utf-8")

    errors = asyncio.run(runner.run_tests(tmp_path, "ru"))

    assert [e.to_dict() for e in errors] == [{"id": "structure.directory", "values": {"name": "fonts"}}]
    assert browser.opened == []


def test_all_checks_pass(browser, project_dir: Path, tmp_path: Path) -> None:
    settings = CheckerSettings(artifacts_dir=tmp_path / "artifacts")
    fanout, mocks = _patch_fanout({})

    with fanout:
        errors = asyncio.run(runner.run_tests(project_dir, "ru", settings))

    assert errors == []
    assert browser.opened == [project_dir / "index.html"]
    assert browser.closed == 1
    for name, mock in mocks.items():
        assert mock.call_count == 1, name


def test_results_are_flattened_in_launch_order(browser, project_dir: Path, tmp_path: Path) -> None:
    lang_error = LangAttrMissing(values=LangValues(lang="en"))
    fanout, _ = _patch_fanout({
        "check_layout": [LayoutDifferent()],
        "check_lang": [lang_error],
        "check_title_emmet": [TitleEmmet()],
        "check_logo_wrapper": [LogoWrapper()],
    })

    with fanout:
        errors = asyncio.run(runner.run_tests(project_dir, "en", CheckerSettings(artifacts_dir=tmp_path)))

    assert errors == [lang_error, TitleEmmet(), LogoWrapper(), LayoutDifferent()]


def test_checks_receive_shared_page_and_settings(browser, project_dir: Path, tmp_path: Path) -> None:
    settings = CheckerSettings(
        artifacts_dir=tmp_path / "out",
        semantic_tags=["main"],
        allowed_fonts=["Roboto"],
        mismatch_threshold=5,
    )
    fanout, mocks = _patch_fanout({})

    with fanout:
        asyncio.run(runner.run_tests(project_dir, "en", settings))

    mocks["check_lang"].assert_awaited_once_with(browser.page, "en")
    mocks["check_semantic_tags"].assert_awaited_once_with(browser.page, ["main"])
    mocks["check_alternative_fonts"].assert_called_once_with(project_dir / "styles" / "style.css", ["Roboto"])
    layout_args = mocks["check_layout"].await_args.args
    assert layout_args[0] is browser.page
    assert layout_args[2] == tmp_path / "out"
    assert layout_args[4] == 5


def test_page_is_released_when_a_check_fails(browser, project_dir: Path, tmp_path: Path) -> None:
    fanout, mocks = _patch_fanout({})
    mocks["check_w3c"].side_effect = ConnectionError("validator down")

    with fanout:
        with pytest.raises(ConnectionError):
            asyncio.run(runner.run_tests(project_dir, "ru", CheckerSettings(artifacts_dir=tmp_path)))

    assert browser.closed == 1


def test_temporary_artifacts_directory_is_removed(browser, project_dir: Path) -> None:
    fanout, mocks = _patch_fanout({})

    with fanout:
        asyncio.run(runner.run_tests(project_dir, "ru"))

    artifacts_dir = mocks["check_layout"].await_args.args[2]
    assert artifacts_dir.name.startswith("checker-")
    assert not artifacts_dir.exists()


def test_run_tests_sync(browser, project_dir: Path, tmp_path: Path) -> None:
    fanout, _ = _patch_fanout({"check_logo_wrapper": [LogoWrapper()]})

    with fanout:
        errors = runner.run_tests_sync(project_dir, "ru", CheckerSettings(artifacts_dir=tmp_path))

    assert errors == [LogoWrapper()]


def test_failure_cancels_other_checks_before_release(browser, project_dir: Path, tmp_path: Path) -> None:
    artifacts = tmp_path / "artifacts"
    seen: dict[str, object] = {}

    async def slow_layout(page, reference, artifacts_dir, options, threshold):
        try:
            await asyncio.sleep(0.1)
        except asyncio.CancelledError:
            seen["closed_at_cancel"] = browser.closed
            raise
        seen["finished"] = True
        return []

    async def scenario() -> None:
        with pytest.raises(ConnectionError):
            await runner.run_tests(project_dir, "ru", CheckerSettings(artifacts_dir=artifacts))
        # keep the loop alive long enough for a leaked task to finish
        await asyncio.sleep(0.2)

    fanout, mocks = _patch_fanout({})
    mocks["check_w3c"].side_effect = ConnectionError("validator down")
    mocks["check_layout"].side_effect = slow_layout

    with fanout:
        asyncio.run(scenario())

    assert "finished" not in seen
    assert seen["closed_at_cancel"] == 0
    assert browser.closed == 1
