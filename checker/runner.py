"""
Check orchestration.

Runs the structure check first and, when the layout is complete, opens
the page once and runs every other check concurrently against it.
"""

import asyncio
import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from . import checks
from .config import INDEX_FILENAME, MAIN_STYLESHEET
from .config_loader import CheckerSettings
from .models import CheckError
from .page import open_page
from .validators import MarkupValidator, StylesheetLinter

logger = logging.getLogger(__name__)


@contextmanager
def artifacts_directory(artifacts_dir: Path | None) -> Iterator[Path]:
    """Yield the configured artifacts directory, or a temporary one removed afterwards."""
    if artifacts_dir is not None:
        yield Path(artifacts_dir)
        return
    with tempfile.TemporaryDirectory(prefix="checker-") as tmp_dir:
        yield Path(tmp_dir)


async def _run_sync(func, *args) -> list[CheckError]:
    return func(*args)


async def _gather_or_cancel(*coros) -> list[list[CheckError]]:
    """
    Run checks concurrently and return their results in launch order.

    When one check raises, the others are cancelled and awaited before the
    exception propagates, so none of them outlives the shared page.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def run_tests(
    project_path: Path,
    lang: str,
    settings: CheckerSettings | None = None,
) -> list[CheckError]:
    """
    Run every check against a student's project.

    Structure errors stop the run before the page is opened. Otherwise
    the remaining checks share one page and their errors are returned in
    launch order. A failing collaborator aborts the whole run; the
    browser is closed either way.

    Args:
        project_path: Root of the student's project.
        lang: Expected value of the `lang` attribute.
        settings: Run configuration, defaults when omitted.

    Returns:
        Flat list of errors, empty when the project passes.
    """
    settings = settings or CheckerSettings()
    project_path = Path(project_path)

    structure_errors = checks.check_structure(project_path, settings.structure)
    if structure_errors:
        logger.info("Structure check failed with %d error(s), skipping other checks", len(structure_errors))
        return structure_errors

    html_path = project_path / INDEX_FILENAME
    validator = MarkupValidator(url=settings.validator_url, timeout_seconds=settings.validator_timeout)
    linter = StylesheetLinter(command=settings.stylelint_command, config=settings.stylelint_config)

    with artifacts_directory(settings.artifacts_dir) as artifacts_dir:
        async with open_page(html_path, settings.viewport, settings.navigation_timeout_ms) as page:
            results = await _gather_or_cancel(
                checks.check_w3c(html_path, validator),
                checks.check_css(project_path, linter),
                checks.check_order_stylesheet_links(page, settings.stylesheet_order),
                _run_sync(checks.check_alternative_fonts, project_path / MAIN_STYLESHEET, settings.allowed_fonts),
                checks.check_semantic_tags(page, settings.semantic_tags),
                checks.check_lang(page, lang),
                checks.check_title_emmet(page),
                checks.check_reset_margins(page, settings.reset_margin_tags),
                checks.check_logo_wrapper(page),
                checks.check_prefix_for_email_and_phone(page),
                checks.check_layout(
                    page,
                    settings.layout_reference,
                    artifacts_dir,
                    settings.image_diff,
                    settings.mismatch_threshold,
                ),
            )

    errors = [error for result in results for error in result]
    logger.info("Checks finished with %d error(s)", len(errors))
    return errors


def run_tests_sync(
    project_path: Path,
    lang: str,
    settings: CheckerSettings | None = None,
) -> list[CheckError]:
    """Blocking wrapper around `run_tests`."""
    return asyncio.run(run_tests(project_path, lang, settings))
