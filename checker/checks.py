"""
Individual project checks.

Every check verifies a single rule and returns a list of errors, empty
when the rule holds. Checks receive already acquired resources (page,
paths, validator clients) and never catch collaborator failures.
"""

import asyncio
import logging
from pathlib import Path

import tinycss2
from playwright.async_api import Page

from .config import (
    EMMET_TITLE,
    LAYOUT_DIFF_FILENAME,
    LAYOUT_MISMATCH_THRESHOLD,
    LAYOUT_SCREENSHOT_FILENAME,
    PROJECT_STRUCTURE,
    RESET_PROPERTIES,
)
from .image_compare import compare_images
from .models import (
    AlternativeFonts,
    CheckError,
    DirNode,
    FontsValues,
    ImageDiffOptions,
    LangAttrMissing,
    LangValues,
    LayoutDifferent,
    LogoWrapper,
    NotResetMargins,
    OrderStylesheetLinks,
    PrefixForEmailAndPhone,
    SemanticTagsMissing,
    StylelintValues,
    StylelintWarning,
    TagNamesValues,
    TitleEmmet,
    W3CError,
    W3CValues,
)
from .page import evaluate, get_style, has_element, take_screenshot
from .tree import diff, scan
from .validators import MarkupValidator, StylesheetLinter

logger = logging.getLogger(__name__)

# At-rules whose block holds rules rather than declarations
_NESTED_RULE_AT_RULES = {"media", "supports", "layer", "container", "document"}


def check_structure(project_path: Path, structure: DirNode = PROJECT_STRUCTURE) -> list[CheckError]:
    """
    Check that the project contains the required files and directories.

    Args:
        project_path: Root of the student's project.
        structure: Required layout; its root name is ignored.

    Returns:
        One `structure.file` / `structure.directory` error per missing node.
    """
    project_tree = scan(Path(project_path))
    return diff(structure.children, project_tree.children)


async def check_w3c(html_path: Path, validator: MarkupValidator) -> list[CheckError]:
    """Validate the page markup with the W3C Nu checker."""
    html_path = Path(html_path)
    messages = await validator.validate_async(html_path.read_bytes())

    return [
        W3CError(values=W3CValues(
            fileName=html_path.name,
            line=item.get("lastLine"),
            message=item.get("message", ""),
        ))
        for item in messages
        if item.get("type") == "error"
    ]


async def check_css(project_path: Path, linter: StylesheetLinter) -> list[CheckError]:
    """Lint every stylesheet of the project."""
    pattern = (Path(project_path) / "**" / "*.css").as_posix()
    results = await linter.lint(pattern)

    errors: list[CheckError] = []
    for result in results:
        file_name = Path(result.get("source") or "").name
        for warning in result.get("warnings", []):
            errors.append(StylelintWarning(
                id=f"stylelint.{warning['rule']}",
                values=StylelintValues(
                    fileName=file_name,
                    line=warning.get("line"),
                    column=warning.get("column"),
                    text=warning.get("text", ""),
                ),
            ))
    return errors


async def check_order_stylesheet_links(page: Page, files: list[str]) -> list[CheckError]:
    """Check that stylesheets are linked in the given order."""
    selectors = " ~ ".join(f'link[href*="{file}"]' for file in files)
    if not await has_element(page, selectors):
        return [OrderStylesheetLinks()]
    return []


def _font_family_values(rules: list) -> list[str]:
    """Collect serialized `font-family` values from parsed CSS rules."""
    values: list[str] = []
    for rule in rules:
        if rule.type not in ("qualified-rule", "at-rule") or rule.content is None:
            continue
        if rule.type == "at-rule" and rule.lower_at_keyword in _NESTED_RULE_AT_RULES:
            nested = tinycss2.parse_rule_list(rule.content, skip_comments=True, skip_whitespace=True)
            values.extend(_font_family_values(nested))
            continue

        declarations = tinycss2.parse_declaration_list(rule.content, skip_comments=True, skip_whitespace=True)
        values.extend(
            tinycss2.serialize(decl.value).strip()
            for decl in declarations
            if decl.type == "declaration" and decl.lower_name == "font-family"
        )
    return values


def check_alternative_fonts(css_path: Path, fonts: list[str]) -> list[CheckError]:
    """
    Check that every `font-family` declaration uses a whitelisted font.

    A declaration passes when it mentions at least one of `fonts`;
    fallbacks after it are allowed.

    Args:
        css_path: Stylesheet to inspect.
        fonts: Whitelisted font family names.

    Returns:
        A single `alternativeFonts` error listing the whitelist, or nothing.
    """
    # Encoding comes from the BOM or @charset; undecodable bytes are replaced
    rules, _encoding = tinycss2.parse_stylesheet_bytes(
        Path(css_path).read_bytes(), skip_comments=True, skip_whitespace=True
    )

    alternative = [
        value for value in _font_family_values(rules)
        if not any(font in value for font in fonts)
    ]
    if alternative:
        logger.debug("Fonts outside the whitelist: %s", alternative)
        return [AlternativeFonts(values=FontsValues(fonts=", ".join(fonts)))]
    return []


async def check_semantic_tags(page: Page, tags: list[str]) -> list[CheckError]:
    """Check that the page uses every semantic tag."""
    found = await asyncio.gather(*(has_element(page, tag) for tag in tags))
    missing = [tag for tag, is_found in zip(tags, found) if not is_found]

    if missing:
        return [SemanticTagsMissing(values=TagNamesValues(tagNames=", ".join(missing)))]
    return []


async def check_lang(page: Page, lang: str) -> list[CheckError]:
    """Check the `lang` attribute of the document."""
    if not await has_element(page, f"html[lang*={lang}]"):
        return [LangAttrMissing(values=LangValues(lang=lang))]
    return []


async def check_title_emmet(page: Page) -> list[CheckError]:
    """Check that the title was changed from the Emmet boilerplate."""
    title = await evaluate(page, "() => document.title")
    if title == EMMET_TITLE:
        return [TitleEmmet()]
    return []


async def check_reset_margins(page: Page, tags: list[str]) -> list[CheckError]:
    """
    Check that browser default margins and paddings are reset.

    Args:
        page: Loaded page.
        tags: Tag names whose computed margin and padding must be `0px`.

    Returns:
        A single `notResetMargins` error naming the offending tags, or nothing.
    """
    styles = await asyncio.gather(*(get_style(page, tag, RESET_PROPERTIES) for tag in tags))
    not_reset = [
        tag for tag, values in zip(tags, styles)
        if any(value != "0px" for value in values)
    ]

    if not_reset:
        return [NotResetMargins(values=TagNamesValues(tagNames=", ".join(not_reset)))]
    return []


async def check_logo_wrapper(page: Page) -> list[CheckError]:
    """Check that the logo image is wrapped in a link."""
    if not await has_element(page, 'a img[src*="logo"]'):
        return [LogoWrapper()]
    return []


async def check_prefix_for_email_and_phone(page: Page) -> list[CheckError]:
    """Check that contact links use the `mailto:` and `tel:` schemes."""
    has_email = await has_element(page, 'a[href^="mailto"]')
    has_phone = await has_element(page, 'a[href^="tel"]')

    if not has_email or not has_phone:
        return [PrefixForEmailAndPhone()]
    return []


async def check_layout(
    page: Page,
    reference_path: Path,
    artifacts_dir: Path,
    options: ImageDiffOptions | None = None,
    threshold: float = LAYOUT_MISMATCH_THRESHOLD,
) -> list[CheckError]:
    """
    Compare a full-page screenshot with the reference layout.

    Writes the screenshot and the diff image into `artifacts_dir`.

    Args:
        page: Loaded page.
        reference_path: Reference screenshot.
        artifacts_dir: Directory receiving the screenshot and the diff.
        options: Comparison options.
        threshold: Mismatch percentage that is still accepted.

    Returns:
        A single `layoutDifferent` error when the mismatch exceeds the threshold.
    """
    artifacts_dir = Path(artifacts_dir)
    artifacts_dir.mkdir(parents=True, exist_ok=True)
    screenshot_path = await take_screenshot(page, artifacts_dir / LAYOUT_SCREENSHOT_FILENAME)

    result = compare_images(
        Path(reference_path).read_bytes(),
        screenshot_path.read_bytes(),
        options,
    )
    if result.diff_image is not None:
        (artifacts_dir / LAYOUT_DIFF_FILENAME).write_bytes(result.get_buffer())

    logger.info("Layout mismatch: %.2f%%", result.mismatch_percentage)
    if result.mismatch_percentage > threshold:
        return [LayoutDifferent()]
    return []
