"""
Configuration constants for the project checker.
"""

from pathlib import Path

from .models import DirNode, mkdir, mkfile


# Required project layout (the root name is never compared)
PROJECT_STRUCTURE: DirNode = mkdir("project", [
    mkfile("index.html"),
    mkdir("styles", [
        mkfile("style.css"),
    ]),
    mkdir("fonts", [
        mkfile("fonts.css"),
    ]),
])

# File patterns
INDEX_FILENAME: str = "index.html"
MAIN_STYLESHEET: Path = Path("styles") / "style.css"

# Page checks
STYLESHEET_ORDER: list[str] = ["fonts.css", "global.css", "style.css"]
ALLOWED_FONTS: list[str] = ["Inter", "EB Garamond"]
SEMANTIC_TAGS: list[str] = ["header", "main", "section", "footer"]
RESET_MARGIN_TAGS: list[str] = ["body"]
RESET_PROPERTIES: list[str] = ["margin", "padding"]
EMMET_TITLE: str = "Document"

# Layout comparison
LAYOUT_REFERENCE_FILENAME: str = "layout-canonical.jpg"
LAYOUT_SCREENSHOT_FILENAME: str = "layout.jpg"
LAYOUT_DIFF_FILENAME: str = "output.jpg"
# A run fails when the mismatch percentage is strictly greater than this
LAYOUT_MISMATCH_THRESHOLD: float = 10.0
VIEWPORT: dict[str, int] = {"width": 1440, "height": 900}
NAVIGATION_TIMEOUT_MS: int = 30_000

# W3C Nu HTML checker
VALIDATOR_URL: str = "https://validator.w3.org/nu/?out=json"
VALIDATOR_TIMEOUT_SECONDS: int = 60
VALIDATOR_HEADERS: dict[str, str] = {
    "content-type": "text/html",
    "user-agent": "Mozilla/5.0 (platform; rv:geckoversion) Gecko/geckotrail Firefox/firefoxversion",
}

# Stylelint (stylistic rules were dropped from core stylelint in v16)
STYLELINT_COMMAND: list[str] = ["npx", "--yes", "stylelint@15"]
STYLELINT_CONFIG: dict = {
    "rules": {
        "no-duplicate-selectors": True,
        "block-no-empty": True,
        "declaration-block-no-duplicate-properties": True,
        "block-opening-brace-space-before": "always",
        "declaration-block-semicolon-newline-after": "always",
        "block-opening-brace-newline-after": "always",
        "block-closing-brace-newline-before": "always",
    },
}

# Report
DEFAULT_LOCALE: str = "ru"
DEFAULT_CONFIG_FILENAME: str = "checker_config.yml"
DEFAULT_ARTIFACTS_DIR: str = "artifacts"
