"""
Report writer for check results.

Saves the rendered messages as a plain-text report (empty on success)
next to a JSON dump of the raw errors.
"""

import json
from pathlib import Path

from .config import DEFAULT_LOCALE
from .messages import render
from .models import CheckError

_RED = "\033[31m"
_GREEN = "\033[32m"
_RESET = "\033[0m"


def save_report(
    errors: list[CheckError],
    output_path: Path,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Path]:
    """
    Save the run results.

    Creates:
    - A text file with one rendered message per line
    - A JSON file with the structured errors

    Args:
        errors: Errors returned by the run.
        output_path: Path of the text report.
        locale: Message catalog to render with.

    Returns:
        Dictionary of output file paths.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    lines = [render(error, locale) for error in errors]
    with open(output_path, "w", encoding="utf-8") as f:
        f.write("".join(f"{line}\n" for line in lines))

    json_path = output_path.with_suffix(".json")
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump([error.to_dict() for error in errors], f, ensure_ascii=False, indent=2)

    return {"text": output_path, "json": json_path}


def print_summary(errors: list[CheckError], locale: str = DEFAULT_LOCALE) -> None:
    """
    Print the run outcome to console.

    Args:
        errors: Errors returned by the run.
        locale: Message catalog to render with.
    """
    if not errors:
        passed = "Тесты успешно пройдены" if locale == "ru" else "All checks passed"
        print(f"{_GREEN}{passed}{_RESET}")
        return

    header = "Исправьте ошибки:" if locale == "ru" else "Fix the following errors:"
    print(f"{_RED}{header}{_RESET}")
    for error in errors:
        print(f"  - {render(error, locale)}")
