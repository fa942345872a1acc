"""
Selfmade project checker: automated checks for static front-end projects

Usage:
  main.py PROJECT [--lang=LANG] [--config=PATH] [--output=PATH] [--locale=LOCALE] [--artifacts=DIR] [--verbose]
  main.py (-h | --help)

Options:
  --lang=LANG        Expected value of the page `lang` attribute [default: ru].
  --config=PATH      Path to YAML configuration file [default: checker_config.yml].
  --output=PATH      Where to write the text report [default: result.txt].
  --locale=LOCALE    Language of the report messages (ru or en) [default: ru].
  --artifacts=DIR    Where to keep the layout screenshots (defaults to `artifacts_dir`
                     from the config, then ./artifacts).
  --verbose          Enable debug logging.
  -h --help          Show this screen.
"""

import logging
import sys
from pathlib import Path

from docopt import docopt

from checker.config import DEFAULT_ARTIFACTS_DIR, DEFAULT_CONFIG_FILENAME
from checker.config_loader import CheckerSettings, load_config
from checker.messages import MESSAGES
from checker.report import print_summary, save_report
from checker.runner import run_tests_sync


def main() -> int:
    """
    Main CLI entrypoint.

    Returns:
        Exit code (0 when the project passes, 1 when checks failed,
        2 when the run itself could not complete).
    """
    arguments = docopt(__doc__)
    verbose = arguments["--verbose"]
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    project_path = Path(arguments["PROJECT"])
    if not project_path.is_dir():
        print(f"Error: Project directory not found: {project_path}", file=sys.stderr)
        return 2

    locale = arguments["--locale"]
    if locale not in MESSAGES:
        print(f"Error: Unknown locale '{locale}', expected one of: {', '.join(MESSAGES)}", file=sys.stderr)
        return 2

    config_path = Path(arguments["--config"])
    if config_path.exists():
        try:
            settings = load_config(config_path)
            print(f"Loaded configuration from {config_path}")
        except Exception as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return 2
    elif config_path.name != DEFAULT_CONFIG_FILENAME:
        print(f"Error: Configuration file not found at {config_path}", file=sys.stderr)
        return 2
    else:
        settings = CheckerSettings()

    if arguments["--artifacts"]:
        settings = settings.model_copy(update={"artifacts_dir": Path(arguments["--artifacts"])})
    elif settings.artifacts_dir is None:
        settings = settings.model_copy(update={"artifacts_dir": Path(DEFAULT_ARTIFACTS_DIR)})

    print(f"Checking {project_path}...")
    try:
        errors = run_tests_sync(project_path, arguments["--lang"], settings)
    except KeyboardInterrupt:
        print("\nCheck interrupted by user.", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        if verbose:
            import traceback
            traceback.print_exc()
        return 2

    output_files = save_report(errors, Path(arguments["--output"]), locale)
    print(f"  Report: {output_files['text']}")
    print_summary(errors, locale)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
