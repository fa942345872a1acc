"""
Clients for the external validators.

`MarkupValidator` posts HTML to the W3C Nu checker, `StylesheetLinter`
runs the stylelint CLI. Both report findings as plain data and raise
on infrastructure failures.
"""

import asyncio
import json
import logging
import tempfile
from pathlib import Path
from typing import Any

import requests

from .config import (
    STYLELINT_COMMAND,
    STYLELINT_CONFIG,
    VALIDATOR_HEADERS,
    VALIDATOR_TIMEOUT_SECONDS,
    VALIDATOR_URL,
)

logger = logging.getLogger(__name__)

# stylelint exits with 2 when it found problems, anything else non-zero is a crash
_STYLELINT_OK_CODES = (0, 2)


class CollaboratorError(Exception):
    """An external tool the checks depend on failed."""


class ValidatorError(CollaboratorError):
    """The markup validator could not be reached or answered garbage."""


class StylelintError(CollaboratorError):
    """The stylelint process crashed or produced unreadable output."""


class MarkupValidator:
    """
    Client for the W3C Nu HTML checker.
    """

    def __init__(
        self,
        url: str = VALIDATOR_URL,
        timeout_seconds: int = VALIDATOR_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the validator client.

        Args:
            url: Checker endpoint, must answer JSON.
            timeout_seconds: Request timeout.
            session: Optional requests session to reuse.
        """
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def validate(self, html: bytes) -> list[dict[str, Any]]:
        """
        Validate an HTML document.

        Args:
            html: Raw document bytes, sent as is so the checker detects the encoding.

        Returns:
            The checker's messages, each with at least `type` and `message`.

        Raises:
            ValidatorError: On network errors, HTTP errors or a malformed answer.
        """
        logger.debug("Posting %d bytes to %s", len(html), self.url)
        try:
            response = self.session.post(
                self.url,
                data=html,
                headers=VALIDATOR_HEADERS,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise ValidatorError(f"Markup validator request failed: {e}") from e
        except ValueError as e:
            raise ValidatorError(f"Markup validator returned invalid JSON: {e}") from e

        messages = payload.get("messages") if isinstance(payload, dict) else None
        if not isinstance(messages, list):
            raise ValidatorError("Markup validator response has no 'messages' list")
        return messages

    async def validate_async(self, html: bytes) -> list[dict[str, Any]]:
        """Run `validate` without blocking the event loop."""
        return await asyncio.to_thread(self.validate, html)


class StylesheetLinter:
    """
    Runs the stylelint CLI with a fixed rule set.
    """

    def __init__(
        self,
        command: list[str] | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the linter.

        Args:
            command: Command prefix that starts stylelint.
            config: Stylelint configuration object.
        """
        self.command = list(command or STYLELINT_COMMAND)
        self.config = config or STYLELINT_CONFIG

    async def lint(self, pattern: str) -> list[dict[str, Any]]:
        """
        Lint every stylesheet matching a glob.

        Args:
            pattern: POSIX glob of the files to lint.

        Returns:
            One result per file with `source` and `warnings`
            (each warning has `rule`, `line`, `column` and `text`).

        Raises:
            StylelintError: If stylelint crashes or its output is not JSON.
            FileNotFoundError: If the stylelint command is not installed.
        """
        with tempfile.TemporaryDirectory() as tmp_dir:
            config_path = Path(tmp_dir) / "stylelint.config.json"
            config_path.write_text(json.dumps(self.config), encoding="utf-8")

            cmd = [
                *self.command,
                pattern,
                "--config", str(config_path),
                "--formatter", "json",
                "--allow-empty-input",
            ]
            logger.debug("Executing: %s", " ".join(cmd))
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()

        if process.returncode not in _STYLELINT_OK_CODES:
            raise StylelintError(
                f"stylelint exited with code {process.returncode}: {stderr.decode(errors='replace').strip()}"
            )

        # Newer releases print the JSON report on stderr
        output = stdout.decode("utf-8", errors="replace").strip() or stderr.decode("utf-8", errors="replace").strip()
        if not output:
            return []
        try:
            results = json.loads(output)
        except json.JSONDecodeError as e:
            raise StylelintError(f"stylelint produced invalid JSON: {e}") from e
        if not isinstance(results, list):
            raise StylelintError("stylelint report is not a list")
        return results
