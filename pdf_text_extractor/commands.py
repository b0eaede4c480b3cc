"""Thin wrapper around external processes.

Process-management failures (binary missing, cannot spawn) are reported in the
returned :class:`CommandResult` instead of being raised, so callers only deal
with one shape of outcome.
"""

import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from pdf_text_extractor.logger import Timer, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    launch_error: Optional[str] = None
    elapsed_ms: int = 0

    @property
    def launched(self) -> bool:
        return self.launch_error is None

    @property
    def ok(self) -> bool:
        return self.launched and self.returncode == 0

    def describe_failure(self) -> str:
        if not self.launched:
            return f"{self.args[0]} could not be started: {self.launch_error}"
        detail = self.stderr.strip() or "no error output"
        return f"{self.args[0]} exited with status {self.returncode}: {detail}"


class CommandRunner:
    """Runs commands synchronously and captures their output."""

    def which(self, command: str) -> Optional[str]:
        return shutil.which(command)

    def run(self, args: Sequence[str]) -> CommandResult:
        args = tuple(str(arg) for arg in args)
        logger.debug("Running external command", extra_data={"args": " ".join(args)})

        with Timer(args[0]) as timer:
            try:
                completed = subprocess.run(
                    args,
                    capture_output=True,
                    text=True,
                    errors="replace",
                )
            except OSError as exc:
                return CommandResult(args=args, launch_error=str(exc))

        result = CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            elapsed_ms=timer.get_elapsed_ms(),
        )
        if not result.ok:
            logger.debug(
                "External command failed",
                extra_data={"failure": result.describe_failure()},
            )
        return result
