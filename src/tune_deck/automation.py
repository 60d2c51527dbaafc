"""osascript-backed automation boundary."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Callable, Optional, Protocol

from tune_deck.errors import InvocationError

logger = logging.getLogger(__name__)

OSASCRIPT = "osascript"
DEFAULT_TIMEOUT = 5.0


class ScriptRunner(Protocol):
    def run(self, script: str) -> str: ...


class AutomationRunner:
    """Runs AppleScript text through ``osascript`` and returns its stdout."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        executable: Optional[str] = None,
        spawn: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self._timeout = timeout
        self._executable = executable or OSASCRIPT
        self._spawn = spawn

    @property
    def timeout(self) -> float:
        return self._timeout

    def run(self, script: str) -> str:
        """Execute ``script`` and return the raw text payload."""
        try:
            proc = self._spawn(
                [self._executable, "-e", script],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("osascript timed out after %.1fs", self._timeout)
            raise InvocationError(
                f"osascript timed out after {self._timeout:.1f}s"
            ) from exc
        except OSError as exc:
            raise InvocationError(f"osascript could not be started: {exc}") from exc
        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            logger.debug("osascript exit=%s stderr=%s", proc.returncode, stderr)
            raise InvocationError(_format_stderr(stderr) or "osascript failed")
        return proc.stdout or ""


def osascript_available() -> bool:
    """Return True when the osascript executable is on PATH."""
    return shutil.which(OSASCRIPT) is not None


def _format_stderr(stderr: str) -> str:
    low = stderr.lower()
    if "not authorized" in low or "not permitted" in low:
        return (
            "Permission denied - enable Automation for your terminal in "
            "System Settings > Privacy & Security"
        )
    return stderr
