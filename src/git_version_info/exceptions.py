"""Custom exceptions for version resolution."""

from __future__ import annotations


class VersionResolutionError(RuntimeError):
    """Wrap an error with exit code and status."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int,
        status: str,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.status = status
        self.context = context or {}


class GitUnavailableError(RuntimeError):
    """Raised when the git executable cannot be located or started."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        self.reason = reason
        super().__init__(f"git executable not available: {executable} ({reason})")


class GitCommandError(RuntimeError):
    """Raised when a git command fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str, stdout: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        display = " ".join(command)
        super().__init__(f"git command failed: {display} ({returncode})")


class InvalidVersionTagError(ValueError):
    """Raised by the strict parser when text is not a SemVer 2.0 version."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"not a valid SemVer 2.0 version: {text!r}")
