"""Error taxonomy for the resolve pipeline.

Every stage raises one of these; only the CLI turns them into an exit status.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ErrorCode(str, Enum):
    PROBE = "E_PROBE"
    TOOL_LAUNCH = "E_TOOL_LAUNCH"
    TOOL_EXIT = "E_TOOL_EXIT"
    MALFORMED_INPUT = "E_MALFORMED_INPUT"
    FILESYSTEM = "E_FILESYSTEM"
    INTEGRITY = "E_INTEGRITY"


class BuildError(Exception):
    """Base error carrying a stable code, an optional hint and context."""

    code: ErrorCode = ErrorCode.TOOL_EXIT
    fatal = True

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for key, value in self.context.items():
            if value:
                parts.append(f"  {key}: {value}")
        return "\n".join(parts)


class ProbeError(BuildError):
    """pkg-config could not answer; the pipeline falls back to a source build."""

    code = ErrorCode.PROBE
    fatal = False


class ToolLaunchError(BuildError):
    code = ErrorCode.TOOL_LAUNCH


class ToolExitError(BuildError):
    code = ErrorCode.TOOL_EXIT

    def __init__(self, message: str, *, returncode: int | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.returncode = returncode


class MalformedInputError(BuildError):
    code = ErrorCode.MALFORMED_INPUT


class FilesystemError(BuildError):
    code = ErrorCode.FILESYSTEM


class IntegrityError(BuildError):
    code = ErrorCode.INTEGRITY
