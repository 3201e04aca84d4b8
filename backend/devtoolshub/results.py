from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolResult:
    """Tagged success/failure value returned by every fallible tool.

    Subclasses add the payload fields for their operation. On failure
    ``error`` carries the user-facing message and the payload fields keep
    their empty defaults.
    """

    ok: bool = True
    error: str | None = None

    @classmethod
    def failure(cls, error: str):
        return cls(ok=False, error=error)
