"""Shared type definitions for sweethosts.

This module contains enums and dataclasses shared across subpackages to
avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum


class NodeKind(str, Enum):
    """Kind of a profile tree node.

    Leaf kinds carry a content blob; folder kinds only group children.
    """

    LOCAL = "local"
    REMOTE = "remote"
    GROUP = "group"
    FOLDER = "folder"


class ApplyStatus(str, Enum):
    """Status of a hosts apply operation."""

    INSTALLED = "installed"
    INSTALLED_SANDBOXED = "installed_sandboxed"
    PERMISSION_DENIED = "permission_denied"
    IO_FAILURE = "io_failure"


class WriteMode(str, Enum):
    """How composed content is combined with the system hosts file."""

    APPEND = "append"
    OVERWRITE = "overwrite"


@dataclass
class ApplyOutcome:
    """Result of installing a hosts document.

    Attributes:
        status: Outcome status.
        sandbox_path: Temp file written in sandbox mode.
        message: Human-readable detail (captured stderr on elevation failure).
        code: Stable error code for failed outcomes.
        old_content: System hosts content before the apply.
        new_content: Document that was installed.
    """

    status: ApplyStatus
    sandbox_path: str | None = None
    message: str | None = None
    code: str | None = None
    old_content: str = ""
    new_content: str = ""

    @property
    def success(self) -> bool:
        return self.status in (
            ApplyStatus.INSTALLED,
            ApplyStatus.INSTALLED_SANDBOXED,
        )

    def to_dict(self) -> dict[str, object]:
        """Render the outcome for JSON frontends (without file contents)."""
        return {
            "success": self.success,
            "status": self.status.value,
            "sandbox_path": self.sandbox_path,
            "message": self.message,
            "code": self.code,
        }


__all__ = [
    "ApplyOutcome",
    "ApplyStatus",
    "NodeKind",
    "WriteMode",
]
