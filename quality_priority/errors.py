from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorCode:
    code: str
    message: str


PROFILE_NOT_FOUND = ErrorCode(
    "PROFILE_NOT_FOUND",
    "Requested quality profile was not found.",
)
MALFORMED_EPHEMERAL_RULES = ErrorCode(
    "MALFORMED_EPHEMERAL_RULES",
    "Temporary reorder rules could not be decoded.",
)
CONFIG_INVALID = ErrorCode(
    "CONFIG_INVALID",
    "Configuration failed validation.",
)


class QualityPriorityError(RuntimeError):
    def __init__(self, err: ErrorCode, detail: str = "") -> None:
        suffix = f" detail={detail}" if detail else ""
        super().__init__(f"{err.code}: {err.message}{suffix}")
        self.err = err
        self.detail = detail


class ProfileNotFoundError(QualityPriorityError):
    """Raised when a profile name is not present in the current snapshot."""

    def __init__(self, name: str) -> None:
        super().__init__(PROFILE_NOT_FOUND, name)
        self.name = name


class MalformedRulesError(QualityPriorityError):
    """Raised when an ephemeral reorder rule payload cannot be decoded."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(MALFORMED_EPHEMERAL_RULES, detail)
