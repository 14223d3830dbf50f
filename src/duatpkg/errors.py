"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    VALIDATION = "E_VALIDATION"
    UNKNOWN_UNIT = "E_UNKNOWN_UNIT"
    MISSING_UNIT = "E_MISSING_UNIT"
    DUPLICATE_UNIT = "E_DUPLICATE_UNIT"
    INVALID_OPTION = "E_INVALID_OPTION"
    TOOLCHAIN = "E_TOOLCHAIN"


SUBJECT_KEYS: tuple[str, ...] = ("unit", "option")


class DuatError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        # Unit and option names are lifted so callers can point at the culprit.
        for key in SUBJECT_KEYS:
            if self.context.get(key):
                payload[key] = self.context[key]
        return payload


class ValidationError(DuatError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class UnknownUnitError(DuatError):
    """Raised when looking up a unit name that was never registered."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.UNKNOWN_UNIT, hint=hint, context=context)


class MissingUnitError(DuatError):
    """Raised when resolution needs a unit that is absent from the registry."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MISSING_UNIT, hint=hint, context=context)


class DuplicateUnitError(DuatError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.DUPLICATE_UNIT, hint=hint, context=context)


class InvalidOptionError(DuatError):
    """Raised when an option value violates its type or reference constraint.

    ``option`` holds the name of the offending option as the consumer spelled it.
    """

    option: str

    def __init__(
        self,
        message: str,
        *,
        option: str,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"option": option, **dict(context or {})}
        super().__init__(message, code=ErrorCode.INVALID_OPTION, hint=hint, context=merged)
        self.option = option


class ToolchainError(DuatError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.TOOLCHAIN, hint=hint, context=context)


__all__ = [
    "DuatError",
    "DuplicateUnitError",
    "ErrorCode",
    "InvalidOptionError",
    "MissingUnitError",
    "ToolchainError",
    "UnknownUnitError",
    "ValidationError",
]
