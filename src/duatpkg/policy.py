"""Policy configuration and enforcement helpers."""

from __future__ import annotations

from dataclasses import dataclass

from duatpkg.errors import DuplicateUnitError, ValidationError
from duatpkg.models import DEFAULT_CONFIG_ROOT, DEFAULT_SYSTEMS, DuplicatePolicy


@dataclass(frozen=True, slots=True)
class Policy:
    duplicate_units: DuplicatePolicy = "replace"
    config_root: str = DEFAULT_CONFIG_ROOT
    systems: tuple[str, ...] = DEFAULT_SYSTEMS


def ensure_supported_system(*, policy: Policy, platform_id: str) -> None:
    if not platform_id:
        raise ValidationError("A platform identifier is required.")
    if platform_id not in policy.systems:
        raise ValidationError(
            "Platform is not supported by policy.",
            hint="Add the platform to policy.systems.",
            context={"platform_id": platform_id, "systems": ", ".join(policy.systems)},
        )


def ensure_unit_insertable(*, policy: Policy, name: str, exists: bool) -> None:
    if exists and policy.duplicate_units == "error":
        raise DuplicateUnitError(
            f"Build unit {name!r} is already registered.",
            hint="Relax policy.duplicate_units to 'replace' for last-write-wins.",
            context={"unit": name, "operation": "register"},
        )
