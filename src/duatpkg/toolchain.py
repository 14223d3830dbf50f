"""Toolchain context construction and ``rust-toolchain.toml`` loading."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from duatpkg.errors import ToolchainError
from duatpkg.models import BuildInput, ToolchainContext, ToolchainSpec
from duatpkg.policy import Policy, ensure_supported_system


def create_context(
    platform_id: str,
    toolchain: ToolchainSpec | None = None,
    *,
    policy: Policy | None = None,
) -> ToolchainContext:
    """Build the immutable context for one evaluation run."""
    ensure_supported_system(policy=policy or Policy(), platform_id=platform_id)
    return ToolchainContext(platform_id=platform_id, toolchain=toolchain or ToolchainSpec())


def load_toolchain(path: str | Path) -> ToolchainSpec:
    """Read the ``[toolchain]`` table of a rust-toolchain file.

    Both the TOML layout and the legacy single-line layout (just the channel
    name) are accepted.
    """
    toolchain_path = Path(path)
    try:
        raw = toolchain_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ToolchainError(
            "Toolchain file does not exist.",
            hint="Point load_toolchain() at the project's rust-toolchain.toml.",
            context={"path": str(toolchain_path)},
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ToolchainError(
            "Toolchain file could not be read.",
            hint=str(exc),
            context={"path": str(toolchain_path)},
        ) from exc

    lines = [line.strip() for line in raw.splitlines()]
    content = [line for line in lines if line and not line.startswith("#")]
    stripped = "\n".join(content)
    if stripped and "\n" not in stripped and "=" not in stripped and "[" not in stripped:
        return ToolchainSpec(channel=stripped, source=toolchain_path)

    try:
        payload = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ToolchainError(
            "Invalid toolchain TOML.",
            hint=str(exc),
            context={"path": str(toolchain_path)},
        ) from exc

    table = payload.get("toolchain")
    if not isinstance(table, dict):
        raise ToolchainError(
            "Toolchain file is missing a [toolchain] table.",
            context={"path": str(toolchain_path)},
        )
    channel = table.get("channel")
    if not isinstance(channel, str) or not channel:
        raise ToolchainError(
            "Invalid toolchain `channel` value.",
            context={"path": str(toolchain_path)},
        )
    profile = table.get("profile")
    if profile is not None and not isinstance(profile, str):
        raise ToolchainError(
            "Invalid toolchain `profile` value.",
            context={"path": str(toolchain_path)},
        )
    return ToolchainSpec(
        channel=channel,
        components=_string_list(table, "components", toolchain_path),
        targets=_string_list(table, "targets", toolchain_path),
        profile=profile,
        source=toolchain_path,
    )


def toolchain_build_input(context: ToolchainContext) -> BuildInput:
    """Return the build input that provides the toolchain on the context's platform."""
    return BuildInput(
        name=f"rust-{context.toolchain.channel}-{context.platform_id}",
        kind="toolchain",
    )


def _string_list(table: dict[str, Any], key: str, path: Path) -> tuple[str, ...]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ToolchainError(
            f"Invalid toolchain `{key}` value.",
            context={"path": str(path)},
        )
    return tuple(value)
