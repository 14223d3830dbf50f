"""Core typed dataclasses for build units, artifacts, options and effects."""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal, TypeAlias

import cbor2

InputKind = Literal["toolchain", "package"]
DuplicatePolicy = Literal["replace", "error"]

DEFAULT_SYSTEMS: tuple[str, ...] = ("x86_64-linux",)
DEFAULT_CONFIG_ROOT = "~/.config"


class ArtifactKind(StrEnum):
    """Output artifacts a project can resolve to.

    The values double as the conventional output names exposed by the
    project's per-system payload.
    """

    RELEASE_PACKAGE = "release"
    DEV_ENVIRONMENT = "devShell"


@dataclass(frozen=True, slots=True)
class ToolchainSpec:
    channel: str = "stable"
    components: tuple[str, ...] = ()
    targets: tuple[str, ...] = ()
    profile: str | None = None
    source: Path | None = None


@dataclass(frozen=True, slots=True)
class ToolchainContext:
    platform_id: str
    toolchain: ToolchainSpec = field(default_factory=ToolchainSpec)


@dataclass(frozen=True, slots=True)
class BuildInput:
    name: str
    kind: InputKind = "package"

    def payload(self) -> dict[str, object]:
        return {"input": self.name, "kind": self.kind}


@dataclass(frozen=True, slots=True)
class BuildUnitSpec:
    name: str
    source: Path
    extra_inputs: tuple[BuildInput, ...] = ()

    def payload(self) -> dict[str, object]:
        return {
            "name": self.name,
            "source": str(self.source),
            "extra_inputs": [item.payload() for item in self.extra_inputs],
        }


@dataclass(frozen=True, slots=True)
class OutputArtifact:
    """A resolved, consumable build result.

    ``packages`` is empty for release packages. For development environments
    it lists everything the environment makes available, base entries first.
    """

    project: str
    kind: ArtifactKind
    producing_unit: BuildUnitSpec
    platform_id: str
    packages: tuple[Package, ...] = ()

    @property
    def digest(self) -> str:
        return _digest(self.payload())

    @property
    def name(self) -> str:
        return f"{self.project}-{self.kind.value}-{self.platform_id}"

    def payload(self) -> dict[str, object]:
        return {
            "project": self.project,
            "kind": self.kind.value,
            "producing_unit": self.producing_unit.payload(),
            "platform_id": self.platform_id,
            "packages": [package.payload() for package in self.packages],
        }

    def to_json(self, path: str | Path | None = None) -> str:
        return _write_json(self.payload(), path)

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        return _write_cbor(self.payload(), path)


Package: TypeAlias = BuildInput | OutputArtifact


@dataclass(frozen=True, slots=True)
class Options:
    """Consumer-supplied option values; ``None`` means the option was omitted."""

    enable: bool | None = None
    package: OutputArtifact | str | None = None
    config_source: str | os.PathLike[str] | None = None


@dataclass(frozen=True, slots=True)
class ResolvedOptions:
    enable: bool
    package: OutputArtifact
    config_source: Path


@dataclass(frozen=True, slots=True)
class FileLink:
    target: str
    source: Path

    def payload(self) -> dict[str, object]:
        return {"target": self.target, "source": str(self.source)}


@dataclass(frozen=True, slots=True)
class DeploymentEffect:
    packages_to_install: frozenset[OutputArtifact] = frozenset()
    file_links: frozenset[FileLink] = frozenset()

    @classmethod
    def empty(cls) -> DeploymentEffect:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.packages_to_install and not self.file_links

    def payload(self) -> dict[str, object]:
        packages = sorted(self.packages_to_install, key=lambda item: item.digest)
        links = sorted(self.file_links, key=lambda item: (item.target, str(item.source)))
        return {
            "packages_to_install": [
                {"name": item.name, "digest": item.digest} for item in packages
            ],
            "file_links": [item.payload() for item in links],
        }

    def to_json(self, path: str | Path | None = None) -> str:
        return _write_json(self.payload(), path)

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        return _write_cbor(self.payload(), path)


def _digest(payload: dict[str, Any]) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _write_json(payload: dict[str, Any], path: str | Path | None) -> str:
    encoded = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    if path is not None:
        Path(path).write_text(encoded, encoding="utf-8")
    return encoded


def _write_cbor(payload: dict[str, Any], path: str | Path | None) -> bytes:
    encoded = cbor2.dumps(payload, canonical=True)
    if path is not None:
        Path(path).write_bytes(encoded)
    return encoded


__all__ = [
    "ArtifactKind",
    "BuildInput",
    "BuildUnitSpec",
    "DEFAULT_CONFIG_ROOT",
    "DEFAULT_SYSTEMS",
    "DeploymentEffect",
    "DuplicatePolicy",
    "FileLink",
    "InputKind",
    "Options",
    "OutputArtifact",
    "Package",
    "ResolvedOptions",
    "ToolchainContext",
    "ToolchainSpec",
]
