"""Options schema for the home module: declarations, defaults and validation."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

from duatpkg.errors import InvalidOptionError, UnknownUnitError
from duatpkg.models import ArtifactKind, Options, OutputArtifact, ResolvedOptions, ToolchainContext
from duatpkg.registry import BuildUnitRegistry
from duatpkg.resolve import OUTPUT_NAMES, output, resolve

# External option key -> Options field name.
OPTION_KEYS: dict[str, str] = {
    "enable": "enable",
    "package": "package",
    "configSource": "config_source",
}


@dataclass(frozen=True, slots=True)
class OptionDecl:
    name: str
    type_name: str
    description: str
    default: Callable[[], object]


def merge_options(base: Options, override: Options) -> Options:
    """Merge two option sets, last write wins per field.

    A field set in *override* replaces the one in *base*; fields omitted from
    *override* keep the *base* value. Neither argument is modified.
    """
    merged = {
        item.name: (
            getattr(override, item.name)
            if getattr(override, item.name) is not None
            else getattr(base, item.name)
        )
        for item in fields(Options)
    }
    return Options(**merged)


@dataclass(slots=True)
class OptionsSchema:
    """Typed optional settings for enabling the editor in a user environment.

    The ``package`` default is resolved against the registry each time it is
    needed, so replacing the primary unit changes the default as well.
    """

    project: str
    registry: BuildUnitRegistry
    context: ToolchainContext
    default_config_source: Path = field(default_factory=lambda: Path("config"))
    description: str = "Duat Terminal Editor"

    @property
    def declarations(self) -> tuple[OptionDecl, ...]:
        return (
            OptionDecl(
                name="enable",
                type_name="bool",
                description=f"Whether to enable {self.description}.",
                default=lambda: False,
            ),
            OptionDecl(
                name="package",
                type_name="package",
                description=f"The {self.project} package to install.",
                default=self.default_package,
            ),
            OptionDecl(
                name="configSource",
                type_name="path",
                description=f"Directory linked into the user's {self.project} config directory.",
                default=lambda: self.default_config_source,
            ),
        )

    def default_package(self) -> OutputArtifact:
        return resolve(self.project, self.registry, self.context, ArtifactKind.RELEASE_PACKAGE)

    def parse(self, raw: Mapping[str, object]) -> Options:
        """Convert consumer-facing keys into :class:`Options` without applying defaults."""
        values: dict[str, object] = {}
        for key, value in raw.items():
            field_name = OPTION_KEYS.get(key)
            if field_name is None:
                raise InvalidOptionError(
                    f"Unknown option {key!r}.",
                    option=str(key),
                    hint="Recognized options: " + ", ".join(OPTION_KEYS),
                )
            values[field_name] = value
        return Options(**values)  # type: ignore[arg-type]

    def enabled(self, options: Options | None = None) -> bool:
        supplied = options or Options()
        enable = False if supplied.enable is None else supplied.enable
        if not isinstance(enable, bool):
            raise InvalidOptionError(
                "Option 'enable' must be a boolean.",
                option="enable",
                context={"value": repr(enable)},
            )
        return enable

    def validate(self, options: Options | None = None) -> None:
        """Check supplied values only; omitted options are not defaulted."""
        supplied = options or Options()
        self.enabled(supplied)
        if isinstance(supplied.package, str):
            self._check_output_name(supplied.package)
        elif supplied.package is not None:
            self._check_package(supplied.package)
        if supplied.config_source is not None:
            self._check_path(supplied.config_source)

    def apply(self, options: Options | None = None) -> ResolvedOptions:
        """Fill omitted options with their defaults and validate every value."""
        supplied = options or Options()
        enable = self.enabled(supplied)
        package = (
            self.default_package() if supplied.package is None else self._check_package(supplied.package)
        )
        config_source = (
            self.default_config_source
            if supplied.config_source is None
            else self._check_path(supplied.config_source)
        )
        return ResolvedOptions(enable=enable, package=package, config_source=config_source)

    def _check_package(self, value: object) -> OutputArtifact:
        if isinstance(value, str):
            return output(self._check_output_name(value), self.project, self.registry, self.context)
        if not isinstance(value, OutputArtifact):
            raise InvalidOptionError(
                "Option 'package' must be an output artifact or output name.",
                option="package",
                context={"value": repr(value)},
            )
        try:
            unit = self.registry.lookup(value.producing_unit.name)
        except UnknownUnitError as exc:
            raise InvalidOptionError(
                "Option 'package' refers to a unit outside this registry.",
                option="package",
                context={"unit": value.producing_unit.name},
            ) from exc
        reachable = (
            value.project == self.project
            and value.platform_id == self.context.platform_id
            and unit.name == self.registry.primary
            and unit == value.producing_unit
        )
        if not reachable:
            raise InvalidOptionError(
                "Option 'package' is not an artifact of this project.",
                option="package",
                hint="Resolve the artifact from the current registry and context.",
                context={"artifact": value.name},
            )
        return value

    def _check_output_name(self, value: str) -> str:
        if value not in OUTPUT_NAMES:
            raise InvalidOptionError(
                f"Option 'package' does not name a known output: {value!r}.",
                option="package",
                hint="Request one of: " + ", ".join(OUTPUT_NAMES),
            )
        return value

    def _check_path(self, value: object) -> Path:
        if not isinstance(value, (str, os.PathLike)):
            raise InvalidOptionError(
                "Option 'configSource' must be a path.",
                option="configSource",
                context={"value": repr(value)},
            )
        raw = os.fspath(value)
        if not isinstance(raw, str) or not raw:
            raise InvalidOptionError(
                "Option 'configSource' must be a non-empty path.",
                option="configSource",
                context={"value": repr(value)},
            )
        return Path(raw)
