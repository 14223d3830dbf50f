"""Registry of named build units for a project."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from duatpkg.errors import MissingUnitError, UnknownUnitError, ValidationError
from duatpkg.models import BuildInput, BuildUnitSpec, ToolchainContext
from duatpkg.policy import Policy, ensure_unit_insertable
from duatpkg.toolchain import toolchain_build_input

PRIMARY_UNIT = "duat"
SUPPORT_SUFFIXES: tuple[str, ...] = ("core", "term", "utils")


@dataclass(slots=True)
class BuildUnitRegistry:
    """Mapping from unit name to spec, bound to the context it was built for.

    Registration is last-write-wins unless ``policy.duplicate_units`` is
    ``"error"``, in which case re-registering a name raises
    :class:`DuplicateUnitError`.
    """

    context: ToolchainContext
    primary: str = PRIMARY_UNIT
    policy: Policy = field(default_factory=Policy)
    _units: dict[str, BuildUnitSpec] = field(default_factory=dict, init=False, repr=False)

    def register(self, name: str, spec: BuildUnitSpec) -> BuildUnitSpec:
        if not name:
            raise ValidationError("register() requires a non-empty unit name.")
        if spec.name != name:
            raise ValidationError(
                "Unit spec name does not match its registry key.",
                context={"unit": name, "spec_name": spec.name},
            )
        ensure_unit_insertable(policy=self.policy, name=name, exists=name in self._units)
        self._units[name] = spec
        return spec

    def lookup(self, name: str) -> BuildUnitSpec:
        try:
            return self._units[name]
        except KeyError:
            raise UnknownUnitError(
                f"Build unit {name!r} is not registered.",
                context={"unit": name, "known": ", ".join(self.names())},
            ) from None

    def primary_unit(self) -> BuildUnitSpec:
        spec = self._units.get(self.primary)
        if spec is None:
            raise MissingUnitError(
                f"Primary build unit {self.primary!r} is missing from the registry.",
                hint="Register the primary unit before resolving outputs.",
                context={"unit": self.primary, "platform_id": self.context.platform_id},
            )
        return spec

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._units))

    def units(self) -> tuple[BuildUnitSpec, ...]:
        return tuple(self._units[name] for name in self.names())

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._units)


def unit(
    name: str,
    source: str | Path,
    extra_inputs: Iterable[BuildInput] = (),
) -> BuildUnitSpec:
    return BuildUnitSpec(name=name, source=Path(source), extra_inputs=tuple(extra_inputs))


def standard_registry(
    context: ToolchainContext,
    path: str | Path = ".",
    *,
    project: str = PRIMARY_UNIT,
    policy: Policy | None = None,
) -> BuildUnitRegistry:
    """Register the editor unit and its three supporting library units.

    Only the editor carries the toolchain build input; the library units
    (``<project>-core``, ``-term``, ``-utils``) are expected in sibling
    directories named after them.
    """
    root = Path(path)
    registry = BuildUnitRegistry(context=context, primary=project, policy=policy or Policy())
    registry.register(project, unit(project, root, (toolchain_build_input(context),)))
    for suffix in SUPPORT_SUFFIXES:
        name = f"{project}-{suffix}"
        registry.register(name, unit(name, root / name))
    return registry
