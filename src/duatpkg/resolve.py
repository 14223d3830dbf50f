"""Output resolution: registry + context into named artifacts."""

from __future__ import annotations

from collections.abc import Iterable

from duatpkg.errors import ValidationError
from duatpkg.models import ArtifactKind, BuildInput, OutputArtifact, Package, ToolchainContext
from duatpkg.registry import BuildUnitRegistry
from duatpkg.toolchain import toolchain_build_input

OUTPUT_NAMES: dict[str, ArtifactKind] = {
    "default": ArtifactKind.RELEASE_PACKAGE,
    "devShell": ArtifactKind.DEV_ENVIRONMENT,
}


def resolve(
    project: str,
    registry: BuildUnitRegistry,
    context: ToolchainContext,
    kind: ArtifactKind,
    *,
    extra_packages: Iterable[Package | str] = (),
) -> OutputArtifact:
    """Resolve one output artifact for *project* on the context's platform.

    Both kinds are produced by the registry's primary unit. A development
    environment carries the base packages followed by *extra_packages*;
    extras never replace base entries and exact repeats are kept once.
    """
    if not project:
        raise ValidationError("resolve() requires a non-empty project name.")
    try:
        kind = ArtifactKind(kind)
    except ValueError:
        raise ValidationError(
            "Unknown artifact kind.",
            context={"project": project, "kind": str(kind)},
        ) from None
    _ensure_registry_context(registry, context)
    primary = registry.primary_unit()
    extras = tuple(_coerce_package(item) for item in extra_packages)

    if kind is ArtifactKind.RELEASE_PACKAGE:
        if extras:
            raise ValidationError(
                "Extra packages only apply to development environments.",
                context={"project": project, "kind": kind.value},
            )
        packages: tuple[Package, ...] = ()
    else:
        packages = tuple(dict.fromkeys((*base_environment(registry, context), *extras)))

    return OutputArtifact(
        project=project,
        kind=kind,
        producing_unit=primary,
        platform_id=context.platform_id,
        packages=packages,
    )


def base_environment(registry: BuildUnitRegistry, context: ToolchainContext) -> tuple[Package, ...]:
    """Packages a development environment provides before augmentation."""
    _ensure_registry_context(registry, context)
    primary = registry.primary_unit()
    entries: list[Package] = [toolchain_build_input(context), *primary.extra_inputs]
    for spec in registry.units():
        if spec.name != primary.name:
            entries.extend(spec.extra_inputs)
    return tuple(dict.fromkeys(entries))


def output(
    name: str,
    project: str,
    registry: BuildUnitRegistry,
    context: ToolchainContext,
    *,
    extra_packages: Iterable[Package | str] = (),
) -> OutputArtifact:
    kind = OUTPUT_NAMES.get(name)
    if kind is None:
        raise ValidationError(
            f"Unknown output name {name!r}.",
            hint="Request one of: " + ", ".join(OUTPUT_NAMES),
            context={"project": project, "output": name},
        )
    return resolve(project, registry, context, kind, extra_packages=extra_packages)


def named_outputs(
    project: str,
    registry: BuildUnitRegistry,
    context: ToolchainContext,
    *,
    dev_packages: Iterable[Package | str] = (),
) -> dict[str, OutputArtifact]:
    return {
        "default": resolve(project, registry, context, ArtifactKind.RELEASE_PACKAGE),
        "devShell": resolve(
            project,
            registry,
            context,
            ArtifactKind.DEV_ENVIRONMENT,
            extra_packages=dev_packages,
        ),
    }


def _coerce_package(item: object) -> Package:
    if isinstance(item, (BuildInput, OutputArtifact)):
        return item
    if isinstance(item, str) and item:
        return BuildInput(name=item)
    raise ValidationError(
        "Extra packages must be build inputs, artifacts, or non-empty names.",
        context={"package": repr(item)},
    )


def _ensure_registry_context(registry: BuildUnitRegistry, context: ToolchainContext) -> None:
    if context != registry.context:
        raise ValidationError(
            "Registry was built for a different toolchain context.",
            hint="Resolve with the context the registry was constructed for.",
            context={
                "registry_platform_id": registry.context.platform_id,
                "platform_id": context.platform_id,
            },
        )
