"""Project object tying the composition layers together."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from .deploy import Evaluation, HomeModule
from .models import ArtifactKind, BuildInput, Options, OutputArtifact, Package, ToolchainContext, ToolchainSpec
from .observability import StructuredLogger
from .options import OptionsSchema
from .policy import Policy
from .registry import BuildUnitRegistry, standard_registry, unit
from .resolve import named_outputs, resolve
from .toolchain import create_context, load_toolchain, toolchain_build_input


@dataclass(slots=True)
class Project:
    """Represents a project definition for one platform.

    The context and registry are built once from the constructor arguments.
    ``toolchain`` may be a :class:`ToolchainSpec` or the path of a
    ``rust-toolchain.toml`` file.
    """

    name: str = "duat"
    path: Path = field(default_factory=lambda: Path("."))
    platform_id: str = "x86_64-linux"
    toolchain: ToolchainSpec | str | Path | None = None
    policy: Policy = field(default_factory=Policy)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    _context: ToolchainContext = field(init=False, repr=False)
    _registry: BuildUnitRegistry = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if isinstance(self.toolchain, (str, Path)):
            spec = load_toolchain(self.path / self.toolchain)
        else:
            spec = self.toolchain
        self._context = create_context(self.platform_id, spec, policy=self.policy)
        self._registry = standard_registry(
            self._context,
            self.path,
            project=self.name,
            policy=self.policy,
        )
        for name in self._registry.names():
            self.logger.log(
                operation="register",
                project=self.name,
                unit=name,
                output=None,
                message="registered standard build unit",
            )

    @property
    def context(self) -> ToolchainContext:
        return self._context

    @property
    def registry(self) -> BuildUnitRegistry:
        return self._registry

    def unit(
        self,
        name: str,
        *,
        source: str | Path | None = None,
        extra_inputs: Iterable[BuildInput | str] = (),
    ) -> Self:
        inputs = tuple(
            item if isinstance(item, BuildInput) else BuildInput(name=item) for item in extra_inputs
        )
        primary = name == self._registry.primary
        if primary:
            toolchain_input = toolchain_build_input(self._context)
            if toolchain_input not in inputs:
                inputs = (toolchain_input, *inputs)
        if source is None:
            source = self.path if primary else self.path / name
        replaced = name in self._registry
        spec = unit(name, source, inputs)
        self._registry.register(name, spec)
        self.logger.log(
            operation="register",
            project=self.name,
            unit=name,
            output=None,
            message="replaced build unit" if replaced else "registered build unit",
            extra={"extra_inputs": [item.name for item in inputs]},
        )
        return self

    def package(self) -> OutputArtifact:
        return self._resolve(ArtifactKind.RELEASE_PACKAGE)

    def dev_shell(self, *extra_packages: Package | str) -> OutputArtifact:
        return self._resolve(ArtifactKind.DEV_ENVIRONMENT, extra_packages)

    def outputs(self, *, dev_packages: Iterable[Package | str] = ()) -> dict[str, OutputArtifact]:
        return named_outputs(self.name, self._registry, self._context, dev_packages=dev_packages)

    def options_schema(self) -> OptionsSchema:
        return OptionsSchema(
            project=self.name,
            registry=self._registry,
            context=self._context,
            default_config_source=self.path / "config",
        )

    def home_module(self) -> HomeModule:
        return HomeModule(name=self.name, schema=self.options_schema(), policy=self.policy)

    def evaluate(
        self,
        options: Options | Mapping[str, object] | None = None,
        **overrides: object,
    ) -> Evaluation:
        result = self.home_module().evaluate(options, **overrides)
        self.logger.log(
            operation="evaluate",
            project=self.name,
            unit=None,
            output=None,
            message=f"home module evaluated as {type(result).__name__.lower()}",
            extra={
                "packages": sorted(item.name for item in result.effect.packages_to_install),
                "file_links": len(result.effect.file_links),
            },
        )
        return result

    def flake_outputs(self, *, dev_packages: Iterable[Package | str] = ()) -> dict[str, object]:
        """Return the per-system output payload consumers select from."""
        outputs = self.outputs(dev_packages=dev_packages)
        system = self._context.platform_id
        return {
            "packages": {system: {"default": _describe(outputs["default"])}},
            "devShells": {system: {"default": _describe(outputs["devShell"])}},
            "homeModules": [self.name],
        }

    def _resolve(
        self,
        kind: ArtifactKind,
        extra_packages: Iterable[Package | str] = (),
    ) -> OutputArtifact:
        artifact = resolve(
            self.name,
            self._registry,
            self._context,
            kind,
            extra_packages=extra_packages,
        )
        self.logger.log(
            operation="resolve",
            project=self.name,
            unit=artifact.producing_unit.name,
            output=kind.value,
            message="resolved output artifact",
            extra={"digest": artifact.digest},
        )
        return artifact


def _describe(artifact: OutputArtifact) -> dict[str, str]:
    return {"name": artifact.name, "digest": artifact.digest}
