"""Deployment evaluation: resolved options into a deployment effect."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from duatpkg.models import DEFAULT_CONFIG_ROOT, DeploymentEffect, FileLink, Options, ResolvedOptions
from duatpkg.options import OptionsSchema, merge_options
from duatpkg.policy import Policy


@dataclass(frozen=True, slots=True)
class Disabled:
    @property
    def effect(self) -> DeploymentEffect:
        return DeploymentEffect.empty()


@dataclass(frozen=True, slots=True)
class Enabled:
    effect: DeploymentEffect


Evaluation: TypeAlias = Disabled | Enabled


def config_target(program: str, *, config_root: str = DEFAULT_CONFIG_ROOT) -> str:
    """Per-user directory the configuration source is linked to."""
    return f"{config_root.rstrip('/')}/{program}/"


def evaluate(
    resolved: ResolvedOptions,
    *,
    program: str,
    config_root: str = DEFAULT_CONFIG_ROOT,
) -> Evaluation:
    """Select the deployment state from ``resolved.enable``.

    Evaluation holds no state between calls, so equal inputs always produce
    equal results.
    """
    if not resolved.enable:
        return Disabled()
    return Enabled(
        DeploymentEffect(
            packages_to_install=frozenset({resolved.package}),
            file_links=frozenset(
                {FileLink(config_target(program, config_root=config_root), resolved.config_source)}
            ),
        )
    )


@dataclass(slots=True)
class HomeModule:
    """Opt-in user environment module for a project.

    Consumers pass either an :class:`Options` value or the raw option mapping
    (``enable``, ``package``, ``configSource``); keyword overrides are merged
    on top of it.
    """

    name: str
    schema: OptionsSchema
    policy: Policy = field(default_factory=Policy)

    def evaluate(
        self,
        options: Options | Mapping[str, object] | None = None,
        **overrides: object,
    ) -> Evaluation:
        if isinstance(options, Mapping):
            base = self.schema.parse(options)
        else:
            base = options or Options()
        if overrides:
            base = merge_options(base, self.schema.parse(overrides))
        if not self.schema.enabled(base):
            # Defaults are never forced while disabled.
            self.schema.validate(base)
            return Disabled()
        resolved = self.schema.apply(base)
        return evaluate(resolved, program=self.name, config_root=self.policy.config_root)

    def effect(
        self,
        options: Options | Mapping[str, object] | None = None,
        **overrides: object,
    ) -> DeploymentEffect:
        return self.evaluate(options, **overrides).effect
