"""Public package entrypoint for the Duat build-and-deploy composition layer."""

from .deploy import Disabled, Enabled, Evaluation, HomeModule, evaluate
from .errors import (
    DuatError,
    DuplicateUnitError,
    ErrorCode,
    InvalidOptionError,
    MissingUnitError,
    ToolchainError,
    UnknownUnitError,
    ValidationError,
)
from .models import (
    ArtifactKind,
    BuildInput,
    BuildUnitSpec,
    DeploymentEffect,
    FileLink,
    Options,
    OutputArtifact,
    ResolvedOptions,
    ToolchainContext,
    ToolchainSpec,
)
from .options import OptionsSchema, merge_options
from .policy import Policy
from .project import Project
from .registry import BuildUnitRegistry, standard_registry
from .resolve import named_outputs, resolve
from .toolchain import create_context, load_toolchain

__all__ = [
    "ArtifactKind",
    "BuildInput",
    "BuildUnitRegistry",
    "BuildUnitSpec",
    "DeploymentEffect",
    "Disabled",
    "DuatError",
    "DuplicateUnitError",
    "Enabled",
    "ErrorCode",
    "Evaluation",
    "FileLink",
    "HomeModule",
    "InvalidOptionError",
    "MissingUnitError",
    "Options",
    "OptionsSchema",
    "OutputArtifact",
    "Policy",
    "Project",
    "ResolvedOptions",
    "ToolchainContext",
    "ToolchainError",
    "ToolchainSpec",
    "UnknownUnitError",
    "ValidationError",
    "create_context",
    "evaluate",
    "load_toolchain",
    "merge_options",
    "named_outputs",
    "resolve",
    "standard_registry",
]
