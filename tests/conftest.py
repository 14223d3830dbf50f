"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from duatpkg.models import BuildInput, ToolchainContext, ToolchainSpec
from duatpkg.options import OptionsSchema
from duatpkg.registry import BuildUnitRegistry, unit
from duatpkg.toolchain import create_context, toolchain_build_input


@pytest.fixture
def context() -> ToolchainContext:
    return create_context("x86_64-linux", ToolchainSpec(channel="nightly"))


@pytest.fixture
def registry(context: ToolchainContext) -> BuildUnitRegistry:
    """Registry with an ``editor`` primary unit and three library units."""
    reg = BuildUnitRegistry(context=context, primary="editor")
    reg.register("editor", unit("editor", "/src/editor", (toolchain_build_input(context),)))
    reg.register("core", unit("core", "/src/core"))
    reg.register("term", unit("term", "/src/term", (BuildInput("ncurses"),)))
    reg.register("utils", unit("utils", "/src/utils"))
    return reg


@pytest.fixture
def schema(registry: BuildUnitRegistry, context: ToolchainContext) -> OptionsSchema:
    return OptionsSchema(
        project="duat",
        registry=registry,
        context=context,
        default_config_source=Path("/src/config"),
    )
