from pathlib import Path

import pytest

from duatpkg.errors import InvalidOptionError, MissingUnitError
from duatpkg.models import ArtifactKind, BuildUnitSpec, Options, ToolchainContext
from duatpkg.options import OptionsSchema, merge_options
from duatpkg.registry import BuildUnitRegistry, unit
from duatpkg.resolve import resolve


def test_defaults_apply_when_options_omitted(schema: OptionsSchema) -> None:
    resolved = schema.apply()

    assert resolved.enable is False
    assert resolved.package == schema.default_package()
    assert resolved.package.producing_unit.name == "editor"
    assert resolved.config_source == Path("/src/config")


def test_declarations_describe_every_option(schema: OptionsSchema) -> None:
    declarations = {item.name: item for item in schema.declarations}

    assert set(declarations) == {"enable", "package", "configSource"}
    assert declarations["enable"].type_name == "bool"
    assert declarations["enable"].default() is False
    assert "Duat Terminal Editor" in declarations["enable"].description
    assert declarations["configSource"].default() == Path("/src/config")


def test_package_default_tracks_registry_changes(
    schema: OptionsSchema,
    registry: BuildUnitRegistry,
) -> None:
    package_decl = next(item for item in schema.declarations if item.name == "package")
    before = package_decl.default()

    registry.register("editor", unit("editor", "/src/editor-v2"))

    after = package_decl.default()
    assert after != before
    assert after.producing_unit.source == Path("/src/editor-v2")
    assert schema.apply(Options(enable=True)).package == after


def test_each_option_is_independently_overridable(schema: OptionsSchema) -> None:
    resolved = schema.apply(Options(config_source="/home/u/dotfiles/duat"))

    assert resolved.enable is False
    assert resolved.package == schema.default_package()
    assert resolved.config_source == Path("/home/u/dotfiles/duat")


def test_package_accepts_output_name(schema: OptionsSchema) -> None:
    resolved = schema.apply(Options(package="devShell"))
    assert resolved.package.kind is ArtifactKind.DEV_ENVIRONMENT


@pytest.mark.parametrize(
    ("options", "option_name"),
    [
        (Options(enable="yes"), "enable"),  # type: ignore[arg-type]
        (Options(enable=1), "enable"),  # type: ignore[arg-type]
        (Options(package="nightly"), "package"),
        (Options(package=42), "package"),  # type: ignore[arg-type]
        (Options(config_source=3), "configSource"),  # type: ignore[arg-type]
        (Options(config_source=""), "configSource"),
    ],
)
def test_malformed_values_name_the_offending_option(
    schema: OptionsSchema,
    options: Options,
    option_name: str,
) -> None:
    with pytest.raises(InvalidOptionError) as excinfo:
        schema.apply(options)

    assert excinfo.value.option == option_name
    assert option_name in str(excinfo.value)


def test_package_from_another_project_is_rejected(
    schema: OptionsSchema,
    registry: BuildUnitRegistry,
    context: ToolchainContext,
) -> None:
    foreign = resolve("other", registry, context, ArtifactKind.RELEASE_PACKAGE)

    with pytest.raises(InvalidOptionError) as excinfo:
        schema.apply(Options(package=foreign))
    assert excinfo.value.option == "package"


def test_stale_package_is_rejected_after_primary_replaced(
    schema: OptionsSchema,
    registry: BuildUnitRegistry,
) -> None:
    stale = schema.default_package()
    registry.register("editor", unit("editor", "/src/editor-v2"))

    with pytest.raises(InvalidOptionError):
        schema.apply(Options(package=stale))


def test_package_built_from_unregistered_unit_is_rejected(schema: OptionsSchema) -> None:
    stray = schema.default_package()
    stray = type(stray)(
        project=stray.project,
        kind=stray.kind,
        producing_unit=BuildUnitSpec(name="ghost", source=Path("/ghost")),
        platform_id=stray.platform_id,
    )

    with pytest.raises(InvalidOptionError):
        schema.apply(Options(package=stray))


def test_default_package_requires_primary_unit(context: ToolchainContext) -> None:
    empty = BuildUnitRegistry(context=context, primary="editor")
    schema = OptionsSchema(project="duat", registry=empty, context=context)

    with pytest.raises(MissingUnitError):
        schema.apply(Options(enable=True))


def test_parse_maps_external_keys(schema: OptionsSchema) -> None:
    options = schema.parse({"enable": True, "configSource": "/cfg"})
    assert options == Options(enable=True, config_source="/cfg")

    with pytest.raises(InvalidOptionError) as excinfo:
        schema.parse({"config": "/cfg"})
    assert excinfo.value.option == "config"


def test_merge_options_is_last_write_wins_per_field() -> None:
    base = Options(enable=True, config_source="/base")
    override = Options(config_source="/override")

    merged = merge_options(base, override)

    assert merged == Options(enable=True, config_source="/override")
    assert merge_options(merged, Options(enable=False)).enable is False
    assert merge_options(base, Options()) == base
    assert base == Options(enable=True, config_source="/base")
