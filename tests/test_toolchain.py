from pathlib import Path

import pytest

from duatpkg.errors import ToolchainError, ValidationError
from duatpkg.models import ToolchainSpec
from duatpkg.policy import Policy
from duatpkg.toolchain import create_context, load_toolchain, toolchain_build_input


def test_create_context_accepts_platform_as_parameter() -> None:
    policy = Policy(systems=("x86_64-linux", "aarch64-linux"))
    context = create_context("aarch64-linux", policy=policy)

    assert context.platform_id == "aarch64-linux"
    assert context.toolchain == ToolchainSpec()


def test_create_context_rejects_unsupported_platform() -> None:
    with pytest.raises(ValidationError) as excinfo:
        create_context("aarch64-darwin")

    assert excinfo.value.context["platform_id"] == "aarch64-darwin"


def test_load_toolchain_reads_toml_table(tmp_path: Path) -> None:
    path = tmp_path / "rust-toolchain.toml"
    path.write_text(
        '[toolchain]\nchannel = "nightly-2025-01-01"\n'
        'components = ["rustfmt", "clippy"]\nprofile = "minimal"\n',
        encoding="utf-8",
    )

    spec = load_toolchain(path)

    assert spec.channel == "nightly-2025-01-01"
    assert spec.components == ("rustfmt", "clippy")
    assert spec.targets == ()
    assert spec.profile == "minimal"
    assert spec.source == path


def test_load_toolchain_accepts_legacy_channel_file(tmp_path: Path) -> None:
    path = tmp_path / "rust-toolchain"
    path.write_text("nightly\n", encoding="utf-8")

    assert load_toolchain(path).channel == "nightly"


@pytest.mark.parametrize(
    "content",
    [
        "[toolchain\n",
        '[other]\nchannel = "stable"\n',
        "[toolchain]\ncomponents = []\n",
        '[toolchain]\nchannel = "stable"\ntargets = "wasm32"\n',
    ],
)
def test_load_toolchain_rejects_malformed_files(tmp_path: Path, content: str) -> None:
    path = tmp_path / "rust-toolchain.toml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ToolchainError):
        load_toolchain(path)


def test_load_toolchain_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ToolchainError):
        load_toolchain(tmp_path / "missing.toml")


def test_toolchain_build_input_is_platform_specific() -> None:
    context = create_context("x86_64-linux", ToolchainSpec(channel="nightly"))
    build_input = toolchain_build_input(context)

    assert build_input.name == "rust-nightly-x86_64-linux"
    assert build_input.kind == "toolchain"


def test_load_toolchain_unreadable_paths(tmp_path: Path) -> None:
    with pytest.raises(ToolchainError):
        load_toolchain(tmp_path)

    binary = tmp_path / "rust-toolchain"
    binary.write_bytes(b"\xff\xfe\x00nightly")
    with pytest.raises(ToolchainError):
        load_toolchain(binary)


def test_load_toolchain_ignores_comment_lines(tmp_path: Path) -> None:
    commented = tmp_path / "rust-toolchain"
    commented.write_text("# pinned for the editor\nnightly\n", encoding="utf-8")
    assert load_toolchain(commented).channel == "nightly"

    comment_only = tmp_path / "rust-toolchain-empty"
    comment_only.write_text("# pinned\n", encoding="utf-8")
    with pytest.raises(ToolchainError):
        load_toolchain(comment_only)
