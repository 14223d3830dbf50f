"""Enable the editor in a user environment with a dotfiles config directory."""

from pathlib import Path

from duatpkg import Project


def describe_home_effect() -> None:
    project = Project(path=Path("."), toolchain="rust-toolchain.toml")
    effect = project.evaluate(
        {"enable": True, "configSource": str(Path.home() / "dotfiles" / "duat")},
    ).effect
    print(effect.to_json())


if __name__ == "__main__":
    describe_home_effect()
