"""Resolve the project's outputs with an augmented development shell."""

from duatpkg import Project
from duatpkg.models import ToolchainSpec


def describe_outputs() -> None:
    project = Project(toolchain=ToolchainSpec(channel="nightly", components=("rust-src",)))
    project.unit("duat-term", extra_inputs=["ncurses"])

    for name, artifact in project.outputs(dev_packages=["rust-analyzer", "gdb"]).items():
        print(name, artifact.name, artifact.digest)


if __name__ == "__main__":
    describe_outputs()
