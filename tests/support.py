import os
from unittest.mock import MagicMock

from ibuild.builders.pipeline import Builder
from ibuild.config import BuildInputs
from ibuild.models import BuildConfiguration, BuildSystem
from ibuild.toolchain import ToolchainContext

TOOLS = {
    "CC": "/usr/bin/cc",
    "CXX": "/usr/bin/c++",
    "AR": "/usr/bin/ar",
    "RANLIB": "/usr/bin/ranlib",
    "LIPO": "/usr/bin/lipo",
}


def make_toolchain(architectures=("arm64",), platform_name="iphoneos"):
    env = dict(TOOLS)
    env.update({"SDKROOT": "/sdk", "BUILDROOT": "/build", "PKGROOT": "/pkg", "SRCROOT": "/src"})
    return ToolchainContext(
        architectures=tuple(architectures),
        platform_name=platform_name,
        sysroot="/sdk",
        deployment_target="-miphoneos-version-min=9.0",
        tools=dict(TOOLS),
        env=env,
    )


def make_runner():
    runner = MagicMock()
    runner.run.return_value = ""
    return runner


def make_builder(root, architectures=("arm64",), backend=None, runner=None, inputs=None,
                 package_name="libfoo", **configuration):
    configuration.setdefault("build_system", BuildSystem.MAKE)
    configuration.setdefault("outputs", ("libfoo.a",))
    package_root = os.path.join(root, "pkg")
    build_root = os.path.join(root, "build")
    os.makedirs(package_root, exist_ok=True)
    if backend is None:
        backend = MagicMock()
        backend.name = "mock"
    return Builder(
        package_name=package_name,
        package_root=package_root,
        source_root=package_root,
        build_root=build_root,
        build_products=os.path.join(build_root, "products", "pkg"),
        configuration=BuildConfiguration(**configuration),
        toolchain=make_toolchain(architectures),
        backend=backend,
        runner=runner or make_runner(),
        inputs=inputs or BuildInputs(),
    )


def touch(path, content=""):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)
    return path
