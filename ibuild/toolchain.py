import os
from dataclasses import dataclass, field
from typing import Mapping

from .cli_logger import logger
from .errors import ToolchainError
from .utils.command_executor import run_shell_command

XCRUN = "/usr/bin/xcrun"

# env key -> tool name looked up through xcrun
TOOLS = {
    "CC": "clang",
    "CXX": "clang++",
    "AR": "ar",
    "RANLIB": "ranlib",
    "LIPO": "lipo",
}


class XcrunDiscovery:
    """Finds compilers and SDKs with ``xcrun``."""

    def __init__(self, xcrun=XCRUN):
        self.xcrun = xcrun

    def _query(self, args, what):
        stdout, stderr, returncode = run_shell_command([self.xcrun] + args)
        if returncode != 0:
            raise ToolchainError(f"Could not find {what} (Exit Code: {returncode}): {stderr.strip()}")
        path = stdout.strip()
        if not path:
            raise ToolchainError(f"Could not find {what}: xcrun returned nothing.")
        return path

    def find_tool(self, name):
        return self._query(["-find", name], f"tool '{name}'")

    def sdk_path(self, platform_name):
        return self._query(["-sdk", platform_name, "--show-sdk-path"], f"SDK for platform '{platform_name}'")


@dataclass(frozen=True)
class ToolchainContext:
    architectures: tuple
    platform_name: str
    sysroot: str
    deployment_target: str
    tools: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def lipo(self):
        return self.tools["LIPO"]


def resolve_toolchain(inputs, discovery, package_root, source_root, build_root):
    """Resolve the full toolchain for one build, or raise ToolchainError."""
    architectures = tuple(inputs.architectures)
    if not architectures:
        raise ToolchainError("No target architectures configured.")

    logger.info(f"Resolving toolchain for {inputs.platform_name} ({' '.join(architectures)})...")
    sysroot = discovery.sdk_path(inputs.platform_name)
    tools = {key: discovery.find_tool(name) for key, name in TOOLS.items()}

    env = dict(tools)
    env.update({
        "PKGROOT": os.fspath(package_root),
        "SRCROOT": os.fspath(source_root),
        "SDKROOT": sysroot,
        "BUILDROOT": os.fspath(build_root),
    })
    return ToolchainContext(
        architectures=architectures,
        platform_name=inputs.platform_name,
        sysroot=sysroot,
        deployment_target=inputs.deployment_target,
        tools=tools,
        env=env,
    )


def build_products_root(inputs, build_root, source_root):
    """Scratch root for this source tree; CONFIGURATION_TEMP_DIR wins when set."""
    leaf = os.path.basename(os.path.normpath(source_root))
    if inputs.temp_dir:
        return os.path.join(inputs.temp_dir, leaf)
    return os.path.join(build_root, "products", leaf)
