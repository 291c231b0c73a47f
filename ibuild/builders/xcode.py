import os
from ..cli_logger import logger
from ..template import apply_env_to_args
from ..utils.file_manager import copy_into, copy_path, ensure_dir
from .merge import lipo

XCODEBUILD = "/usr/bin/xcodebuild"


class XcodeBackend:
    """Xcode projects; ``xcodebuild install`` builds and installs in one go.

    The generic ``make`` stage has nothing left to do, and ``install`` only
    collects the products from the per-configuration output directory.
    """

    name = "xcodebuild"

    def configure(self, builder, architecture, scratch_dir, install_dir):
        toolchain = builder.toolchain
        configuration = builder.configuration

        args = [
            "install",
            "-sdk", toolchain.sysroot,
            "-arch", architecture,
            builder.inputs.xcode_deployment_target,
            f"OBJROOT={install_dir}",
            f"SYMROOT={install_dir}",
            f"DSTROOT={install_dir}",
            f"OTHER_LDFLAGS=-L{os.path.join(builder.build_root, 'lib')}",
            # for the project's own build phases
            f"IBUILD_CURRENT_BUILD_ROOT={builder.build_root}",
            f"IBUILD_CURRENT_PACKAGE_ROOT={builder.package_root}",
        ]
        args += apply_env_to_args(configuration.generic_args(), toolchain.env)
        args += apply_env_to_args(
            configuration.arch_specific_args(toolchain.platform_name, architecture), toolchain.env
        )

        logger.info(f"Running xcodebuild for {architecture}")
        builder.runner.run(XCODEBUILD, args, cwd=builder.source_root)

    def make(self, builder, scratch_dir):
        logger.debug("xcodebuild already built the products during configure.")

    def install(self, builder, scratch_dir, install_dir):
        lib_dir = ensure_dir(os.path.join(install_dir, "lib"))
        xcode_output = os.path.join(install_dir, f"Release-{builder.toolchain.platform_name}")

        for library_name in builder.configuration.outputs or ():
            copy_into(os.path.join(xcode_output, library_name), lib_dir)

        if not os.path.isdir(xcode_output):
            return
        swiftmodules = os.path.join(install_dir, "swiftmodules")
        for entry in sorted(os.listdir(xcode_output)):
            if entry.endswith(".swiftmodule"):
                copy_into(os.path.join(xcode_output, entry), swiftmodules)

    def merge(self, builder, architecture_map, destination):
        if not destination.endswith(".framework"):
            return lipo(builder.runner, builder.toolchain.lipo, architecture_map, destination)

        # Frameworks: start from the first architecture's bundle, lipo only the
        # binary inside it, then collect every architecture's swiftmodule.
        copy_path(architecture_map[0][1], destination)

        binary_name = os.path.splitext(os.path.basename(destination))[0]
        binary_map = [(arch, os.path.join(path, binary_name)) for arch, path in architecture_map]
        lipo(builder.runner, builder.toolchain.lipo, binary_map, os.path.join(destination, binary_name))

        modules = os.path.join(destination, "Modules")
        for _, path in architecture_map:
            copy_into(os.path.join(path, "Modules", f"{binary_name}.swiftmodule"), modules)
        return destination
