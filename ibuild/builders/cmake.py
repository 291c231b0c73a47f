from ..cli_logger import logger
from ..template import apply_env_to_args
from .make import run_make, run_make_install
from .merge import merge_universal

CMAKE = "cmake"


class CMakeBackend:
    """CMake projects, configured against the shared build root as prefix path."""

    name = "CMake"

    def configure(self, builder, architecture, scratch_dir, install_dir):
        toolchain = builder.toolchain
        configuration = builder.configuration

        args = [
            f"-DCMAKE_C_FLAGS={toolchain.deployment_target} -fembed-bitcode",
            f"-DCMAKE_INSTALL_PREFIX={install_dir}",
            f"-DCMAKE_OSX_SYSROOT={toolchain.sysroot}",
            f"-DCMAKE_OSX_ARCHITECTURES={architecture}",
            # lets find_package() and pkg_check_modules() see already built dependencies
            f"-DCMAKE_PREFIX_PATH={builder.build_root}",
            "-DPKG_CONFIG_USE_CMAKE_PREFIX_PATH=ON",
        ]
        args += apply_env_to_args(configuration.generic_args(), toolchain.env)
        args += apply_env_to_args(
            configuration.arch_specific_args(toolchain.platform_name, architecture), toolchain.env
        )
        args.append(str(builder.source_root))

        logger.info(f"Running CMake for {architecture}")
        builder.runner.run(CMAKE, args, cwd=scratch_dir, env=toolchain.env)

    make = staticmethod(run_make)
    install = staticmethod(run_make_install)
    merge = staticmethod(merge_universal)
