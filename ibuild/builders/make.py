import os
from ..cli_logger import logger
from ..template import apply_env_to_args
from .merge import merge_universal

MAKE = "make"


def run_make(builder, scratch_dir):
    processor_count = os.cpu_count() or 1
    builder.runner.run(MAKE, [f"-j{processor_count}"], cwd=scratch_dir)


def run_make_install(builder, scratch_dir, install_dir):
    builder.runner.run(MAKE, [builder.configuration.install_command or "install"], cwd=scratch_dir)


class MakeBackend:
    """Autotools style packages: ``./configure && make && make install``."""

    name = "make"

    def configure(self, builder, architecture, scratch_dir, install_dir):
        toolchain = builder.toolchain
        configuration = builder.configuration
        configure_script = os.path.join(builder.source_root, "configure")

        args = [
            f"-arch {architecture}",
            f"-isysroot {toolchain.sysroot}",
            toolchain.deployment_target,
            "-fembed-bitcode",
            f"--prefix={install_dir}",
        ]
        package_args = apply_env_to_args(configuration.generic_args(), toolchain.env)
        arch_args = apply_env_to_args(
            configuration.arch_specific_args(toolchain.platform_name, architecture), toolchain.env
        )
        args = arch_args + package_args + args

        logger.info(f"Running {configure_script} for {architecture}")
        builder.runner.run(configure_script, args, cwd=scratch_dir, env=toolchain.env)

    make = staticmethod(run_make)
    install = staticmethod(run_make_install)
    merge = staticmethod(merge_universal)
