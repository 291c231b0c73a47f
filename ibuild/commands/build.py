import os
import click
from .. import config as config_module
from ..builders import builder_for_package
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..toolchain import XcrunDiscovery
from ..utils import CommandRunner

@click.command()
@click.pass_context
@click.option("--build-root", default=None, help="Shared output directory. Defaults to <path>/build.")
@handle_exceptions
def build(ctx, build_root):
    """Build the package for every configured architecture."""
    package_root = os.path.abspath(ctx.obj["path"])
    build_root = os.path.abspath(build_root or os.path.join(package_root, "build"))

    package, source_map = config_module.load_manifest(path=package_root)
    inputs = config_module.BuildInputs.from_environ()
    runner = CommandRunner(base_env=inputs.environ)

    builder = builder_for_package(
        package, package_root, source_map, build_root, inputs, XcrunDiscovery(), runner
    )
    if builder is None:
        logger.info(f"Nothing to build for {package.name}.")
        return

    builder.build()
    logger.success(f"Build of {package.name} completed successfully.")
