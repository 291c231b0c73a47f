import click
import importlib.metadata
from ..cli_logger import logger

@click.command()
def version():
    """Print the version of ibuild."""
    try:
        ver = importlib.metadata.version("ibuild")
        logger.info(f"ibuild version {ver}")
    except importlib.metadata.PackageNotFoundError:
        logger.error("Error: Could not determine the version of ibuild. Is it installed correctly?")
