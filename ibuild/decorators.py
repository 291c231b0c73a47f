import functools
import click
import sys # Import sys for sys.exc_info()
from .cli_logger import logger

def handle_exceptions(func):
    """A decorator to log failures of CLI commands before click reports them."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("\nCommand aborted by user.")
            raise
        except click.ClickException as e:
            logger.error(f"Error: {e.format_message()}")
            logger.exception(*sys.exc_info())
            raise
        except Exception as e:
            logger.error(f"\nAn unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
            raise click.ClickException(str(e)) from e
    return wrapper
