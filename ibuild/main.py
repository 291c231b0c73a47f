import click
from .commands import build, version


@click.group()
@click.option("--path", "-p", default=".", help="Path to the package directory.")
@click.pass_context
def cli(ctx, path):
    """ibuild: build native libraries for every target architecture."""
    ctx.obj = {"path": path}

cli.add_command(build)
cli.add_command(version)

if __name__ == '__main__':
    cli()
