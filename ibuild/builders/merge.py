import os
from ..cli_logger import logger
from ..utils.file_manager import ensure_dir


def lipo(runner, lipo_path, architecture_map, destination):
    """Merge per-architecture binaries into one universal binary at ``destination``.

    ``architecture_map`` is an ordered list of ``(architecture, path)``; the
    ``-arch`` arguments follow that order.
    """
    ensure_dir(os.path.dirname(destination))

    logger.info(f"Merging libraries {architecture_map} to fat library at {destination}")
    args = ["-create", "-output", destination]
    for architecture, path in architecture_map:
        args += ["-arch", architecture, path]

    runner.run(lipo_path, args)
    return destination


def merge_universal(builder, architecture_map, destination):
    """Default ``merge`` hook shared by the backends."""
    return lipo(builder.runner, builder.toolchain.lipo, architecture_map, destination)
