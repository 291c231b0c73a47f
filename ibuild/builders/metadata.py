"""Installs the architecture independent part of a build.

Headers, pkg-config descriptors, Swift modules and auxiliary files are taken
from a single architecture's install directory (the first one the pipeline
built) and copied into the shared build root or into the package's own
directory below it.
"""
import os
from ..cli_logger import logger
from ..utils.file_manager import copy_into, copy_path, ensure_dir, list_files, read_text, write_text


def rewrite_pkgconfig_prefix(path, old_prefix, new_prefix):
    """Replace every literal ``old_prefix`` in the file at ``path``.

    Returns the number of replacements made.
    """
    content = read_text(path)
    count = content.count(old_prefix)
    if count:
        write_text(path, content.replace(old_prefix, new_prefix))
    return count


def install_metadata(arch_install_dir, destination, build_root, package_root,
                     auxiliary_files=None, package_specific=False):
    ensure_dir(destination)

    headers = os.path.join(arch_install_dir, "include")
    if os.path.exists(headers):
        logger.info(f"  - Copying headers from {headers}")
        copy_into(headers, build_root)

    pkgconfig = os.path.join(arch_install_dir, "lib", "pkgconfig")
    if not package_specific and os.path.exists(pkgconfig):
        pkgconfig_root = os.path.join(destination, "lib", "pkgconfig")
        logger.info(f"  - Copying pkgconfig files to {pkgconfig_root}")
        for source_file in list_files(pkgconfig):
            target = os.path.join(pkgconfig_root, os.path.relpath(source_file, pkgconfig))
            copy_path(source_file, target)
            replaced = rewrite_pkgconfig_prefix(target, os.fspath(arch_install_dir), os.fspath(destination))
            logger.debug(f"Rewrote {replaced} path(s) in {target}")

    swiftmodules = os.path.join(arch_install_dir, "swiftmodules")
    if os.path.exists(swiftmodules):
        logger.info(f"  - Copying Swift modules to {destination}")
        copy_into(swiftmodules, destination)

    if package_specific and auxiliary_files:
        for source, name in auxiliary_files:
            logger.info(f"  - Copying auxiliary file {source}")
            copy_path(os.path.join(package_root, source), os.path.join(destination, name))
