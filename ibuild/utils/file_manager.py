import os
import shutil
from ..cli_logger import logger
from ..errors import FileSystemError

# -------------------- Helpers: directories & copies --------------------

def ensure_dir(path):
    """Create a directory and its parents if missing."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Could not create directory {path}: {e}") from e
    return path


def _clear_replaced_links(src, dest):
    """Remove entries of ``dest`` that a symlink of ``src`` is about to take over."""
    for root, dirs, files in os.walk(src):
        relative = os.path.relpath(root, src)
        for name in dirs + files:
            if not os.path.islink(os.path.join(root, name)):
                continue
            target = os.path.normpath(os.path.join(dest, relative, name))
            if os.path.islink(target) or os.path.isfile(target):
                os.unlink(target)
            elif os.path.isdir(target):
                shutil.rmtree(target)


def copy_path(src, dest):
    """Copy a file or a directory tree to exactly ``dest``.

    Directory trees are merged into an existing ``dest`` and symlinks inside
    them replace whatever ``dest`` holds at that path; files overwrite it.
    Copying the same thing twice leaves the same result.
    """
    if not os.path.exists(src):
        raise FileSystemError(f"Cannot copy {src}: no such file or directory")
    try:
        if os.path.isdir(src):
            if os.path.isdir(dest):
                _clear_replaced_links(src, dest)
            shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)
        else:
            parent = os.path.dirname(dest)
            if parent:
                os.makedirs(parent, exist_ok=True)
            shutil.copy2(src, dest)
    except (shutil.Error, OSError) as e:
        raise FileSystemError(f"Error copying {src} to {dest}: {e}") from e
    logger.debug(f"Copied {src} to {dest}")
    return dest


def copy_into(src, dest_dir):
    """Copy ``src`` inside ``dest_dir``, keeping its base name (``cp -R src dest_dir/``)."""
    ensure_dir(dest_dir)
    return copy_path(src, os.path.join(dest_dir, os.path.basename(os.path.normpath(src))))


def list_files(directory):
    """All regular files below ``directory``, sorted."""
    found = []
    for root, _, files in os.walk(directory):
        for name in files:
            found.append(os.path.join(root, name))
    return sorted(found)


def read_text(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeError) as e:
        raise FileSystemError(f"Error reading {path}: {e}") from e


def write_text(path, content):
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except (OSError, UnicodeError) as e:
        raise FileSystemError(f"Error writing {path}: {e}") from e
