"""
Local tree traversal.
"""
import os
import stat

from ..models.objects import LocalFile
from ..utils.errors import WalkError


def _raise_walk_error(err):
    raise WalkError(f"Cannot read \"{err.filename}\"", original=err) from err


def relative_key_path(path, root):
    """Relative path of *path* under *root* with '/' separators."""
    rel = os.path.relpath(path, root)
    return rel.replace(os.sep, '/').lstrip('/')


def walk_files(root):
    """Lazily yield a :class:`LocalFile` for every regular file under *root*.

    Directories are recursed into in sorted order and never yielded
    themselves, so the sequence is deterministic for a given tree.

    Args:
        root: Source directory

    Raises:
        WalkError: If *root* or a subdirectory cannot be read
    """
    if not os.path.isdir(root):
        raise WalkError(f"Source directory \"{root}\" does not exist or is not a directory")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            try:
                info = os.stat(path)
            except OSError as e:
                raise WalkError(f"Cannot stat \"{path}\"", original=e) from e
            if not stat.S_ISREG(info.st_mode):
                continue
            yield LocalFile(path=path, relative_path=relative_key_path(path, root), stat=info)
