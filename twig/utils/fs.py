# What it does: Small filesystem helpers used by the object store, the index, refs and checkout
# How it does: `atomic_write` writes to a temporary file in the destination directory and renames it into place, `walk_worktree` lists everything under the repository root except the control directory
# What data structure it uses: List (of relative paths produced by a depth-first directory walk)

import os
import stat
import tempfile

from .errors import StorageError

CONTROL_DIR = '.git'


def to_repo_path(path): # Normalizes an OS path into the '/'-separated form stored in the index and trees
    return path.replace(os.sep, '/')


def to_os_path(repo_path):
    return repo_path.replace('/', os.sep)


def read_bytes(path):
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise StorageError("read", path, e)


def atomic_write(path, data):
    """
    Writes `data` to `path` so readers see either the old or the new content.
    Accepts bytes or str (str is encoded as UTF-8).
    """
    if isinstance(data, str):
        data = data.encode()

    dir_path = os.path.dirname(path) or '.'
    fd = None
    temp_path = None
    try:
        os.makedirs(dir_path, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=dir_path, prefix='.tmp_')
        with os.fdopen(fd, 'wb') as f:
            fd = None
            f.write(data)
        os.replace(temp_path, path)
        temp_path = None
    except OSError as e:
        raise StorageError("write", path, e)
    finally:
        if fd is not None:
            os.close(fd)
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)


def walk_worktree(repo_root): # Returns every file and directory under repo_root (relative, '/'-separated), skipping the control directory
    paths = []
    for root, dirs, files in os.walk(repo_root):
        if root == repo_root and CONTROL_DIR in dirs:
            dirs.remove(CONTROL_DIR)
        dirs.sort()
        for name in dirs:
            paths.append(to_repo_path(os.path.relpath(os.path.join(root, name), repo_root)))
        for name in sorted(files):
            paths.append(to_repo_path(os.path.relpath(os.path.join(root, name), repo_root)))
    return paths


def list_worktree_files(repo_root): # Like walk_worktree but only regular files
    return [p for p in walk_worktree(repo_root) if os.path.isfile(os.path.join(repo_root, to_os_path(p)))]


def is_executable(path):
    return bool(os.stat(path).st_mode & stat.S_IXUSR)
