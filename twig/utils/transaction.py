# What it does: Groups the "advance branch ref + rewrite index + update HEAD" writes of a mutating command, and serializes mutating commands with a repository lock
# How it does: Pending writes are collected in memory. `commit()` first writes every one of them to a temporary file next to its destination, and only once all of them are on disk renames them into place in a fixed order (refs, index, HEAD)
# What data structure it uses: Ordered List (of pending path/content pairs), Lock file (created with O_CREAT | O_EXCL)

import logging
import os
import tempfile

from . import fs, refs
from .errors import RepositoryLockedError, StorageError
from .index import index_path

logger = logging.getLogger(__name__)

LOCK_NAME = 'twig.lock'


class RepositoryLock:
    """Exclusive per-repository lock held for the duration of a mutating command."""

    def __init__(self, repo_root):
        self.path = os.path.join(repo_root, fs.CONTROL_DIR, LOCK_NAME)
        self._held = False

    def acquire(self):
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            raise RepositoryLockedError(self.path)
        except OSError as e:
            raise StorageError("lock", self.path, e)
        with os.fdopen(fd, 'w') as f:
            f.write(f"{os.getpid()}\n")
        self._held = True

    def release(self):
        if self._held:
            self._held = False
            if os.path.exists(self.path):
                os.remove(self.path)

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()


class StateTransaction:
    """
    Collects ref, index and HEAD updates and applies them together.

    Nothing is visible on disk until `commit()`; a failure while staging
    leaves every destination untouched.
    """

    def __init__(self, repo_root):
        self.repo_root = repo_root
        self._refs = []
        self._index = None
        self._head = None

    def set_ref(self, ref_name, value):
        self._refs.append((refs.ref_path(self.repo_root, ref_name), value))

    def set_index(self, index):
        self._index = (index_path(self.repo_root), index.encode())

    def set_head(self, value):
        self._head = (refs.ref_path(self.repo_root, refs.HEAD), refs.format_ref(value))

    def pending(self):
        writes = list(self._refs)
        if self._index:
            writes.append(self._index)
        if self._head:
            writes.append(self._head)
        return writes

    def commit(self):
        staged = []
        try:
            for path, data in self.pending():
                if isinstance(data, str):
                    data = data.encode()
                dir_path = os.path.dirname(path)
                os.makedirs(dir_path, exist_ok=True)
                fd, temp_path = tempfile.mkstemp(dir=dir_path, prefix='.tmp_')
                staged.append((temp_path, path))
                with os.fdopen(fd, 'wb') as f:
                    f.write(data)
        except OSError as e:
            for temp_path, _ in staged:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
            raise StorageError("stage", self.repo_root, e)

        for temp_path, path in staged:
            try:
                os.replace(temp_path, path)
            except OSError as e:
                raise StorageError("rename", path, e)
            logger.debug("updated %s", os.path.relpath(path, self.repo_root))

        self._refs, self._index, self._head = [], None, None
