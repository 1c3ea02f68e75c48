# What it does: Provides centralized read/write operations for the .git/index file (the staging area)
# How it does: The index is a binary file rewritten whole on every change. Each record is a raw 20-byte hash, the mode, mtime, ctime and size as big-endian integers, then a 1-byte path length and the path
# What data structure it uses: Dictionary (mapping repository-relative paths to IndexEntry tuples)

import collections
import logging
import os
import struct

from . import fs
from .errors import InvalidPathError, MalformedObjectError

logger = logging.getLogger(__name__)

MODE_REGULAR = 0o100644
MODE_EXECUTABLE = 0o100755
MAX_PATH_BYTES = 255

# sha(20) mode(u32) mtime(u64) ctime(u64) size(u64) path_len(u8)
_ENTRY_HEADER = struct.Struct('>20sIQQQB')

IndexEntry = collections.namedtuple('IndexEntry', ['path', 'sha', 'mode', 'mtime', 'ctime', 'size'])


def index_path(repo_root):
    return os.path.join(repo_root, fs.CONTROL_DIR, 'index')


def encode_path(path): # Returns the UTF-8 bytes stored for `path`; the length must fit the 1-byte length field
    try:
        path_bytes = path.encode()
    except UnicodeEncodeError:
        raise InvalidPathError(path.encode(errors='replace').decode(), "not valid UTF-8")
    if len(path_bytes) > MAX_PATH_BYTES:
        raise InvalidPathError(path, f"longer than {MAX_PATH_BYTES} bytes")
    return path_bytes


def encode_entries(entries):
    buf = bytearray()
    for path in sorted(entries):
        entry = entries[path]
        path_bytes = encode_path(entry.path)
        buf += _ENTRY_HEADER.pack(
            bytes.fromhex(entry.sha), entry.mode, entry.mtime, entry.ctime, entry.size, len(path_bytes)
        )
        buf += path_bytes
    return bytes(buf)


def decode_entries(data):
    entries = {}
    i = 0
    while i < len(data):
        if i + _ENTRY_HEADER.size > len(data):
            raise MalformedObjectError(f"truncated index entry at offset {i}")
        raw_sha, mode, mtime, ctime, size, path_len = _ENTRY_HEADER.unpack_from(data, i)
        i += _ENTRY_HEADER.size
        if i + path_len > len(data):
            raise MalformedObjectError(f"truncated index path at offset {i}")
        try:
            path = data[i:i + path_len].decode()
        except UnicodeDecodeError:
            raise MalformedObjectError(f"index path at offset {i} is not valid UTF-8")
        i += path_len
        entries[path] = IndexEntry(path, raw_sha.hex(), mode, mtime, ctime, size)
    return entries


def entry_for_file(repo_root, rel_path, sha): # Builds an IndexEntry from the live file's metadata
    stats = os.stat(os.path.join(repo_root, fs.to_os_path(rel_path)))
    mode = MODE_EXECUTABLE if fs.is_executable(os.path.join(repo_root, fs.to_os_path(rel_path))) else MODE_REGULAR
    return IndexEntry(rel_path, sha, mode, int(stats.st_mtime), int(stats.st_ctime), stats.st_size)


class Index:
    """
    In-memory view of the staging area.

    Every mutating method (`stage_file`, `unstage_file`, `clear`) persists the
    whole index immediately; `set_entry` only touches memory and is meant for
    bulk rebuilds that end with an explicit `save()` or `encode()`.
    """

    def __init__(self, repo_root, entries=None):
        self.repo_root = repo_root
        self.entries = entries if entries is not None else {}

    @classmethod
    def load(cls, repo_root):
        path = index_path(repo_root)
        if not os.path.exists(path):
            return cls(repo_root)
        return cls(repo_root, decode_entries(fs.read_bytes(path)))

    def encode(self):
        return encode_entries(self.entries)

    def save(self):
        fs.atomic_write(index_path(self.repo_root), self.encode())

    def relative_path(self, file_path):
        abs_path = os.path.abspath(os.path.join(self.repo_root, file_path))
        return fs.to_repo_path(os.path.relpath(abs_path, self.repo_root))

    def stage_file(self, file_path, sha):
        rel_path = self.relative_path(file_path)
        encode_path(rel_path)
        self.entries[rel_path] = entry_for_file(self.repo_root, rel_path, sha)
        self.save()
        return self.entries[rel_path]

    def unstage_file(self, file_path):
        rel_path = self.relative_path(file_path)
        if rel_path in self.entries:
            del self.entries[rel_path]
        else:
            logger.warning("'%s' is not staged", rel_path)
        self.save()

    def clear(self):
        self.entries.clear()
        self.save()

    def set_entry(self, entry):
        encode_path(entry.path)
        self.entries[entry.path] = entry

    def hashes(self):
        return {path: entry.sha for path, entry in self.entries.items()}

    def get(self, rel_path, default=None):
        return self.entries.get(rel_path, default)

    def __contains__(self, rel_path):
        return rel_path in self.entries

    def __iter__(self):
        return iter(sorted(self.entries))

    def __len__(self):
        return len(self.entries)
