# What it does: Converts between the flat staging area ({path: IndexEntry}) and the nested graph of tree objects
# How it does: `build_tree` groups entries by parent directory and writes one tree object per directory, deepest first, so every parent can embed the hash of its children. `parse_tree` reads the binary "<octal mode> <name>\0<20 raw bytes>" records back
# What data structure it uses: Merkle Tree (each tree's hash covers the hashes of everything below it), Dictionary (directory -> children grouping)

import collections
import posixpath

from . import objects
from .errors import MalformedObjectError

MODE_DIRECTORY = 0o40000

TreeEntry = collections.namedtuple('TreeEntry', ['name', 'mode', 'sha', 'is_dir'])


def serialize_tree(entries):
    """
    Encodes tree entries into a tree payload. Entries are written sorted by
    name (byte-wise) so a directory's tree hash depends only on its content.
    """
    seen = set()
    buf = bytearray()
    for entry in sorted(entries, key=lambda e: e.name.encode()):
        if entry.name in seen:
            raise ValueError(f"duplicate tree entry '{entry.name}'")
        seen.add(entry.name)
        buf += f'{entry.mode:o} {entry.name}'.encode() + b'\0' + bytes.fromhex(entry.sha)
    return bytes(buf)


def parse_tree(data):
    entries = []
    i = 0
    while i < len(data):
        space = data.find(b' ', i)
        if space < 0:
            raise MalformedObjectError(f"tree record at offset {i} has no mode terminator")
        null = data.find(b'\0', space + 1)
        if null < 0:
            raise MalformedObjectError(f"tree record at offset {i} has no name terminator")
        if null + 21 > len(data):
            raise MalformedObjectError(f"tree record at offset {i} is truncated")
        try:
            mode = int(data[i:space].decode(), 8)
        except ValueError:
            raise MalformedObjectError(f"bad mode in tree record at offset {i}")
        try:
            name = data[space + 1:null].decode()
        except UnicodeDecodeError:
            raise MalformedObjectError(f"tree record at offset {i} has a name that is not valid UTF-8")
        sha1 = data[null + 1:null + 21].hex()
        entries.append(TreeEntry(name, mode, sha1, mode == MODE_DIRECTORY))
        i = null + 21
    return entries


def write_tree(repo_root, entries):
    return objects.save_object(repo_root, 'tree', serialize_tree(entries))


def create_empty_tree(repo_root):
    return objects.save_object(repo_root, 'tree', b'')


def build_tree(repo_root, index_entries): # Writes the tree objects for a {path: IndexEntry} mapping and returns the root tree hash
    files_by_dir = collections.defaultdict(list)
    subdirs = collections.defaultdict(set)

    for path, entry in index_entries.items():
        parent = posixpath.dirname(path)
        files_by_dir[parent].append(entry)
        # Register every ancestor so intermediate directories without files still get a tree
        while parent:
            grandparent = posixpath.dirname(parent)
            subdirs[grandparent].add(parent)
            parent = grandparent

    def build(directory):
        entries = []
        for entry in files_by_dir.get(directory, []):
            entries.append(TreeEntry(posixpath.basename(entry.path), entry.mode, entry.sha, False))
        for subdir in sorted(subdirs.get(directory, ())):
            entries.append(TreeEntry(posixpath.basename(subdir), MODE_DIRECTORY, build(subdir), True))
        return write_tree(repo_root, entries)

    return build('')


def read_tree(repo_root, sha1):
    obj_type, content = objects.read_object(repo_root, sha1)
    if obj_type != 'tree':
        raise MalformedObjectError(f"expected tree, found {obj_type}", sha1)
    return parse_tree(content)


def flatten_tree(repo_root, sha1, prefix=''): # Returns {path: TreeEntry} for every file reachable from the tree
    files = {}
    for entry in read_tree(repo_root, sha1):
        path = posixpath.join(prefix, entry.name) if prefix else entry.name
        if entry.is_dir:
            files.update(flatten_tree(repo_root, entry.sha, path))
        else:
            files[path] = entry
    return files
