# What it does: Builds commit objects and parses them back
# How it does: A commit is a line-oriented text header (tree, optional parent, author, committer), a blank line and the message, saved as a "commit" object
# What data structure it uses: Directed Acyclic Graph (DAG) (each commit links to its parent, forming the history graph)

import collections
import time

from . import objects
from .errors import MalformedObjectError

Commit = collections.namedtuple('Commit', ['tree', 'parents', 'author', 'committer', 'message'])


def format_timestamp(timestamp=None): # "<unix seconds> <+hhmm>", sampled once per call
    if timestamp is None:
        timestamp = int(time.time())
    offset = -time.altzone if time.localtime(timestamp).tm_isdst > 0 else -time.timezone
    sign = '+' if offset >= 0 else '-'
    offset = abs(offset)
    return f"{int(timestamp)} {sign}{offset // 3600:02d}{(offset % 3600) // 60:02d}"


def serialize_commit(tree_hash, parent_hash, author, message, timestamp):
    lines = [f'tree {tree_hash}']
    if parent_hash:
        lines.append(f'parent {parent_hash}')
    lines.append(f'author {author} {timestamp}')
    lines.append(f'committer {author} {timestamp}')
    lines.append('')
    lines.append(message)
    return '\n'.join(lines).encode()


def create_commit(repo_root, tree_hash, parent_hash, author, message, timestamp=None):
    """
    Saves a commit object and returns its hash.

    `timestamp` is either a preformatted "<seconds> <offset>" string or an
    int; it is resolved exactly once, so identical inputs always give the
    same hash.
    """
    if not isinstance(timestamp, str):
        timestamp = format_timestamp(timestamp)
    content = serialize_commit(tree_hash, parent_hash, author, message, timestamp)
    return objects.save_object(repo_root, 'commit', content)


def parse_commit(content, sha1=None):
    text = content.decode()
    header, _, message = text.partition('\n\n')
    fields = {'tree': None, 'author': None, 'committer': None}
    parents = []
    for line in header.splitlines():
        key, _, value = line.partition(' ')
        if key == 'parent':
            parents.append(value)
        elif key in fields:
            fields[key] = value
    if not fields['tree']:
        raise MalformedObjectError("commit has no tree", sha1)
    return Commit(fields['tree'], parents, fields['author'], fields['committer'], message)


def read_commit(repo_root, sha1):
    obj_type, content = objects.read_object(repo_root, sha1)
    if obj_type != 'commit':
        raise MalformedObjectError(f"expected commit, found {obj_type}", sha1)
    return parse_commit(content, sha1)
