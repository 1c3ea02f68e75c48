# What it does: Manages named pointers: branch refs under refs/heads, tags under refs/tags, and the HEAD indirection
# How it does: Each ref is a text file under .git whose whole content is either a commit hash or "ref: <other ref>". `resolve_ref` never follows the indirection; HEAD handling does it explicitly with a bounded loop
# What data structure it uses: Map / Dictionary (conceptually the refs directory maps names to hashes), Tagged variant (Direct | Symbolic)

import collections
import logging
import os

from . import fs
from .errors import InvalidReferenceError, StorageError

logger = logging.getLogger(__name__)

HEAD = 'HEAD'
HEADS_PREFIX = 'refs/heads/'
TAGS_PREFIX = 'refs/tags/'
SYMREF_PREFIX = 'ref: '

# HEAD may point at a branch, but a branch may not point at another ref
MAX_SYMREF_DEPTH = 1

Direct = collections.namedtuple('Direct', ['sha'])
Symbolic = collections.namedtuple('Symbolic', ['target'])


def ref_path(repo_root, ref_name):
    return os.path.join(repo_root, fs.CONTROL_DIR, fs.to_os_path(ref_name))


def branch_ref(name):
    return HEADS_PREFIX + name


def tag_ref(name):
    return TAGS_PREFIX + name


def create_ref(repo_root, ref_name, value): # Writes value (a hash or "ref: ...") as the entire content of the ref file
    fs.atomic_write(ref_path(repo_root, ref_name), value)
    logger.debug("ref %s -> %s", ref_name, value)


def resolve_ref(repo_root, ref_name): # Returns the trimmed content of the ref, or None if it does not exist
    path = ref_path(repo_root, ref_name)
    if not os.path.isfile(path):
        return None
    with open(path, 'r') as f:
        content = f.read().strip()
    return content or None


def delete_ref(repo_root, ref_name):
    path = ref_path(repo_root, ref_name)
    if os.path.isfile(path):
        try:
            os.remove(path)
        except OSError as e:
            raise StorageError("delete", path, e)
        logger.debug("deleted ref %s", ref_name)


def read_ref(repo_root, ref_name): # Returns Direct(sha), Symbolic(target) or None
    content = resolve_ref(repo_root, ref_name)
    if content is None:
        return None
    if content.startswith(SYMREF_PREFIX):
        return Symbolic(content[len(SYMREF_PREFIX):].strip())
    return Direct(content)


def format_ref(value):
    if isinstance(value, Symbolic):
        return f'{SYMREF_PREFIX}{value.target}\n'
    return f'{value.sha}\n'


def resolve_symbolic(repo_root, ref_name):
    """
    Follows `ref_name` through at most MAX_SYMREF_DEPTH symbolic hops and
    returns the commit hash it ends on, or None if the chain ends on a ref
    that does not exist yet (an unborn branch).
    """
    value = read_ref(repo_root, ref_name)
    depth = 0
    while isinstance(value, Symbolic):
        if depth == MAX_SYMREF_DEPTH:
            raise InvalidReferenceError(f"symbolic ref chain from '{ref_name}' is too deep")
        depth += 1
        value = read_ref(repo_root, value.target)
    return value.sha if value else None


def resolve_head(repo_root):
    return resolve_symbolic(repo_root, HEAD)


def current_branch(repo_root): # Returns the branch HEAD points at, or None when HEAD is detached
    value = read_ref(repo_root, HEAD)
    if isinstance(value, Symbolic) and value.target.startswith(HEADS_PREFIX):
        return value.target[len(HEADS_PREFIX):]
    return None


def set_head(repo_root, value):
    create_ref(repo_root, HEAD, format_ref(value))


def branch_exists(repo_root, name):
    return is_valid_ref_name(name) and os.path.isfile(ref_path(repo_root, branch_ref(name)))


def branch_commit(repo_root, name):
    return resolve_ref(repo_root, branch_ref(name))


def _list_refs(repo_root, prefix):
    base = ref_path(repo_root, prefix)
    names = []
    if not os.path.isdir(base):
        return names
    for root, _, files in os.walk(base):
        for name in files:
            if name.startswith('.tmp_'):
                continue
            names.append(fs.to_repo_path(os.path.relpath(os.path.join(root, name), base)))
    return sorted(names)


def list_branches(repo_root):
    return _list_refs(repo_root, HEADS_PREFIX)


def list_tags(repo_root):
    return _list_refs(repo_root, TAGS_PREFIX)


def is_valid_ref_name(name): # False for names that would escape the refs namespace or collide with lock/temp files
    return not (not name or name.startswith(('.', '/', '-')) or name.endswith(('/', '.lock'))
            or '..' in name or '\\' in name or ' ' in name or '//' in name)


def check_ref_name(name):
    if not is_valid_ref_name(name):
        raise InvalidReferenceError(f"'{name}' is not a valid ref name")
