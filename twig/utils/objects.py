# What it does: Manages the low-level object database, handling the storage and retrieval of all blobs, trees, commits and tags
# How it does: It implements a content-addressed storage system. `save_object` prefixes the payload with a "<kind> <length>\0" header, hashes the whole thing with SHA-1 and writes it under objects/<2 hex>/<38 hex>. `load_object` strips the header back off
# What data structure it uses: Hash Table / Dictionary (the entire object store is a content-addressed dictionary where the SHA-1 hash is the key)
# Objects are stored uncompressed, one file per object

import hashlib
import logging
import os
import re

from . import fs
from .errors import MalformedObjectError, ObjectNotFoundError

logger = logging.getLogger(__name__)

OBJECT_KINDS = ('blob', 'tree', 'commit', 'tag')

_HASH_RE = re.compile(r'^[0-9a-f]{40}$')


def is_valid_hash(sha1):
    return isinstance(sha1, str) and bool(_HASH_RE.match(sha1))


def object_path(repo_root, sha1):
    return os.path.join(repo_root, fs.CONTROL_DIR, 'objects', sha1[:2], sha1[2:])


def encode_object(obj_type, content): # Returns the bytes actually stored on disk: header + payload
    if obj_type not in OBJECT_KINDS:
        raise MalformedObjectError(f"unknown object type '{obj_type}'")
    return f'{obj_type} {len(content)}\0'.encode() + content


def hash_object(repo_root, content, obj_type, write=True): #Hashes content and optionally writes it as an object of the given type
    data = encode_object(obj_type, content)
    sha1 = hashlib.sha1(data).hexdigest()

    if write:
        path = object_path(repo_root, sha1)
        if os.path.exists(path):
            logger.debug("object %s already stored", sha1)
        else:
            fs.atomic_write(path, data)
            logger.debug("stored %s %s (%d bytes)", obj_type, sha1, len(content))

    return sha1


def save_object(repo_root, obj_type, content):
    return hash_object(repo_root, content, obj_type, write=True)


def object_exists(repo_root, sha1):
    return is_valid_hash(sha1) and os.path.isfile(object_path(repo_root, sha1))


def _split_header(data, sha1):
    null_byte_index = data.find(b'\0')
    if null_byte_index < 0:
        raise MalformedObjectError("missing header terminator", sha1)
    try:
        obj_type, size = data[:null_byte_index].decode().split(' ')
        size = int(size)
    except ValueError:
        raise MalformedObjectError("unparseable header", sha1)
    content = data[null_byte_index + 1:]
    if obj_type not in OBJECT_KINDS:
        raise MalformedObjectError(f"unknown object type '{obj_type}'", sha1)
    if size != len(content):
        raise MalformedObjectError(f"header says {size} bytes, found {len(content)}", sha1)
    return obj_type, content


def load_object(repo_root, sha1):
    """
    Returns the payload of the object `sha1`, or None when the hash is
    malformed or the object is not in the store.
    """
    if not is_valid_hash(sha1):
        return None
    path = object_path(repo_root, sha1)
    if not os.path.isfile(path):
        return None
    data = fs.read_bytes(path)
    return _split_header(data, sha1)[1]


def read_object(repo_root, sha1): #Reads an object by its SHA-1 hash and returns its type and content, raising if it is absent
    if not is_valid_hash(sha1):
        raise ObjectNotFoundError(sha1)
    path = object_path(repo_root, sha1)
    if not os.path.isfile(path):
        raise ObjectNotFoundError(sha1)
    return _split_header(fs.read_bytes(path), sha1)


def read_blob(repo_root, sha1):
    obj_type, content = read_object(repo_root, sha1)
    if obj_type != 'blob':
        raise MalformedObjectError(f"expected blob, found {obj_type}", sha1)
    return content
