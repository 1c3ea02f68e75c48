# The command: twig add <file>...
# What it does: Takes a snapshot of files from the working directory and stages them for the next commit by updating the index
# How it does: It loads the binary index, expands directory arguments (including '.') into the files below them, stores each file's content as a blob object and records the blob hash plus the file's metadata in the index
# What data structure it uses: Hash Table / Dictionary (the index in memory), List (the expanded file arguments), and performs a Tree Traversal (when expanding directories with os.walk)

import os
import sys

from twig.utils import fs, objects, repository
from twig.utils.errors import TwigError
from twig.utils.index import Index
from twig.utils.transaction import RepositoryLock


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    try:
        with RepositoryLock(repo_root):
            staged, missing = add_paths(repo_root, args.files)
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    for rel_path in staged:
        print(f"Added '{rel_path}' to the index.")
    for path in missing:
        print(f"fatal: pathspec '{path}' did not match any files", file=sys.stderr)
    if missing:
        sys.exit(1)


def add_paths(repo_root, paths): # Stages every file named by `paths`; returns (staged relative paths, unmatched arguments)
    index = Index.load(repo_root)
    staged = []
    missing = []

    for path in paths:
        files = _expand_path(repo_root, path)
        if files is None:
            missing.append(path)
            continue
        for file_path in files:
            content = fs.read_bytes(file_path)
            blob_hash = objects.save_object(repo_root, 'blob', content)
            entry = index.stage_file(file_path, blob_hash)
            staged.append(entry.path)

    return staged, missing


def _expand_path(repo_root, path):
    """
    Returns the absolute paths of the files `path` stands for, or None when
    it names nothing inside the working tree.
    """
    abs_path = os.path.abspath(path)
    rel_path = os.path.relpath(abs_path, repo_root)
    if rel_path.startswith(os.pardir) or rel_path.split(os.sep)[0] == fs.CONTROL_DIR:
        return None
    if os.path.isfile(abs_path):
        return [abs_path]
    if os.path.isdir(abs_path):
        expanded = []
        for root, dirs, files in os.walk(abs_path):
            if fs.CONTROL_DIR in dirs:
                dirs.remove(fs.CONTROL_DIR)
            dirs.sort()
            for name in sorted(files):
                expanded.append(os.path.join(root, name))
        return expanded
    return None
