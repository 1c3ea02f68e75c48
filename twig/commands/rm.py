# The command: twig rm <file>... [--cached] [--force]
# What it does: Removes files from the staging area and, unless --cached is given, from the working directory
# How it does: It loads the index, unstages each named file (directories are expanded to the staged paths below them) and deletes the working copy. A working copy whose content differs from the staged blob is only deleted with --force
# What data structure it uses: Hash Table / Dictionary (the index in memory), List (the paths to remove)

import os
import sys

from twig.utils import fs, objects, repository
from twig.utils.errors import DirtyWorkingTreeError, StorageError, TwigError
from twig.utils.index import Index
from twig.utils.transaction import RepositoryLock


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    try:
        with RepositoryLock(repo_root):
            removed, not_staged = remove_paths(
                repo_root, args.files,
                keep_in_workdir=getattr(args, 'cached', False),
                force=getattr(args, 'force', False),
            )
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    for rel_path in removed:
        print(f"rm '{rel_path}'")
    for path in not_staged:
        print(f"warning: '{path}' is not staged, skipped", file=sys.stderr)


def remove_paths(repo_root, paths, keep_in_workdir=False, force=False): # Returns (removed relative paths, arguments that matched nothing staged)
    index = Index.load(repo_root)
    matches = []
    not_staged = []

    for path in paths:
        rel_path = fs.to_repo_path(os.path.relpath(os.path.abspath(path), repo_root))
        if rel_path == '.':
            found = list(index)
        else:
            found = [p for p in index if p == rel_path or p.startswith(rel_path + '/')]
        if not found:
            not_staged.append(path)
        matches.extend(p for p in found if p not in matches)

    if not keep_in_workdir and not force:
        modified = [p for p in matches if _is_modified(repo_root, index, p)]
        if modified:
            raise DirtyWorkingTreeError(modified, action="rm")

    for match in matches:
        index.unstage_file(match)
        full_path = os.path.join(repo_root, fs.to_os_path(match))
        if not keep_in_workdir and os.path.isfile(full_path):
            try:
                os.remove(full_path)
            except OSError as e:
                raise StorageError("remove", full_path, e)

    return matches, not_staged


def _is_modified(repo_root, index, rel_path):
    full_path = os.path.join(repo_root, fs.to_os_path(rel_path))
    if not os.path.isfile(full_path):
        return False
    live_hash = objects.hash_object(repo_root, fs.read_bytes(full_path), 'blob', write=False)
    return live_hash != index.get(rel_path).sha
