# What it does: Provides the repository-level helpers: creating the .git layout, finding the repo root, and reading HEAD
# How it does: `init_repository` creates the objects/refs/hooks directories and points HEAD at the master branch. `find_repo_root` walks up the directory tree to locate the `.git` directory
# What data structure it uses: Uses recursion (specifically, linear recursion) to find the repo root. Conceptually, it manages pointers (the `HEAD` file and branch files)

import logging
import os

from . import fs, refs
from .errors import NotARepositoryError

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = 'master'

_LAYOUT_DIRS = (
    ('objects',),
    ('objects', 'info'),
    ('objects', 'pack'),
    ('refs',),
    ('refs', 'heads'),
    ('refs', 'tags'),
    ('refs', 'remotes'),
    ('hooks',),
)


def find_repo_root(path='.'): # Recursively searches for the .git directory to find the repository root
    path = os.path.abspath(path)
    if os.path.isdir(os.path.join(path, fs.CONTROL_DIR)):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)


def require_repo_root(path='.'):
    repo_root = find_repo_root(path)
    if not repo_root:
        raise NotARepositoryError(os.path.abspath(path))
    return repo_root


def init_repository(path='.'):
    """
    Creates an empty repository in `path`. Returns (git_dir, created); an
    existing repository is left untouched and reported with created=False.
    """
    repo_root = os.path.abspath(path)
    git_dir = os.path.join(repo_root, fs.CONTROL_DIR)
    if os.path.isdir(git_dir):
        return git_dir, False

    for parts in _LAYOUT_DIRS:
        os.makedirs(os.path.join(git_dir, *parts), exist_ok=True)

    for name in ('config', 'description', 'index'):
        open(os.path.join(git_dir, name), 'a').close()

    refs.set_head(repo_root, refs.Symbolic(refs.branch_ref(DEFAULT_BRANCH)))
    logger.debug("initialized repository at %s", git_dir)
    return git_dir, True


def get_head_commit(repo_root): # Retrieves the commit hash that HEAD points to, or None if there are no commits
    return refs.resolve_head(repo_root)


def get_head_status(repo_root): # Returns a user-friendly string describing HEAD state
    current_branch = refs.current_branch(repo_root)
    if current_branch:
        return f"On branch {current_branch}"
    head_commit = get_head_commit(repo_root)
    if head_commit:
        return f"HEAD detached at {head_commit[:7]}"
    return "HEAD detached (no commits yet)"
