# What it does: Reconciles the working directory, the index and HEAD with an arbitrary target commit
# How it does: A small state machine. It refuses to start if any tracked file differs from the index, resolves the target (branch, new branch, or detached commit), writes every blob of the target tree into the working directory, rebuilds the index from the tree walk, deletes everything the target does not contain, and finally commits the ref/index/HEAD updates together
# What data structure it uses: Tree Traversal (recursive walk of the target's tree objects), Set (target paths vs. paths currently on disk)

import collections
import enum
import logging
import os
import shutil
import stat

from . import commits, fs, objects, refs, tree
from .errors import (
    DirtyWorkingTreeError,
    InvalidReferenceError,
    NoCommitsOnBranchError,
    ObjectNotFoundError,
    StorageError,
)
from .index import MODE_EXECUTABLE, Index, IndexEntry
from .transaction import StateTransaction

logger = logging.getLogger(__name__)


class CheckoutState(enum.Enum):
    IDLE = 'idle'
    WORKDIR_CLEAN = 'workdir-clean'
    REF_RESOLVED = 'ref-resolved'
    HEAD_UPDATED = 'head-updated'
    TREE_RESTORED = 'tree-restored'
    INDEX_REBUILT = 'index-rebuilt'
    CLEANED = 'cleaned'


CheckoutResult = collections.namedtuple(
    'CheckoutResult', ['commit', 'branch', 'created', 'restored', 'removed']
)


def find_dirty_paths(repo_root, index): # Returns the tracked paths whose live content no longer matches the index
    dirty = []
    for rel_path in index:
        full_path = os.path.join(repo_root, fs.to_os_path(rel_path))
        if not os.path.isfile(full_path):
            dirty.append(rel_path)
            continue
        live_hash = objects.hash_object(repo_root, fs.read_bytes(full_path), 'blob', write=False)
        if live_hash != index.get(rel_path).sha:
            dirty.append(rel_path)
    return dirty


class Checkout:
    """
    One checkout run against `repo_root`.

    `state` follows IDLE -> WORKDIR_CLEAN -> REF_RESOLVED -> HEAD_UPDATED ->
    TREE_RESTORED -> INDEX_REBUILT -> CLEANED -> IDLE; `history` keeps every
    state entered so callers can see how far a failed run got. Nothing on
    disk is touched before TREE_RESTORED begins, and the ref, index and HEAD
    files only change once the working tree has been reconciled.
    """

    def __init__(self, repo_root):
        self.repo_root = repo_root
        self.state = CheckoutState.IDLE
        self.history = [CheckoutState.IDLE]

    def _enter(self, state):
        logger.debug("checkout: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def run(self, target, create_new=False):
        index = Index.load(self.repo_root)
        dirty = find_dirty_paths(self.repo_root, index)
        if dirty:
            raise DirtyWorkingTreeError(dirty)
        self._enter(CheckoutState.WORKDIR_CLEAN)

        txn = StateTransaction(self.repo_root)
        branch, commit_hash = self.resolve_target(target, create_new, txn)
        commit = commits.read_commit(self.repo_root, commit_hash)
        root_entries = tree.read_tree(self.repo_root, commit.tree)
        self.verify_tree(root_entries)
        self._enter(CheckoutState.REF_RESOLVED)

        if branch:
            txn.set_head(refs.Symbolic(refs.branch_ref(branch)))
        else:
            txn.set_head(refs.Direct(commit_hash))
        self._enter(CheckoutState.HEAD_UPDATED)

        restored = {}
        target_paths = set()
        self.restore_tree(root_entries, '', restored, target_paths)
        self._enter(CheckoutState.TREE_RESTORED)

        txn.set_index(self.rebuild_index(restored))
        self._enter(CheckoutState.INDEX_REBUILT)

        removed = self.remove_stale_paths(target_paths)
        self._enter(CheckoutState.CLEANED)

        txn.commit()
        self._enter(CheckoutState.IDLE)
        return CheckoutResult(commit_hash, branch, create_new, sorted(restored), removed)

    def resolve_target(self, target, create_new, txn): # Returns (branch name or None, commit hash)
        if create_new:
            refs.check_ref_name(target)
            if refs.branch_exists(self.repo_root, target):
                raise InvalidReferenceError(f"a branch named '{target}' already exists")
            head_commit = refs.resolve_head(self.repo_root)
            if not head_commit:
                raise NoCommitsOnBranchError(refs.current_branch(self.repo_root))
            txn.set_ref(refs.branch_ref(target), f"{head_commit}\n")
            return target, head_commit

        if refs.branch_exists(self.repo_root, target):
            commit_hash = refs.branch_commit(self.repo_root, target)
            if not commit_hash:
                raise NoCommitsOnBranchError(target)
            return target, commit_hash

        if not objects.object_exists(self.repo_root, target):
            raise InvalidReferenceError(f"'{target}' did not match any branch or known commit")
        return None, target

    def verify_tree(self, entries): # Fails before any write if a tree or blob of the target is missing
        for entry in entries:
            if entry.is_dir:
                self.verify_tree(tree.read_tree(self.repo_root, entry.sha))
            elif not objects.object_exists(self.repo_root, entry.sha):
                raise ObjectNotFoundError(entry.sha)

    def restore_tree(self, entries, prefix, restored, target_paths):
        for entry in entries:
            rel_path = f"{prefix}/{entry.name}" if prefix else entry.name
            full_path = os.path.join(self.repo_root, fs.to_os_path(rel_path))
            target_paths.add(rel_path)
            try:
                if entry.is_dir:
                    if os.path.lexists(full_path) and not _is_real_dir(full_path):
                        os.remove(full_path)
                    os.makedirs(full_path, exist_ok=True)
                else:
                    content = objects.read_blob(self.repo_root, entry.sha)
                    if _is_real_dir(full_path):
                        shutil.rmtree(full_path)
                    elif os.path.islink(full_path):
                        os.remove(full_path)
                    with open(full_path, 'wb') as f:
                        f.write(content)
                    _apply_mode(full_path, entry.mode)
                    restored[rel_path] = entry
            except OSError as e:
                raise StorageError("restore", full_path, e)
            if entry.is_dir:
                self.restore_tree(tree.read_tree(self.repo_root, entry.sha), rel_path, restored, target_paths)

    def rebuild_index(self, restored): # Index entries come from the tree walk; only the stat fields are read from disk
        index = Index(self.repo_root)
        for rel_path, entry in restored.items():
            stats = os.stat(os.path.join(self.repo_root, fs.to_os_path(rel_path)))
            index.set_entry(IndexEntry(
                rel_path, entry.sha, entry.mode, int(stats.st_mtime), int(stats.st_ctime), stats.st_size
            ))
        return index

    def remove_stale_paths(self, target_paths):
        removed = []
        for rel_path in fs.walk_worktree(self.repo_root):
            if rel_path in target_paths:
                continue
            full_path = os.path.join(self.repo_root, fs.to_os_path(rel_path))
            if not os.path.lexists(full_path):
                # Already gone with a removed parent directory
                continue
            try:
                if _is_real_dir(full_path):
                    shutil.rmtree(full_path)
                else:
                    os.remove(full_path)
            except OSError as e:
                raise StorageError("remove", full_path, e)
            removed.append(rel_path)
        return removed


def _is_real_dir(path):
    return os.path.isdir(path) and not os.path.islink(path)


def _apply_mode(path, mode):
    current = os.stat(path).st_mode
    if mode == MODE_EXECUTABLE:
        wanted = current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
    else:
        wanted = current & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    if wanted != current:
        os.chmod(path, stat.S_IMODE(wanted))


def checkout(repo_root, target, create_new=False):
    return Checkout(repo_root).run(target, create_new=create_new)
