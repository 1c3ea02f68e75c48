# The command: twig commit -m "<message>"
# What it does: Creates a permanent, uniquely identified snapshot (a commit object) of the currently staged changes.
# How it does: It builds a hierarchical Merkle Tree from the flat index to get a single root hash for the project's state. It then finds the parent commit, gathers metadata (author, message), and hashes them all into a new "commit" object. Finally, it advances the current branch (or a detached HEAD) to the new commit
# What data structure it uses: Merkle Tree (to represent the project's file structure), Directed Acyclic Graph (DAG) (as each commit links to its parent, forming the history graph), Hash Table / Dictionary (the underlying object store)

import sys

from twig.utils import commits, config, refs, repository, tree
from twig.utils.errors import TwigError
from twig.utils.index import Index
from twig.utils.transaction import RepositoryLock, StateTransaction


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    try:
        with RepositoryLock(repo_root):
            commit_hash, branch = commit_index(repo_root, args.message)
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    summary = args.message.splitlines()[0] if args.message else ''
    print(f"[{branch or 'detached HEAD'} {commit_hash[:7]}] {summary}")


def commit_index(repo_root, message, author=None, timestamp=None): # Commits the staged snapshot; returns (commit hash, branch or None)
    index = Index.load(repo_root)
    tree_hash = tree.build_tree(repo_root, index.entries)

    parent = refs.resolve_head(repo_root)
    author = author or config.get_author(repo_root)
    commit_hash = commits.create_commit(repo_root, tree_hash, parent, author, message, timestamp)

    txn = StateTransaction(repo_root)
    head = refs.read_ref(repo_root, refs.HEAD)
    if isinstance(head, refs.Symbolic):
        txn.set_ref(head.target, f"{commit_hash}\n")
    else:
        txn.set_head(refs.Direct(commit_hash))
    txn.commit()

    return commit_hash, refs.current_branch(repo_root)
