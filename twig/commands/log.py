# The command: twig log
# What it does: Displays the commit history by starting at the current HEAD and walking backward through the parent links
# How it does: It starts with the current commit hash, reads and parses each commit object, prints it, and continues with its parents until a root commit is reached
# What data structure it uses: It performs a Graph Traversal (a stack-based walk up the parent chain) on the Directed Acyclic Graph (DAG) formed by the commits

import sys

from twig.utils import commits, refs, repository
from twig.utils.errors import TwigError


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    head_commit = refs.resolve_head(repo_root)
    if not head_commit:
        current_branch = refs.current_branch(repo_root) or 'HEAD'
        print(f"fatal: your current branch '{current_branch}' does not have any commits yet", file=sys.stderr)
        sys.exit(1)

    try:
        for commit_hash, commit in walk_history(repo_root, head_commit):
            print(f"commit {commit_hash}")
            print(f"Author: {commit.author}")
            print()
            for line in commit.message.splitlines():
                print(f"    {line}")
            print()
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)


def walk_history(repo_root, start): # Yields (hash, Commit) from `start` back to the root commit(s), each commit once
    visited = set()
    stack = [start]
    while stack:
        commit_hash = stack.pop()
        if commit_hash in visited:
            continue
        visited.add(commit_hash)
        commit = commits.read_commit(repo_root, commit_hash)
        yield commit_hash, commit
        for parent in reversed(commit.parents):
            if parent not in visited:
                stack.append(parent)
