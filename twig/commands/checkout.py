# The command: twig checkout <branch-name> | <commit-hash> [-b]
# What it does: Switches to a branch (or, with -b, a new branch started at the current commit) or detaches HEAD at a commit, and makes the working directory and index match it exactly
# How it does: It hands the target to the checkout engine in utils/checkout.py, which checks that no tracked file has unstaged changes, restores the target tree, rebuilds the index, removes paths the target does not contain and updates HEAD
# What data structure it uses: Tree Traversal (restoring the target's tree objects), Set (target paths vs. paths on disk), Hash Table (object store lookup)

import sys

from twig.utils import checkout as checkout_engine
from twig.utils import refs, repository
from twig.utils.errors import TwigError
from twig.utils.transaction import RepositoryLock


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    create_new = getattr(args, 'new_branch', False)
    previous_branch = refs.current_branch(repo_root)

    try:
        with RepositoryLock(repo_root):
            result = checkout_engine.checkout(repo_root, args.target, create_new=create_new)
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    for rel_path in result.removed:
        print(f"Removed '{rel_path}'")

    if result.created:
        print(f"Switched to a new branch '{result.branch}'")
    elif result.branch and result.branch == previous_branch:
        print(f"Already on '{result.branch}'")
    elif result.branch:
        print(f"Switched to branch '{result.branch}'")
    else:
        print(f"HEAD is now at {result.commit[:7]} (detached)")
