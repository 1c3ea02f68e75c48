# The command: twig branch [<branch-name>] [-d]
# What it does: Creates a new branch pointer to the current commit, deletes one with -d, or if no name is given, lists all existing branches
# How it does: To create a branch, it resolves HEAD to a commit hash and writes it to a new file named `<branch-name>` inside `.git/refs/heads`. Deleting removes that file, unless it is the branch HEAD points at
# To list branches, it reads all the filenames in that directory and prints them, marking the current one with an asterisk
# What data structure it uses: Map / Dictionary (conceptually, the `refs/heads` directory maps branch names to commit hashes), List (to hold branch names for sorting and display)

import sys

from twig.utils import refs, repository
from twig.utils.errors import InvalidReferenceError, NoCommitsOnBranchError, TwigError
from twig.utils.transaction import RepositoryLock


def run(args):
#With no arguments, lists all branches.
#With an argument, creates (or with -d deletes) a branch.

    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    if not args.name:
        current_branch = refs.current_branch(repo_root)
        for name in refs.list_branches(repo_root):
            if name == current_branch:
                print(f"* {name}")
            else:
                print(f"  {name}")
        return

    try:
        with RepositoryLock(repo_root):
            if getattr(args, 'delete', False):
                commit_hash = delete_branch(repo_root, args.name)
                print(f"Deleted branch {args.name} (was {commit_hash[:7] if commit_hash else 'unborn'}).")
            else:
                commit_hash = create_branch(repo_root, args.name)
                print(f"Branch '{args.name}' created at commit {commit_hash[:7]}")
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)


def create_branch(repo_root, name, start_point=None): # Creates refs/heads/<name> at start_point (default: the HEAD commit)
    refs.check_ref_name(name)
    if refs.branch_exists(repo_root, name):
        raise InvalidReferenceError(f"a branch named '{name}' already exists")

    commit_hash = start_point or refs.resolve_head(repo_root)
    if not commit_hash:
        raise NoCommitsOnBranchError(refs.current_branch(repo_root))

    refs.create_ref(repo_root, refs.branch_ref(name), f"{commit_hash}\n")
    return commit_hash


def delete_branch(repo_root, name): # Removes refs/heads/<name>; refuses to delete the checked-out branch
    refs.check_ref_name(name)
    if not refs.branch_exists(repo_root, name):
        raise InvalidReferenceError(f"branch '{name}' not found")
    if refs.current_branch(repo_root) == name:
        raise InvalidReferenceError(f"cannot delete branch '{name}' checked out at HEAD")

    commit_hash = refs.branch_commit(repo_root, name)
    refs.delete_ref(repo_root, refs.branch_ref(name))
    return commit_hash
