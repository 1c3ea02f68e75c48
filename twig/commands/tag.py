# The command: twig tag [<name>]
# What it does: Creates a lightweight tag ref pointing to the current HEAD, or lists existing tags.
# How it does: To create a tag, it gets the HEAD commit hash and writes it to a file in `.git/refs/tags/<name>`. To list, it reads that directory.
# What data structure it uses: Files references (similar to branches).

import sys

from twig.utils import refs, repository
from twig.utils.errors import InvalidReferenceError, NoCommitsOnBranchError, TwigError
from twig.utils.transaction import RepositoryLock


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    if args.name:
        try:
            with RepositoryLock(repo_root):
                head_commit = create_tag(repo_root, args.name)
        except TwigError as e:
            print(f"fatal: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Created tag '{args.name}' at {head_commit[:7]}")
    else:
        for tag in refs.list_tags(repo_root):
            print(tag)


def create_tag(repo_root, name):
    refs.check_ref_name(name)
    head_commit = refs.resolve_head(repo_root)
    if not head_commit:
        raise NoCommitsOnBranchError(refs.current_branch(repo_root))
    if refs.resolve_ref(repo_root, refs.tag_ref(name)):
        raise InvalidReferenceError(f"tag '{name}' already exists")

    refs.create_ref(repo_root, refs.tag_ref(name), f"{head_commit}\n")
    return head_commit
