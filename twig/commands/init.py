# The command: twig init [path]
# What it does: Initializes a new, empty repository by creating the hidden `.git` directory and its internal structure
# How it does: It creates the `objects`, `refs/heads`, `refs/tags` and `hooks` subdirectories, the empty `config`, `description` and `index` files, and writes a `HEAD` that points at the unborn 'master' branch
# What data structure it uses: Tree (the file system directory structure is a tree). It also lays the foundation for a Hash Table (the object database) and a Directed Acyclic Graph (the commit history)

import sys

from twig.utils import repository


def run(args):
    path = getattr(args, 'path', None) or '.'
    try:
        git_dir, created = repository.init_repository(path)
    except OSError as e:
        print(f"fatal: cannot initialize repository: {e}", file=sys.stderr)
        sys.exit(1)

    if created:
        print(f"Initialized empty twig repository in {git_dir}/")
    else:
        print(f"twig repository already exists in {git_dir}/")
