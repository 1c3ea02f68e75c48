# The command: twig status
# What it does: Provides a summary of the repository state by comparing the HEAD commit, the index (staging area), and the working directory
# How it does: It generates three dictionaries of {path: hash} for the three states. It then compares these dictionaries to find staged changes (HEAD vs. index), unstaged changes (index vs. workdir), and untracked files (files in workdir but not in index)
# What data structure it uses: Hash Table / Dictionary (to represent the three states), Sets (for comparison of file lists to find additions/deletions)

import os
import sys

from twig.utils import commits, fs, objects, refs, repository, tree
from twig.utils.errors import TwigError
from twig.utils.index import Index


def run(args): # Compares the HEAD, index, and working directory states and prints the status
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    try:
        report = collect_status(repo_root)
    except TwigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    print(repository.get_head_status(repo_root))
    sections = (
        ('Changes to be committed:', report['staged']),
        ('Changes not staged for commit:', report['unstaged']),
    )
    for title, changes in sections:
        if any(changes.values()):
            print(f"\n{title}")
            for kind in ('added', 'modified', 'deleted'):
                for path in changes[kind]:
                    print(f"\t{kind}:   {path}")
    if report['untracked']:
        print("\nUntracked files:")
        for path in report['untracked']:
            print(f"\t{path}")
    if not report['untracked'] and not any(report['staged'].values()) and not any(report['unstaged'].values()):
        print("nothing to commit, working tree clean")


def compare_states(state1, state2): # Compares two states represented as {path: hash} dictionaries
    paths1 = set(state1)
    paths2 = set(state2)
    return {
        'added': sorted(paths2 - paths1),
        'deleted': sorted(paths1 - paths2),
        'modified': sorted(p for p in paths1 & paths2 if state1[p] != state2[p]),
    }


def collect_status(repo_root):
    head_commit = refs.resolve_head(repo_root)
    head_files = {}
    if head_commit:
        commit = commits.read_commit(repo_root, head_commit)
        head_files = {path: entry.sha for path, entry in tree.flatten_tree(repo_root, commit.tree).items()}

    index_files = Index.load(repo_root).hashes()

    working_files = {}
    for rel_path in fs.list_worktree_files(repo_root):
        content = fs.read_bytes(os.path.join(repo_root, fs.to_os_path(rel_path)))
        working_files[rel_path] = objects.hash_object(repo_root, content, 'blob', write=False)

    tracked_working = {p: h for p, h in working_files.items() if p in index_files}
    unstaged = compare_states(index_files, tracked_working)
    return {
        'staged': compare_states(head_files, index_files),
        'unstaged': unstaged,
        'untracked': sorted(p for p in working_files if p not in index_files),
    }
