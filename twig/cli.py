import argparse

from twig.commands import (
    init, add, rm, commit, branch, checkout, tag, log, status, config, unsupported
)
from twig.utils.log import setup_logging


def build_parser():
    # The main parser
    parser = argparse.ArgumentParser(prog="twig", description="twig: a small content-addressed version control system.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log storage operations to stderr.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: init
    init_parser = subparsers.add_parser("init", help="Initialize a new, empty repository.")
    init_parser.add_argument("path", nargs="?", default=".", help="Directory to initialize (default: current directory).")
    init_parser.set_defaults(func=init.run)

    # Command: add
    add_parser = subparsers.add_parser("add", help="Add file contents to the index.")
    add_parser.add_argument("files", nargs="+", help="Files or directories to add.")
    add_parser.set_defaults(func=add.run)

    # Command: rm
    rm_parser = subparsers.add_parser("rm", help="Remove files from the index and the working tree.")
    rm_parser.add_argument("files", nargs="+", help="Files to remove.")
    rm_parser.add_argument("--cached", action="store_true", help="Only unstage; keep the working tree files.")
    rm_parser.add_argument("-f", "--force", action="store_true", help="Remove files even if they have unstaged changes.")
    rm_parser.set_defaults(func=rm.run)

    # Command: commit
    commit_parser = subparsers.add_parser("commit", help="Record changes to the repository.")
    commit_parser.add_argument("-m", "--message", required=True, help="Commit message.")
    commit_parser.set_defaults(func=commit.run)

    # Command: branch
    branch_parser = subparsers.add_parser("branch", help="List, create or delete branches.")
    branch_parser.add_argument("name", nargs="?", help="The name of the branch to create or delete.")
    branch_parser.add_argument("-d", "--delete", action="store_true", help="Delete the named branch.")
    branch_parser.set_defaults(func=branch.run)

    # Command: checkout
    checkout_parser = subparsers.add_parser("checkout", help="Switch branches or detach HEAD at a commit.")
    checkout_parser.add_argument("target", help="Branch name or commit hash.")
    checkout_parser.add_argument("-b", dest="new_branch", action="store_true", help="Create the branch and switch to it.")
    checkout_parser.set_defaults(func=checkout.run)

    # Command: tag
    tag_parser = subparsers.add_parser("tag", help="List tags or tag the current commit.")
    tag_parser.add_argument("name", nargs="?", help="The name of the tag to create.")
    tag_parser.set_defaults(func=tag.run)

    # Command: log
    log_parser = subparsers.add_parser("log", help="Show commit logs.")
    log_parser.set_defaults(func=log.run)

    # Command: status
    status_parser = subparsers.add_parser("status", help="Show the working tree status.")
    status_parser.set_defaults(func=status.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Set user name and email.")
    config_parser.add_argument("key", help="The configuration key (e.g., user.name).")
    config_parser.add_argument("value", help="The configuration value.")
    config_parser.set_defaults(func=config.run)

    # Declared but not implemented
    for name, help_text in (
        ("merge", "Merge a branch into the current branch."),
        ("fetch", "Download objects and refs from another repository."),
        ("pull", "Fetch from and integrate with another repository."),
        ("push", "Update remote refs along with associated objects."),
    ):
        stub_parser = subparsers.add_parser(name, help=f"{help_text} (not implemented)")
        stub_parser.add_argument("target", nargs="?", help="Branch or remote URL.")
        stub_parser.set_defaults(func=unsupported.run)

    return parser


# The main entry point for the twig version control system
def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
