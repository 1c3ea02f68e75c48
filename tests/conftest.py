# Shared pytest fixtures for twig tests

import logging
import os
import shutil
import tempfile

import pytest

from twig.commands import commit as commit_cmd
from twig.utils import config, objects, repository
from twig.utils.index import Index

FIXED_TIMESTAMP = "1700000000 +0000"


def write_file(repo_root, rel_path, content):
    # Writes a working-tree file, creating parent directories
    full_path = os.path.join(repo_root, *rel_path.split('/'))
    os.makedirs(os.path.dirname(full_path), exist_ok=True)
    mode = 'wb' if isinstance(content, bytes) else 'w'
    with open(full_path, mode) as f:
        f.write(content)
    return full_path


def read_file(repo_root, rel_path):
    with open(os.path.join(repo_root, *rel_path.split('/')), 'rb') as f:
        return f.read()


def stage(repo_root, *rel_paths):
    # Stages files the way `twig add` does
    index = Index.load(repo_root)
    for rel_path in rel_paths:
        content = read_file(repo_root, rel_path)
        blob_hash = objects.save_object(repo_root, 'blob', content)
        index.stage_file(rel_path, blob_hash)
    return index


def worktree_files(repo_root):
    # {path: bytes} for every file outside the control directory
    files = {}
    for root, dirs, names in os.walk(repo_root):
        if '.git' in dirs:
            dirs.remove('.git')
        for name in names:
            full_path = os.path.join(root, name)
            rel_path = os.path.relpath(full_path, repo_root).replace(os.sep, '/')
            with open(full_path, 'rb') as f:
                files[rel_path] = f.read()
    return files


@pytest.fixture(autouse=True)
def reset_twig_logger():
    # The CLI detaches the "twig" logger from the root logger; undo that so caplog keeps working
    yield
    logger = logging.getLogger("twig")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    # Creates a temporary directory that is cleaned up after the test
    # Also saves/restores cwd to prevent issues when tests change directories
    original_dir = os.getcwd()
    tmp = os.path.realpath(tempfile.mkdtemp())
    yield tmp
    os.chdir(original_dir)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_repo(temp_dir):
    # Creates an initialized twig repository in a temporary directory
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    repository.init_repository(temp_dir)
    config.write_config(temp_dir, 'user.name', 'Test User')
    config.write_config(temp_dir, 'user.email', 'test@example.com')

    yield temp_dir

    os.chdir(original_dir)


@pytest.fixture
def repo_with_commit(temp_repo):
    # Creates a repo with one committed file
    write_file(temp_repo, 'README.md', '# Test Project\n')
    stage(temp_repo, 'README.md')
    commit_hash, _ = commit_cmd.commit_index(temp_repo, 'Initial commit', timestamp=FIXED_TIMESTAMP)
    return temp_repo, commit_hash


@pytest.fixture
def repo_with_branches(repo_with_commit):
    # Creates a repo with master and a feature branch at the same commit
    repo_root, initial_commit = repo_with_commit
    feature_path = os.path.join(repo_root, '.git', 'refs', 'heads', 'feature')
    with open(feature_path, 'w') as f:
        f.write(initial_commit + '\n')
    return repo_root, initial_commit


# Mock args object for command functions
class MockArgs:
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)
