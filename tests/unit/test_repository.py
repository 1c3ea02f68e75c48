# Unit tests for utils/repository.py and utils/config.py

import os

import pytest

from twig.utils import config, refs, repository
from twig.utils.errors import NotARepositoryError


class TestInitRepository:
    # Tests for repository.init_repository()

    def test_creates_layout(self, temp_dir):
        git_dir, created = repository.init_repository(temp_dir)
        assert created
        for parts in (('objects',), ('refs', 'heads'), ('refs', 'tags'), ('hooks',)):
            assert os.path.isdir(os.path.join(git_dir, *parts))
        for name in ('config', 'description', 'index'):
            assert os.path.isfile(os.path.join(git_dir, name))
        with open(os.path.join(git_dir, 'HEAD')) as f:
            assert f.read() == 'ref: refs/heads/master\n'

    def test_existing_repository_untouched(self, temp_repo):
        refs.create_ref(temp_repo, 'HEAD', 'ref: refs/heads/dev\n')
        _, created = repository.init_repository(temp_repo)
        assert not created
        assert refs.current_branch(temp_repo) == 'dev'


class TestFindRepoRoot:
    # Tests for repository.find_repo_root()

    def test_finds_repo_in_current_dir(self, temp_repo):
        assert repository.find_repo_root(temp_repo) == temp_repo

    def test_finds_repo_in_subdirectory(self, temp_repo):
        subdir = os.path.join(temp_repo, 'src', 'deep', 'nested')
        os.makedirs(subdir)
        os.chdir(subdir)
        assert os.path.realpath(repository.find_repo_root()) == os.path.realpath(temp_repo)

    def test_returns_none_when_not_in_repo(self, temp_dir):
        assert repository.find_repo_root(temp_dir) is None

    def test_require_raises_outside_repo(self, temp_dir):
        with pytest.raises(NotARepositoryError):
            repository.require_repo_root(temp_dir)


class TestGetHeadStatus:
    # Tests for repository.get_head_status()

    def test_on_branch(self, temp_repo):
        assert repository.get_head_status(temp_repo) == "On branch master"

    def test_detached_head(self, repo_with_commit):
        repo_root, commit_hash = repo_with_commit
        refs.set_head(repo_root, refs.Direct(commit_hash))
        assert repository.get_head_status(repo_root) == f"HEAD detached at {commit_hash[:7]}"


class TestConfig:
    # Tests for utils/config.py

    def test_write_and_read_user(self, temp_repo):
        config.write_config(temp_repo, 'user.name', 'Ada')
        assert config.get_user_config(temp_repo) == ('Ada', 'test@example.com')
        assert config.get_author(temp_repo) == 'Ada <test@example.com>'

    def test_invalid_key(self, temp_repo):
        with pytest.raises(ValueError):
            config.write_config(temp_repo, 'nodot', 'x')

    def test_author_falls_back_to_environment(self, temp_dir, monkeypatch):
        repository.init_repository(temp_dir)
        monkeypatch.setenv('TWIG_AUTHOR_NAME', 'Env User')
        monkeypatch.setenv('TWIG_AUTHOR_EMAIL', 'env@example.com')
        assert config.get_author(temp_dir) == 'Env User <env@example.com>'

    def test_author_default(self, temp_dir, monkeypatch):
        repository.init_repository(temp_dir)
        monkeypatch.delenv('TWIG_AUTHOR_NAME', raising=False)
        monkeypatch.delenv('TWIG_AUTHOR_EMAIL', raising=False)
        assert config.get_author(temp_dir) == 'twig <twig@localhost>'
