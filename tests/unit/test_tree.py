# Unit tests for utils/tree.py

import pytest

from twig.utils import objects, tree
from twig.utils.errors import MalformedObjectError
from twig.utils.index import MODE_EXECUTABLE, MODE_REGULAR, IndexEntry
from twig.utils.tree import MODE_DIRECTORY, TreeEntry

EMPTY_TREE = '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


def _entry(path, content, repo_root, mode=MODE_REGULAR):
    sha1 = objects.save_object(repo_root, 'blob', content)
    return IndexEntry(path, sha1, mode, 0, 0, len(content))


class TestSerializeTree:
    """Tests for tree.serialize_tree() / tree.parse_tree()"""

    def test_record_format(self):
        data = tree.serialize_tree([TreeEntry('a.txt', MODE_REGULAR, 'ab' * 20, False)])
        assert data == b'100644 a.txt\x00' + bytes.fromhex('ab' * 20)

    def test_directory_mode_is_octal_40000(self):
        data = tree.serialize_tree([TreeEntry('src', MODE_DIRECTORY, 'cd' * 20, True)])
        assert data.startswith(b'40000 src\x00')

    def test_round_trip(self):
        entries = [
            TreeEntry('b.txt', MODE_REGULAR, '11' * 20, False),
            TreeEntry('run.sh', MODE_EXECUTABLE, '22' * 20, False),
            TreeEntry('lib', MODE_DIRECTORY, '33' * 20, True),
            TreeEntry('with space.md', MODE_REGULAR, '44' * 20, False),
        ]
        parsed = tree.parse_tree(tree.serialize_tree(entries))
        assert set(parsed) == set(entries)

    def test_entries_sorted_by_name(self):
        entries = [
            TreeEntry('zeta', MODE_REGULAR, '11' * 20, False),
            TreeEntry('Alpha', MODE_REGULAR, '22' * 20, False),
            TreeEntry('beta', MODE_DIRECTORY, '33' * 20, True),
        ]
        names = [e.name for e in tree.parse_tree(tree.serialize_tree(entries))]
        assert names == ['Alpha', 'beta', 'zeta']

    def test_order_of_input_does_not_matter(self):
        a = TreeEntry('a', MODE_REGULAR, '11' * 20, False)
        b = TreeEntry('b', MODE_REGULAR, '22' * 20, False)
        assert tree.serialize_tree([a, b]) == tree.serialize_tree([b, a])

    def test_duplicate_names_rejected(self):
        entry = TreeEntry('a', MODE_REGULAR, '11' * 20, False)
        with pytest.raises(ValueError):
            tree.serialize_tree([entry, entry])

    def test_empty_payload_parses_to_nothing(self):
        assert tree.parse_tree(b'') == []

    @pytest.mark.parametrize('cut', [3, 10, 20])
    def test_truncated_record_raises(self, cut):
        data = tree.serialize_tree([TreeEntry('a.txt', MODE_REGULAR, 'ab' * 20, False)])
        with pytest.raises(MalformedObjectError):
            tree.parse_tree(data[:-cut])

    def test_bad_mode_raises(self):
        with pytest.raises(MalformedObjectError):
            tree.parse_tree(b'10x644 a\x00' + b'\x00' * 20)

    def test_non_utf8_name_raises(self):
        """A name that is not valid UTF-8 is a malformed record, not a decode crash."""
        with pytest.raises(MalformedObjectError):
            tree.parse_tree(b'100644 \xff\xfe\x00' + b'\x00' * 20)


class TestBuildTree:
    """Tests for tree.build_tree()"""

    def test_empty_index_builds_empty_tree(self, temp_repo):
        assert tree.build_tree(temp_repo, {}) == EMPTY_TREE
        assert tree.create_empty_tree(temp_repo) == EMPTY_TREE
        assert objects.load_object(temp_repo, EMPTY_TREE) == b''

    def test_nested_directories(self, temp_repo):
        entries = {
            'README.md': _entry('README.md', b'readme', temp_repo),
            'src/main.py': _entry('src/main.py', b'main', temp_repo),
            'src/util/helpers.py': _entry('src/util/helpers.py', b'helpers', temp_repo),
        }
        root_hash = tree.build_tree(temp_repo, entries)

        root = {e.name: e for e in tree.read_tree(temp_repo, root_hash)}
        assert set(root) == {'README.md', 'src'}
        assert root['src'].is_dir and root['src'].mode == MODE_DIRECTORY
        assert not root['README.md'].is_dir

        src = {e.name: e for e in tree.read_tree(temp_repo, root['src'].sha)}
        assert set(src) == {'main.py', 'util'}
        util = tree.read_tree(temp_repo, src['util'].sha)
        assert [e.name for e in util] == ['helpers.py']
        assert util[0].sha == entries['src/util/helpers.py'].sha

    def test_directory_holding_only_subdirectories(self, temp_repo):
        entries = {'a/b/c.txt': _entry('a/b/c.txt', b'c', temp_repo)}
        root_hash = tree.build_tree(temp_repo, entries)
        assert list(tree.flatten_tree(temp_repo, root_hash)) == ['a/b/c.txt']

    def test_hash_is_independent_of_insertion_order(self, temp_repo):
        a = _entry('x/a.txt', b'a', temp_repo)
        b = _entry('y/b.txt', b'b', temp_repo)
        c = _entry('c.txt', b'c', temp_repo)
        first = tree.build_tree(temp_repo, {'x/a.txt': a, 'y/b.txt': b, 'c.txt': c})
        second = tree.build_tree(temp_repo, {'c.txt': c, 'y/b.txt': b, 'x/a.txt': a})
        assert first == second

    def test_keeps_executable_mode(self, temp_repo):
        entries = {'run.sh': _entry('run.sh', b'#!/bin/sh', temp_repo, MODE_EXECUTABLE)}
        root_hash = tree.build_tree(temp_repo, entries)
        assert tree.read_tree(temp_repo, root_hash)[0].mode == MODE_EXECUTABLE

    def test_identical_subdirectories_share_a_tree(self, temp_repo):
        entries = {
            'one/f.txt': _entry('one/f.txt', b'same', temp_repo),
            'two/f.txt': _entry('two/f.txt', b'same', temp_repo),
        }
        root = {e.name: e for e in tree.read_tree(temp_repo, tree.build_tree(temp_repo, entries))}
        assert root['one'].sha == root['two'].sha


class TestFlattenTree:
    """Tests for tree.flatten_tree()"""

    def test_lists_every_file(self, temp_repo):
        entries = {
            'a.txt': _entry('a.txt', b'a', temp_repo),
            'd/b.txt': _entry('d/b.txt', b'b', temp_repo),
        }
        files = tree.flatten_tree(temp_repo, tree.build_tree(temp_repo, entries))
        assert {path: e.sha for path, e in files.items()} == {p: e.sha for p, e in entries.items()}

    def test_read_tree_rejects_non_tree(self, temp_repo):
        blob = objects.save_object(temp_repo, 'blob', b'x')
        with pytest.raises(MalformedObjectError):
            tree.read_tree(temp_repo, blob)
