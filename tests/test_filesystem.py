#!/usr/bin/env python3
"""
Tests for the local filesystem service.

Given/when/then style against a real temporary directory.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from fileshell.errors import (
    AlreadyExists, IsADirectory, NotADirectory, NotFound, UnsupportedOperation
)
from fileshell.filesystem import LocalFileSystem, DirectoryEntry
from fileshell.permissions import UnsupportedPermissions


@pytest.fixture
def fs():
    """Create a fresh LocalFileSystem for each test."""
    return LocalFileSystem()


class TestListDirectory:

    def test_lists_files_and_dirs(self, fs, tmp_path):
        """Given a file and a directory, when listed, then both appear with type and size."""
        (tmp_path / 'b.txt').write_bytes(b'hello')
        (tmp_path / 'a_dir').mkdir()

        entries = fs.list_directory(str(tmp_path))

        assert entries == [
            DirectoryEntry(name='a_dir', is_dir=True, size=0),
            DirectoryEntry(name='b.txt', is_dir=False, size=5),
        ]

    def test_sorted_by_name(self, fs, tmp_path):
        for name in ['zeta', 'Alpha', 'beta', 'alpha']:
            (tmp_path / name).touch()
        names = [e.name for e in fs.list_directory(str(tmp_path))]
        assert names == sorted(names)

    def test_empty_directory(self, fs, tmp_path):
        assert fs.list_directory(str(tmp_path)) == []

    def test_missing_directory(self, fs, tmp_path):
        with pytest.raises(NotFound):
            fs.list_directory(str(tmp_path / 'missing'))

    def test_not_a_directory(self, fs, tmp_path):
        target = tmp_path / 'file.txt'
        target.touch()
        with pytest.raises(NotADirectory):
            fs.list_directory(str(target))

    @pytest.mark.skipif(not hasattr(os, 'symlink') or os.name != 'posix', reason="needs symlinks")
    def test_symlinks_are_resolved(self, fs, tmp_path):
        """Given links to a dir and a file, when listed, then they report their targets' types."""
        (tmp_path / 'real_dir').mkdir()
        (tmp_path / 'real.txt').write_bytes(b'abc')
        os.symlink(tmp_path / 'real_dir', tmp_path / 'link_dir')
        os.symlink(tmp_path / 'real.txt', tmp_path / 'link.txt')

        entries = {e.name: e for e in fs.list_directory(str(tmp_path))}

        assert entries['link_dir'].is_dir
        assert entries['link_dir'].size == 0
        assert not entries['link.txt'].is_dir
        assert entries['link.txt'].size == 3

    @pytest.mark.skipif(not hasattr(os, 'symlink') or os.name != 'posix', reason="needs symlinks")
    def test_broken_link_listed_with_zero_size(self, fs, tmp_path):
        os.symlink(tmp_path / 'nowhere', tmp_path / 'dangling')
        entries = fs.list_directory(str(tmp_path))
        assert entries == [DirectoryEntry(name='dangling', is_dir=False, size=0)]


class TestStat:

    def test_file(self, fs, tmp_path):
        target = tmp_path / 'f.txt'
        target.write_bytes(b'12345678')
        info = fs.stat(str(target))
        assert not info.is_dir
        assert info.size == 8
        assert info.size_text() == '8'

    def test_directory(self, fs, tmp_path):
        info = fs.stat(str(tmp_path))
        assert info.is_dir
        assert info.size == 0
        assert info.size_text() == '<DIR>'

    def test_missing(self, fs, tmp_path):
        with pytest.raises(NotFound):
            fs.stat(str(tmp_path / 'missing'))


class TestCreate:

    def test_create_empty_file(self, fs, tmp_path):
        target = tmp_path / 'new.txt'
        fs.create_empty_file(str(target))
        assert target.is_file()
        assert target.stat().st_size == 0

    def test_create_existing_file_keeps_content(self, fs, tmp_path):
        target = tmp_path / 'keep.txt'
        target.write_bytes(b'data')
        fs.create_empty_file(str(target))
        assert target.read_bytes() == b'data'

    def test_create_file_over_directory(self, fs, tmp_path):
        with pytest.raises(IsADirectory):
            fs.create_empty_file(str(tmp_path))

    def test_create_file_in_missing_directory(self, fs, tmp_path):
        with pytest.raises(NotFound):
            fs.create_empty_file(str(tmp_path / 'nope' / 'file.txt'))

    def test_make_directory(self, fs, tmp_path):
        fs.make_directory(str(tmp_path / 'sub'))
        assert (tmp_path / 'sub').is_dir()

    def test_make_existing_directory(self, fs, tmp_path):
        (tmp_path / 'sub').mkdir()
        with pytest.raises(AlreadyExists):
            fs.make_directory(str(tmp_path / 'sub'))


class TestCopyMove:

    def test_copy_file(self, fs, tmp_path):
        src = tmp_path / 'src.bin'
        src.write_bytes(bytes(range(256)))
        fs.copy_file(str(src), str(tmp_path / 'dst.bin'))
        assert (tmp_path / 'dst.bin').read_bytes() == src.read_bytes()

    def test_copy_overwrites(self, fs, tmp_path):
        (tmp_path / 'src').write_bytes(b'new')
        (tmp_path / 'dst').write_bytes(b'old content')
        fs.copy_file(str(tmp_path / 'src'), str(tmp_path / 'dst'))
        assert (tmp_path / 'dst').read_bytes() == b'new'

    def test_copy_missing_source(self, fs, tmp_path):
        with pytest.raises(NotFound):
            fs.copy_file(str(tmp_path / 'missing'), str(tmp_path / 'dst'))
        assert not (tmp_path / 'dst').exists()

    def test_copy_directory_source(self, fs, tmp_path):
        (tmp_path / 'd').mkdir()
        with pytest.raises(IsADirectory):
            fs.copy_file(str(tmp_path / 'd'), str(tmp_path / 'e'))

    def test_rename(self, fs, tmp_path):
        (tmp_path / 'a').write_bytes(b'content')
        fs.rename(str(tmp_path / 'a'), str(tmp_path / 'b'))
        assert not (tmp_path / 'a').exists()
        assert (tmp_path / 'b').read_bytes() == b'content'

    def test_rename_missing(self, fs, tmp_path):
        with pytest.raises(NotFound):
            fs.rename(str(tmp_path / 'a'), str(tmp_path / 'b'))


class TestRemove:

    def test_remove_file(self, fs, tmp_path):
        (tmp_path / 'f').touch()
        fs.remove(str(tmp_path / 'f'))
        assert not (tmp_path / 'f').exists()

    def test_remove_missing(self, fs, tmp_path):
        with pytest.raises(NotFound):
            fs.remove(str(tmp_path / 'missing'))

    def test_remove_tree(self, fs, tmp_path):
        root = tmp_path / 'tree'
        (root / 'a' / 'b').mkdir(parents=True)
        (root / 'a' / 'b' / 'deep.txt').write_text('x')
        (root / 'top.txt').write_text('y')
        (root / 'empty').mkdir()

        fs.remove_tree(str(root))

        assert not root.exists()
        assert tmp_path.exists()

    def test_remove_deep_tree(self, fs, tmp_path):
        """Depth past the default recursion limit (1000) is fine."""
        root = tmp_path / "deep"
        current = str(root)
        try:
            os.mkdir(current)
            for _ in range(1100):
                current = os.path.join(current, "d")
                os.mkdir(current)
        except OSError:
            pytest.skip("filesystem path length limit reached")

        fs.remove_tree(str(root))
        assert not root.exists()

    @pytest.mark.skipif(os.name != 'posix', reason="needs symlinks")
    def test_remove_tree_does_not_follow_links(self, fs, tmp_path):
        outside = tmp_path / 'outside'
        outside.mkdir()
        (outside / 'keep.txt').write_text('keep')
        root = tmp_path / 'tree'
        root.mkdir()
        os.symlink(outside, root / 'link')

        fs.remove_tree(str(root))

        assert not root.exists()
        assert (outside / 'keep.txt').read_text() == 'keep'

    def test_remove_tree_on_file(self, fs, tmp_path):
        (tmp_path / 'f').touch()
        with pytest.raises(NotADirectory):
            fs.remove_tree(str(tmp_path / 'f'))


class TestPermissionCapability:

    def test_unsupported_backend(self, tmp_path):
        fs = LocalFileSystem(permissions=UnsupportedPermissions())
        (tmp_path / 'f').touch()
        with pytest.raises(UnsupportedOperation):
            fs.set_permissions(str(tmp_path / 'f'), 0o644)

    def test_canonicalize(self, fs, tmp_path):
        (tmp_path / 'a').mkdir()
        messy = os.path.join(str(tmp_path), 'a', '..', 'a', '.')
        assert fs.canonicalize(messy) == os.path.realpath(str(tmp_path / 'a'))
