"""Tests for the repository database adapter."""

import subprocess
from unittest.mock import MagicMock

import pytest

from conftest import write_database
from repoctl.core.database import RepoDatabase, database_name, parse_desc
from repoctl.core.errors import DatabaseError, IndexUnreadable
from repoctl.models.package import IndexEntry


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseDesc:
    """Tests for parse_desc()."""

    def test_fields(self):
        fields = parse_desc("%NAME%\nfoo\n\n%VERSION%\n1.0-1\n\n%DEPENDS%\nbar\nbaz\n")
        assert fields == {"NAME": ["foo"], "VERSION": ["1.0-1"], "DEPENDS": ["bar", "baz"]}


class TestDatabaseName:
    """Tests for database_name()."""

    def test_names(self, tmp_path):
        assert database_name(tmp_path / "atlas.db.tar.gz") == "atlas"
        assert database_name(tmp_path / "atlas.db") == "atlas"
        assert database_name(tmp_path / "custom.db.tar.zst") == "custom"

    def test_name_containing_db(self, tmp_path):
        assert database_name(tmp_path / "my.dbx.db.tar.gz") == "my.dbx"
        assert database_name(tmp_path / "x.db.old.db") == "x.db.old"


class TestListEntries:
    """Tests for reading the database."""

    def test_reads_entries(self, repo_dir):
        path = write_database(repo_dir / "test.db.tar.gz", {"foo": "1.0-1", "bar": "2:3.1-2"})

        entries = RepoDatabase(path).list_entries()

        assert entries == {
            "foo": IndexEntry("foo", "1.0-1"),
            "bar": IndexEntry("bar", "2:3.1-2"),
        }

    def test_empty_database(self, repo_dir):
        path = write_database(repo_dir / "test.db.tar.gz", {})
        assert RepoDatabase(path).list_entries() == {}

    def test_missing_database(self, repo_dir):
        with pytest.raises(IndexUnreadable) as exc_info:
            RepoDatabase(repo_dir / "test.db.tar.gz").list_entries()
        assert exc_info.value.missing

    def test_corrupt_database(self, repo_dir):
        path = repo_dir / "test.db.tar.gz"
        path.write_bytes(b"this is not a tarball")

        with pytest.raises(IndexUnreadable) as exc_info:
            RepoDatabase(path).list_entries()
        assert not exc_info.value.missing


class TestMutations:
    """Tests for repo-add and repo-remove invocation."""

    def test_add_entry(self, repo_dir):
        runner = MagicMock(return_value=completed())
        db = RepoDatabase(repo_dir / "test.db.tar.gz", add_params=["--sign"], runner=runner)

        db.add_entry(repo_dir / "foo-1.0-1-any.pkg.tar.zst")

        args, kwargs = runner.call_args
        assert args[0] == [
            "repo-add",
            "--sign",
            str(repo_dir / "test.db.tar.gz"),
            str(repo_dir / "foo-1.0-1-any.pkg.tar.zst"),
        ]
        assert kwargs["capture_output"] is True

    def test_remove_entry(self, repo_dir):
        runner = MagicMock(return_value=completed())
        db = RepoDatabase(repo_dir / "test.db.tar.gz", rm_params=["-q"], runner=runner)

        db.remove_entry("foo")

        assert runner.call_args[0][0] == ["repo-remove", "-q", str(repo_dir / "test.db.tar.gz"), "foo"]

    def test_failure_raises(self, repo_dir):
        runner = MagicMock(return_value=completed(returncode=1, stderr="==> ERROR: oops"))
        db = RepoDatabase(repo_dir / "test.db.tar.gz", runner=runner)

        with pytest.raises(DatabaseError, match="oops"):
            db.remove_entry("foo")

    def test_missing_tool(self, repo_dir):
        runner = MagicMock(side_effect=FileNotFoundError("repo-add"))
        db = RepoDatabase(repo_dir / "test.db.tar.gz", runner=runner)

        with pytest.raises(DatabaseError, match="not found"):
            db.add_entry(repo_dir / "foo-1.0-1-any.pkg.tar.zst")


class TestClear:
    """Tests for deleting the database."""

    def test_removes_database_and_companions(self, repo_dir):
        names = [
            "test.db",
            "test.db.tar.gz",
            "test.db.tar.gz.old",
            "test.files",
            "test.files.tar.gz",
        ]
        for name in names:
            (repo_dir / name).write_bytes(b"x")
        (repo_dir / "other.db.tar.gz").write_bytes(b"x")
        (repo_dir / "test-1.0-1-any.pkg.tar.zst").write_bytes(b"x")

        removed = RepoDatabase(repo_dir / "test.db.tar.gz").clear()

        assert sorted(p.name for p in removed) == sorted(names)
        assert sorted(p.name for p in repo_dir.iterdir()) == [
            "other.db.tar.gz",
            "test-1.0-1-any.pkg.tar.zst",
        ]

    def test_companions_of_name_containing_db(self, repo_dir):
        names = ["my.dbx.db", "my.dbx.db.tar.gz", "my.dbx.files", "my.dbx.files.tar.gz"]
        for name in names:
            (repo_dir / name).write_bytes(b"x")
        (repo_dir / "my.db.tar.gz").write_bytes(b"x")

        removed = RepoDatabase(repo_dir / "my.dbx.db.tar.gz").clear()

        assert sorted(p.name for p in removed) == sorted(names)
        assert [p.name for p in repo_dir.iterdir()] == ["my.db.tar.gz"]
