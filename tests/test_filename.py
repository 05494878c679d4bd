"""Tests for package filename parsing."""

from pathlib import Path

import pytest

from repoctl.core.errors import MalformedFilename
from repoctl.core.filename import has_package_extension, parse_filename, parse_path


class TestParseFilename:
    """Tests for parse_filename()."""

    def test_simple(self):
        pkg = parse_filename("pacman-6.0.2-1-x86_64.pkg.tar.zst")
        assert pkg.name == "pacman"
        assert pkg.version == "6.0.2"
        assert pkg.release == "1"
        assert pkg.arch == "x86_64"
        assert pkg.extension == ".pkg.tar.zst"
        assert pkg.full_version == "6.0.2-1"

    def test_name_with_dashes(self):
        pkg = parse_filename("python-foo-bar-1.2-3-any.pkg.tar.xz")
        assert pkg.name == "python-foo-bar"
        assert pkg.version == "1.2"
        assert pkg.release == "3"
        assert pkg.arch == "any"

    def test_epoch_and_dotted_release(self):
        pkg = parse_filename("vim-2:9.0.1-1.1-x86_64.pkg.tar.zst")
        assert pkg.version == "2:9.0.1"
        assert pkg.release == "1.1"
        assert pkg.full_version == "2:9.0.1-1.1"

    def test_unknown_architecture_is_accepted(self):
        pkg = parse_filename("tool-1.0-1-sparc64.pkg.tar.zst")
        assert pkg.arch == "sparc64"
        assert not pkg.known_arch

    def test_known_architecture(self):
        assert parse_filename("tool-1.0-1-aarch64.pkg.tar.zst").known_arch

    def test_uncompressed_archive(self):
        pkg = parse_filename("tool-1.0-1-x86_64.pkg.tar")
        assert pkg.extension == ".pkg.tar"

    def test_path_is_kept(self):
        path = Path("/srv/repo/tool-1.0-1-x86_64.pkg.tar.zst")
        assert parse_path(path).path == path

    @pytest.mark.parametrize(
        "filename",
        [
            "pacman-6.0.2-1-x86_64.pkg.tar.zst",
            "python-foo-bar-1.2-3-any.pkg.tar.xz",
            "vim-2:9.0.1-1.1-x86_64.pkg.tar.zst",
            "lib32-glibc-2.38-7-x86_64.pkg.tar.gz",
            "tool-1.0rc1-1-armv7h.pkg.tar",
            "tool-1.0-1-sparc64.pkg.tar.lz4",
        ],
    )
    def test_round_trip(self, filename):
        assert parse_filename(filename).filename == filename
        assert str(parse_filename(filename)) == filename

    @pytest.mark.parametrize(
        "filename",
        [
            "pacman-6.0.2-x86_64.pkg.tar.zst",
            "pacman.pkg.tar.zst",
            "-1.0-1-x86_64.pkg.tar.zst",
            "pacman-6.0.2-1-x86_64.tar.zst",
            "pacman-6.0.2-1-x86_64.pkg.tar.zst.sig",
            "README.md",
        ],
    )
    def test_malformed(self, filename):
        with pytest.raises(MalformedFilename) as exc_info:
            parse_filename(filename)
        assert exc_info.value.filename == filename


class TestHasPackageExtension:
    """Tests for has_package_extension()."""

    def test_package_files(self):
        assert has_package_extension("a-1-1-any.pkg.tar.zst")
        assert has_package_extension("a-1-1-any.pkg.tar")

    def test_other_files(self):
        assert not has_package_extension("a-1-1-any.pkg.tar.zst.sig")
        assert not has_package_extension("atlas.db.tar.gz")
        assert not has_package_extension("backup")
