"""Tests for package version comparison."""

import itertools

import pytest

from repoctl.core.version import is_newer, split_evr, vercmp, version_key


class TestSplitEvr:
    """Tests for splitting versions into epoch, version and release."""

    def test_plain_version(self):
        assert split_evr("1.0") == ("0", "1.0", None)

    def test_version_with_release(self):
        assert split_evr("1.0-2") == ("0", "1.0", "2")

    def test_epoch(self):
        assert split_evr("2:1.0-1") == ("2", "1.0", "1")

    def test_empty_epoch_defaults_to_zero(self):
        assert split_evr(":1.0-1") == ("0", "1.0", "1")

    def test_release_is_after_last_dash(self):
        assert split_evr("1.0-rc1-3") == ("0", "1.0-rc1", "3")


class TestVercmp:
    """Tests for vercmp, mirroring pacman's own ordering."""

    @pytest.mark.parametrize(
        "older,newer",
        [
            ("1.0", "1.1"),
            ("1.0", "1.0.1"),
            ("1.0a", "1.0"),
            ("1.0alpha", "1.0beta"),
            ("1.0rc1", "1.0"),
            ("1.9", "1.10"),
            ("1.0a", "1.0.1"),
            ("1.0-1", "1.0-2"),
            ("1.0-9", "1.0-10"),
            ("1.1-1", "1.1-2"),
            ("2.0-5", "1:1.0-1"),
            ("1:9.9", "2:0.1"),
            ("a", "1"),
            ("1.0", "1..0"),
        ],
    )
    def test_ordering(self, older, newer):
        assert vercmp(older, newer) == -1
        assert vercmp(newer, older) == 1

    @pytest.mark.parametrize(
        "a,b",
        [
            ("1.0", "1.0"),
            ("1.01", "1.1"),
            ("001", "1"),
            ("1.0", "1_0"),
            ("0:1.0-1", "1.0-1"),
            # release is only compared when both sides have one
            ("1.0", "1.0-5"),
        ],
    )
    def test_equal(self, a, b):
        assert vercmp(a, b) == 0
        assert vercmp(b, a) == 0

    def test_leading_zeros_do_not_win_by_length(self):
        assert vercmp("1.002", "1.10") == -1

    def test_is_newer(self):
        assert is_newer("1.1-1", "1.0-1")
        assert not is_newer("1.0-1", "1.0-1")
        assert not is_newer("1.0a", "1.0")

    def test_total_order_properties(self):
        versions = [
            "1.0", "1.0a", "1.0.1", "1.1", "1.10", "1.2rc1", "2:0.1",
            "1:1.0", "0.9", "1.0b", "1.0.0", "1.0_1",
        ]
        for a, b in itertools.product(versions, repeat=2):
            assert vercmp(a, b) == -vercmp(b, a)
            assert vercmp(a, b) == vercmp(a, b)
        for a, b, c in itertools.product(versions, repeat=3):
            if vercmp(a, b) <= 0 and vercmp(b, c) <= 0:
                assert vercmp(a, c) <= 0

    def test_version_key_sorts_oldest_first(self):
        versions = ["1.10-1", "1.2-1", "1.0a-1", "1.0-1", "1:0.1-1"]
        assert sorted(versions, key=version_key) == ["1.0a-1", "1.0-1", "1.2-1", "1.10-1", "1:0.1-1"]
