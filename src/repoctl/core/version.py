"""Package version comparison, following pacman's vercmp ordering."""

from functools import cmp_to_key


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_runs(a: str, b: str) -> int:
    """Compare two version fragments (no epoch, no release).

    The strings are walked as alternating runs of digits and letters.
    Everything else is a separator.
    """
    if a == b:
        return 0

    i = j = 0
    while i < len(a) and j < len(b):
        sep_start_a, sep_start_b = i, j
        while i < len(a) and not a[i].isalnum():
            i += 1
        while j < len(b) and not b[j].isalnum():
            j += 1

        if i >= len(a) or j >= len(b):
            break

        # More separators wins: "1..0" > "1.0"
        if (i - sep_start_a) != (j - sep_start_b):
            return -1 if (i - sep_start_a) < (j - sep_start_b) else 1

        start_a, start_b = i, j
        is_num = a[i].isdigit()
        if is_num:
            while i < len(a) and a[i].isdigit():
                i += 1
            while j < len(b) and b[j].isdigit():
                j += 1
        else:
            while i < len(a) and a[i].isalpha():
                i += 1
            while j < len(b) and b[j].isalpha():
                j += 1

        run_a = a[start_a:i]
        run_b = b[start_b:j]

        # Run types differ: numeric is always newer than alpha
        if not run_b:
            return 1 if is_num else -1

        if is_num:
            run_a = run_a.lstrip("0")
            run_b = run_b.lstrip("0")
            if len(run_a) != len(run_b):
                return 1 if len(run_a) > len(run_b) else -1

        if run_a != run_b:
            return 1 if run_a > run_b else -1

    rest_a = a[i:]
    rest_b = b[j:]
    if not rest_a and not rest_b:
        return 0

    # A leftover alpha run never beats an empty string ("1.0a" < "1.0"),
    # a leftover numeric run always does ("1.0.1" > "1.0").
    if (not rest_a and not rest_b[0].isalpha()) or (rest_a and rest_a[0].isalpha()):
        return -1
    return 1


def split_evr(version: str) -> tuple[str, str, str | None]:
    """Split a version into (epoch, version, release).

    The epoch defaults to "0"; the release is None when absent.
    """
    epoch = "0"
    rest = version
    colon = version.find(":")
    if colon != -1 and (colon == 0 or version[:colon].isdigit()):
        epoch = version[:colon] or "0"
        rest = version[colon + 1:]

    release = None
    dash = rest.rfind("-")
    if dash != -1:
        release = rest[dash + 1:]
        rest = rest[:dash]

    return epoch, rest, release


def vercmp(a: str, b: str) -> int:
    """Compare two full versions ([epoch:]version[-release]).

    Returns -1 if a is older than b, 0 if they are equal and 1 if a is newer.
    """
    if a == b:
        return 0

    epoch_a, ver_a, rel_a = split_evr(a)
    epoch_b, ver_b, rel_b = split_evr(b)

    result = _compare_runs(epoch_a, epoch_b)
    if result == 0:
        result = _compare_runs(ver_a, ver_b)
    if result == 0 and rel_a is not None and rel_b is not None:
        result = _compare_runs(rel_a, rel_b)
    return _sign(result)


def is_newer(a: str, b: str) -> bool:
    """Return True if version a is strictly newer than version b."""
    return vercmp(a, b) > 0


version_key = cmp_to_key(vercmp)
