"""Tests for the protected-process filter."""

import pytest

from taskai.safety import PROTECTED_KEYWORDS, filter_names, is_protected, protected_keyword


@pytest.mark.parametrize(
    "name",
    [
        "explorer",
        "explorer.exe",
        "ExplorerPlus",
        "MyExplorerClone",
        "svchost",
        "MsMpEng",
        "WindowsTerminal",
        "Microsoft.Photos",
        "IntelGraphicsCommandCenter",
        "OneDrive",
        "systemd",
    ],
)
def test_protected_names_are_rejected(name):
    """Test names containing a protected keyword are removed."""
    assert is_protected(name)
    assert filter_names([name]) == []


def test_filter_keeps_safe_names_in_order():
    """Test unprotected names survive in request order."""
    assert filter_names(["slack", "chrome", "code"]) == ["slack", "chrome", "code"]


def test_filter_deduplicates_case_insensitively():
    """Test duplicates collapse to the first spelling."""
    assert filter_names(["chrome", "Chrome", "CHROME"]) == ["chrome"]


def test_filter_mixed():
    """Test a mix of protected and safe names."""
    assert filter_names(["explorer", "Notepad", "lsass", "notepad", "zoom"]) == ["Notepad", "zoom"]


def test_filter_is_idempotent():
    """Test filtering twice gives the same result."""
    names = ["Chrome", "chrome", "dwm", "spotify", "Spotify", "dellupdate"]

    once = filter_names(names)

    assert filter_names(once) == once


def test_filter_output_never_contains_keywords():
    """Test no approved name contains any keyword, whatever the input."""
    names = [f"{prefix}{keyword.upper()}{suffix}" for keyword in PROTECTED_KEYWORDS for prefix in ("", "x") for suffix in ("", ".exe")]
    names += ["firefox", "vlc"]

    approved = filter_names(names)

    assert approved == ["firefox", "vlc"]
    for name in approved:
        assert all(keyword not in name.lower() for keyword in PROTECTED_KEYWORDS)


def test_protected_keyword_reports_match():
    """Test the matching keyword is reported."""
    assert protected_keyword("csrss.exe") == "csrss"
    assert protected_keyword("firefox") is None


def test_filter_accepts_tuples():
    """Test the requested names may be any iterable."""
    assert filter_names(("vlc",)) == ["vlc"]


def test_protected_keyword_is_stable():
    """Test a name holding several keywords always reports the same one."""
    assert protected_keyword("hp-dell-intel-updater") == "dell"
    assert protected_keyword("HP-DELL-INTEL-UPDATER") == "dell"
