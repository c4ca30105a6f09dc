"""Protected-process policy applied to the names a model asks to kill."""

import logging

logger = logging.getLogger(__name__)

# Substrings that veto termination. Matching is case-insensitive and by
# containment, so "MyExplorerClone" is rejected along with "explorer.exe".
PROTECTED_KEYWORDS: frozenset[str] = frozenset(
    {
        # Core OS
        "system",
        "winlogon",
        "csrss",
        "dwm",
        "taskmgr",
        "explorer",
        "svchost",
        "spoolsv",
        "lsass",
        "services",
        "wininit",
        "smss",
        "conhost",
        "dllhost",
        "fontdrvhost",
        "sihost",
        "ctfmon",
        # Security and shell components
        "msmpeng",
        "securityhealthservice",
        "applicationframehost",
        "runtimebroker",
        "searchui",
        "startmenuexperiencehost",
        # Vendors
        "windows",
        "microsoft",
        "onedrive",
        "hp",
        "dell",
        "lenovo",
        "intel",
    }
)

_KEYWORDS_IN_ORDER: tuple[str, ...] = tuple(sorted(PROTECTED_KEYWORDS))


def protected_keyword(name: str) -> str | None:
    """Return the first protected keyword found in name, or None."""
    lowered = name.lower()
    for keyword in _KEYWORDS_IN_ORDER:
        if keyword in lowered:
            return keyword
    return None


def is_protected(name: str) -> bool:
    return protected_keyword(name) is not None


def filter_names(requested_names) -> list[str]:
    """
    Drop protected names and case-insensitive duplicates.

    The first spelling of each surviving name is kept, in request order.
    An empty result means there is nothing safe to terminate.
    """
    approved: list[str] = []
    seen: set[str] = set()
    for name in requested_names:
        keyword = protected_keyword(name)
        if keyword is not None:
            logger.warning("Refusing to kill %r: matches protected keyword %r", name, keyword)
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        approved.append(name)
    return approved
