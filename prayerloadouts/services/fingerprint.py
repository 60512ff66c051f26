"""
State fingerprints.

A fingerprint is a canonical string built from a snapshot so that live
state and saved state compare by plain string equality. Not a hash and
not meant for security; it only has to be deterministic and distinguish
any two differing inputs in the value domain actually used (flag values
and short tokens).
"""

from collections.abc import Mapping

from prayerloadouts.models.loadout import FilterSettings

# Fingerprint of "no filters saved", identical to all six flags off
NO_FILTERS_FINGERPRINT = FilterSettings().fingerprint()


def filter_fingerprint(filters: FilterSettings | None) -> str:
    """
    Fingerprint filter flags.

    Args:
        filters: Filter settings, or None when nothing was saved

    Returns:
        Fixed-order comma string, "0,0,0,0,0,0" for None
    """
    if filters is None:
        return NO_FILTERS_FINGERPRINT
    return filters.fingerprint()


def hidden_fingerprint(hidden: Mapping[str, str] | None) -> str:
    """
    Fingerprint a hidden prayer mapping.

    Entries are sorted by key so iteration order never matters, then
    rendered as "key=value;" each. Empty or None yields "".
    """
    if not hidden:
        return ""
    return "".join(f"{key}={hidden[key]};" for key in sorted(hidden))
