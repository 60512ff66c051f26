"""
Parser for the plain-text loadout export format.

Export format:
    PRAYERLOADOUT:<name>
    ORDER_<book>:<order or DEFAULT>
    FILTER_<book>_<flag>:<int>        (0-6 per book)
    HIDDEN_<book>_<prayer key>:<value> (0-n per book)
    ...
    END

Example:
    PRAYERLOADOUT:Melee
    ORDER_0:DEFAULT
    FILTER_0_blocklowtier:1
    HIDDEN_0_prayer_hidden_book_0_12:1
    END

The envelope (prefix, name, END line) is strict. Individual lines are
lenient: lines without a colon, with an unknown prefix or with a bad
number are skipped and the rest of the loadout is kept.
"""

import logging
from dataclasses import dataclass

from prayerloadouts.models.loadout import FilterFlag, FilterSettings, LoadoutData

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "PRAYERLOADOUT:"
END_MARKER = "END"
ORDER_PREFIX = "ORDER_"
FILTER_PREFIX = "FILTER_"
HIDDEN_PREFIX = "HIDDEN_"


class LoadoutImportError(ValueError):
    """Raised when export text has no valid envelope."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid loadout export: {reason}")


@dataclass
class ParsedLoadout:
    """Result of parsing export text."""

    original_name: str
    """Name carried in the PRAYERLOADOUT header."""

    loadout: LoadoutData
    """Parsed data, display name set to original_name."""

    skipped_lines: int = 0
    """Lines ignored because they could not be parsed."""


def parse_loadout_export(text: str | None) -> ParsedLoadout:
    """
    Parse loadout export text.

    Args:
        text: Raw clipboard text

    Returns:
        ParsedLoadout with every parsable line applied

    Raises:
        LoadoutImportError: Missing text or prefix, no END line, or a
            header name that is empty or contains a comma
    """
    if not text or not text.startswith(EXPORT_PREFIX):
        raise LoadoutImportError(f"missing {EXPORT_PREFIX} header")

    lines = text.splitlines()
    if not any(line.strip() == END_MARKER for line in lines[1:]):
        raise LoadoutImportError(f"missing {END_MARKER} line")

    # Commas are reserved: names are joined on commas in older name lists
    original_name = lines[0][len(EXPORT_PREFIX) :].strip()
    if not original_name:
        raise LoadoutImportError("empty loadout name")
    if "," in original_name:
        raise LoadoutImportError("loadout name contains a comma")

    loadout = LoadoutData(display_name=original_name)
    filter_values: dict[int, dict[FilterFlag, int]] = {}
    skipped = 0

    for raw_line in lines[1:]:
        line = raw_line.strip()
        if line == END_MARKER:
            break
        if not line:
            continue

        key, sep, value = line.partition(":")
        if not sep or not _apply_line(loadout, filter_values, key, value):
            logger.debug("Skipping loadout line %r", line)
            skipped += 1

    for book, values in filter_values.items():
        loadout.set_filters(book, FilterSettings.from_flags(values))

    return ParsedLoadout(original_name=original_name, loadout=loadout, skipped_lines=skipped)


def _apply_line(
    loadout: LoadoutData,
    filter_values: dict[int, dict[FilterFlag, int]],
    key: str,
    value: str,
) -> bool:
    """Apply one key:value line. Returns False if the line was not usable."""
    try:
        if key.startswith(ORDER_PREFIX):
            book = _parse_book(key[len(ORDER_PREFIX) :])
            loadout.set_prayer_order(book, value)
            return True

        if key.startswith(FILTER_PREFIX):
            book_token, sep, flag_name = key[len(FILTER_PREFIX) :].partition("_")
            if not sep:
                return False
            book = _parse_book(book_token)
            flag = FilterFlag(flag_name)
            filter_values.setdefault(book, {})[flag] = int(value)
            return True

        if key.startswith(HIDDEN_PREFIX):
            book_token, sep, prayer_key = key[len(HIDDEN_PREFIX) :].partition("_")
            if not sep or not prayer_key:
                return False
            book = _parse_book(book_token)
            hidden = loadout.hidden_prayers.setdefault(book, {})
            hidden[prayer_key] = value
            return True
    except ValueError:
        return False

    return False


def _parse_book(token: str) -> int:
    """Parse a book id. Raises ValueError unless a non-negative integer."""
    book = int(token)
    if book < 0:
        raise ValueError(f"negative book id {book}")
    return book
