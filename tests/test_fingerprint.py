from itertools import permutations

from prayerloadouts.models.loadout import FILTER_FLAGS, FilterSettings
from prayerloadouts.services.fingerprint import (
    NO_FILTERS_FINGERPRINT,
    filter_fingerprint,
    hidden_fingerprint,
)


class TestFilterFingerprint:
    def test_absent_filters(self) -> None:
        """No saved filters compares equal to all filters off."""
        assert filter_fingerprint(None) == "0,0,0,0,0,0"
        assert filter_fingerprint(None) == filter_fingerprint(FilterSettings())
        assert NO_FILTERS_FINGERPRINT == "0,0,0,0,0,0"

    def test_every_flag_changes_fingerprint(self) -> None:
        base = filter_fingerprint(FilterSettings())
        fingerprints = {
            filter_fingerprint(FilterSettings.from_flags({flag: 1})) for flag in FILTER_FLAGS
        }

        assert base not in fingerprints
        assert len(fingerprints) == len(FILTER_FLAGS)


class TestHiddenFingerprint:
    def test_empty(self) -> None:
        assert hidden_fingerprint({}) == ""
        assert hidden_fingerprint(None) == ""

    def test_sorted_by_key(self) -> None:
        assert hidden_fingerprint({"b": "1", "a": "0"}) == "a=0;b=1;"

    def test_order_independent(self) -> None:
        """Every insertion order yields the same fingerprint."""
        items = [("prayer_12", "1"), ("prayer_3", "1"), ("prayer_7", "0"), ("a", "x")]
        results = {hidden_fingerprint(dict(order)) for order in permutations(items)}

        assert len(results) == 1

    def test_value_change_detected(self) -> None:
        assert hidden_fingerprint({"a": "1"}) != hidden_fingerprint({"a": "0"})

    def test_key_change_detected(self) -> None:
        assert hidden_fingerprint({"a": "1"}) != hidden_fingerprint({"b": "1"})

    def test_extra_entry_detected(self) -> None:
        assert hidden_fingerprint({"a": "1"}) != hidden_fingerprint({"a": "1", "b": "1"})
