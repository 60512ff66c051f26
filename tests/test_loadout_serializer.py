"""
Tests for clipboard export and import.
"""

from prayerloadouts.config import CONFIG_GROUP
from prayerloadouts.host.clipboard import MemoryClipboard
from prayerloadouts.models.loadout import BookSnapshot, FilterSettings
from prayerloadouts.services.loadout_serializer import LoadoutSerializer


class RefusingClipboard(MemoryClipboard):
    def write_text(self, text: str) -> bool:
        return False


def _save_melee(loadout_store) -> None:
    loadout_store.save(
        "Melee",
        0,
        BookSnapshot(
            order="DEFAULT",
            filters=FilterSettings(block_low_tier=1, block_lack_level=1),
            hidden={"prayer_hidden_book_0_12": "1"},
        ),
    )
    loadout_store.save("Melee", 1, BookSnapshot(order="4,3,2,1"))


class TestExport:
    def test_export_writes_clipboard(
        self, serializer: LoadoutSerializer, loadout_store, clipboard, sample_export
    ) -> None:
        _save_melee(loadout_store)

        assert serializer.export_loadout("Melee") is True
        assert clipboard.text == sample_export

    def test_export_by_other_case(
        self, serializer: LoadoutSerializer, loadout_store, clipboard
    ) -> None:
        _save_melee(loadout_store)

        assert serializer.export_loadout("MELEE") is True
        assert clipboard.text.startswith("PRAYERLOADOUT:Melee\n")

    def test_export_unknown(self, serializer: LoadoutSerializer, clipboard) -> None:
        assert serializer.export_loadout("Nope") is False
        assert clipboard.text is None

    def test_export_refused(self, loadout_store) -> None:
        _save_melee(loadout_store)
        serializer = LoadoutSerializer(loadout_store, RefusingClipboard())

        assert serializer.export_loadout("Melee") is False


class TestImport:
    def test_import_original_name(
        self, serializer: LoadoutSerializer, loadout_store, clipboard, sample_export
    ) -> None:
        clipboard.text = sample_export

        assert serializer.import_loadout() is True

        assert loadout_store.list_names() == ["Melee"]
        assert loadout_store.load("Melee", 1).order == "4,3,2,1"
        assert loadout_store.load("Melee", 0).filters == FilterSettings(
            block_low_tier=1, block_lack_level=1
        )

    def test_import_under_new_name(
        self, serializer: LoadoutSerializer, loadout_store, clipboard, sample_export
    ) -> None:
        clipboard.text = sample_export

        assert serializer.import_loadout("  Tank  ") is True

        assert loadout_store.list_names() == ["Tank"]

    def test_blank_name_falls_back(
        self, serializer: LoadoutSerializer, loadout_store, clipboard, sample_export
    ) -> None:
        clipboard.text = sample_export

        assert serializer.import_loadout("   ") is True

        assert loadout_store.list_names() == ["Melee"]

    def test_export_then_import(
        self, serializer: LoadoutSerializer, loadout_store, clipboard
    ) -> None:
        """Export, delete, import: the loadout comes back unchanged."""
        _save_melee(loadout_store)
        before = loadout_store.get_loadout("Melee")
        serializer.export_loadout("Melee")
        loadout_store.delete("Melee")

        assert serializer.import_loadout() is True
        assert loadout_store.get_loadout("Melee") == before

    def test_import_rejects_invalid(
        self, serializer: LoadoutSerializer, loadout_store, clipboard, config_store
    ) -> None:
        _save_melee(loadout_store)
        before = config_store.entries(CONFIG_GROUP)
        clipboard.text = "not a loadout"

        assert serializer.import_loadout() is False
        assert config_store.entries(CONFIG_GROUP) == before

    def test_import_empty_clipboard(self, serializer: LoadoutSerializer) -> None:
        assert serializer.import_loadout() is False

    def test_import_tolerates_garbage_lines(
        self, serializer: LoadoutSerializer, loadout_store
    ) -> None:
        text = "PRAYERLOADOUT:X\nORDER_0:DEFAULT\nGARBAGE_123\nEND"

        assert serializer.import_text(text) == "X"
        assert loadout_store.load("X", 0).order == "DEFAULT"

    def test_import_overwrites(
        self, serializer: LoadoutSerializer, loadout_store, sample_export
    ) -> None:
        """Books missing from the export are gone after the import."""
        loadout_store.save("Melee", 3, BookSnapshot(order="1,2"))

        serializer.import_text(sample_export)

        assert loadout_store.load("Melee", 3) is None
        assert loadout_store.get_loadout("Melee").books() == [0, 1]
