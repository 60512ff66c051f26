import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from prayerloadouts.db.config_store import InMemoryConfigStore
from prayerloadouts.db.database import drop_db, init_db
from prayerloadouts.host.client_thread import ImmediateExecutor
from prayerloadouts.host.clipboard import MemoryClipboard
from prayerloadouts.host.live_state import FILTER_VARBITS, PRAYERBOOK_VARBIT, ClientLiveState
from prayerloadouts.models.loadout import FilterFlag
from prayerloadouts.services.loadout_manager import LoadoutManager
from prayerloadouts.services.loadout_serializer import LoadoutSerializer
from prayerloadouts.services.loadout_store import FlatKeyLoadoutStore


class FakeGameClient:
    """Game client with varbits held in a dict."""

    def __init__(self, logged_in: bool = True, book: int = 0) -> None:
        self.varbits: dict[str, int] = {PRAYERBOOK_VARBIT: book}
        for varbit in FILTER_VARBITS.values():
            self.varbits[varbit] = 0
        self.logged_in = logged_in
        self.redraws = 0

    def get_varbit(self, name: str) -> int:
        return self.varbits.get(name, 0)

    def set_varbit(self, name: str, value: int) -> None:
        self.varbits[name] = value

    def is_logged_in(self) -> bool:
        return self.logged_in

    def redraw_prayerbook(self) -> None:
        self.redraws += 1

    def set_book(self, book: int) -> None:
        self.varbits[PRAYERBOOK_VARBIT] = book

    def set_filter(self, flag: FilterFlag, value: int) -> None:
        self.varbits[FILTER_VARBITS[flag]] = value


class FeatureToggle:
    """Stands in for the host's prayer plugin enabled state."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def __call__(self) -> bool:
        return self.enabled


@pytest.fixture
def config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def game_client() -> FakeGameClient:
    return FakeGameClient()


@pytest.fixture
def feature_toggle() -> FeatureToggle:
    return FeatureToggle()


@pytest.fixture
def live_state(game_client, config_store, feature_toggle) -> ClientLiveState:
    return ClientLiveState(game_client, config_store, feature_toggle)


@pytest.fixture
def executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def loadout_store(config_store) -> FlatKeyLoadoutStore:
    return FlatKeyLoadoutStore(config_store)


@pytest.fixture
def manager(loadout_store, live_state, executor) -> LoadoutManager:
    return LoadoutManager(loadout_store, live_state, executor)


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def serializer(loadout_store, clipboard) -> LoadoutSerializer:
    return LoadoutSerializer(loadout_store, clipboard)


@pytest.fixture
def sql_engine() -> Engine:
    """In-memory SQLite engine shared across threads and sessions."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def sample_export() -> str:
    """Sample loadout export for testing."""
    return """PRAYERLOADOUT:Melee
ORDER_0:DEFAULT
FILTER_0_blocklowtier:1
FILTER_0_allowcombinedtier:0
FILTER_0_blockhealing:0
FILTER_0_blocklacklevel:1
FILTER_0_blocklocked:0
FILTER_0_hidefilterbutton:0
HIDDEN_0_prayer_hidden_book_0_12:1
ORDER_1:4,3,2,1
END"""
