import logging
from collections.abc import Callable

from prayerloadouts.config import Settings, settings
from prayerloadouts.db.config_store import ConfigStore, SqlConfigStore
from prayerloadouts.db.database import build_engine, build_session_factory, init_db
from prayerloadouts.host.client_thread import ClientExecutor, ClientThread
from prayerloadouts.host.clipboard import Clipboard
from prayerloadouts.host.live_state import ClientLiveState, GameClient
from prayerloadouts.plugin import PrayerLoadoutsPlugin
from prayerloadouts.services.loadout_manager import LoadoutManager
from prayerloadouts.services.loadout_serializer import LoadoutSerializer
from prayerloadouts.services.loadout_store import FlatKeyLoadoutStore

logger = logging.getLogger(__name__)


def configure_logging(app_settings: Settings = settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if app_settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_config_store(app_settings: Settings = settings) -> SqlConfigStore:
    """SQL config store for database_url, schema created if missing."""
    engine = build_engine(app_settings.database_url, echo=app_settings.debug)
    init_db(engine)
    return SqlConfigStore(build_session_factory(engine))


def build_plugin(
    game_client: GameClient,
    clipboard: Clipboard,
    feature_enabled: Callable[[], bool] = lambda: True,
    config_store: ConfigStore | None = None,
    executor: ClientExecutor | None = None,
    on_refresh: Callable[[], None] | None = None,
    app_settings: Settings = settings,
) -> PrayerLoadoutsPlugin:
    """
    Wire the plugin together.

    Args:
        game_client: Varbit access and login state
        clipboard: Export/import channel
        feature_enabled: Whether the host's prayer plugin is enabled
        config_store: Host config store; defaults to the SQL store
        executor: Client thread; defaults to a new ClientThread
        on_refresh: Called whenever the panel should be redrawn
        app_settings: Settings to use

    Returns:
        A plugin ready for start_up()
    """
    store = config_store if config_store is not None else create_config_store(app_settings)
    client_executor = executor if executor is not None else ClientThread()

    live_state = ClientLiveState(game_client, store, feature_enabled)
    loadout_store = FlatKeyLoadoutStore(store)
    manager = LoadoutManager(loadout_store, live_state, client_executor)
    serializer = LoadoutSerializer(loadout_store, clipboard)

    logger.info("%s ready", app_settings.app_name)
    return PrayerLoadoutsPlugin(
        manager,
        serializer,
        live_state,
        client_executor,
        app_settings=app_settings,
        on_refresh=on_refresh,
    )
