"""
Plugin facade: host events in, panel actions out.

The panel calls these methods from the UI thread. Anything that touches
live prayer state is handed to the client executor; store-only actions
(delete, rename, import, export) run directly.
"""

import logging
from collections.abc import Callable
from concurrent.futures import Future

from prayerloadouts.config import Settings, settings
from prayerloadouts.host.client_thread import ClientExecutor, invoke_and_wait
from prayerloadouts.host.live_state import FILTER_VARBIT_NAMES, LiveState
from prayerloadouts.services.loadout_manager import LoadoutManager
from prayerloadouts.services.loadout_serializer import LoadoutSerializer

logger = logging.getLogger(__name__)


class PrayerLoadoutsPlugin:
    """Entry point for the loadouts panel and host event hooks."""

    def __init__(
        self,
        manager: LoadoutManager,
        serializer: LoadoutSerializer,
        live_state: LiveState,
        executor: ClientExecutor,
        app_settings: Settings = settings,
        on_refresh: Callable[[], None] | None = None,
    ) -> None:
        self._manager = manager
        self._serializer = serializer
        self._live = live_state
        self._executor = executor
        self._settings = app_settings
        self._on_refresh = on_refresh
        self._logged_in = False

    # --- Lifecycle and host events ---

    def start_up(self) -> Future[None]:
        """Pick up the current login state and prime the cache."""

        def _start() -> None:
            self._logged_in = self._live.is_session_active()
            if self._logged_in:
                self._manager.update_cached_snapshot()
            self.refresh()

        return self._executor.submit(_start)

    def on_game_state_changed(self, logged_in: bool) -> None:
        """
        Track login transitions.

        On login the cached snapshot is refreshed, since the book or the
        filters may have changed while logged out. Then, after a delay
        that lets the game finish loading, the last used loadout is
        applied again if it still exists.
        """
        was_logged_in = self._logged_in
        self._logged_in = logged_in
        if was_logged_in == logged_in:
            return

        if not logged_in:
            self.refresh()
            return

        def _on_login() -> None:
            self._manager.update_cached_snapshot()
            self.refresh()

        self._executor.submit(_on_login)
        if self._settings.auto_load_on_login:
            self._executor.schedule(self._settings.auto_load_delay_seconds, self._auto_load)

    def _auto_load(self) -> None:
        self._manager.update_cached_snapshot()

        last_loadout = self._manager.last_loadout_name()
        if last_loadout and last_loadout in self._manager.loadout_names():
            if self._manager.load(last_loadout, on_applied=self.refresh):
                logger.info("Auto-loaded loadout %s", last_loadout)
                return

        self.refresh()

    def on_varbit_changed(self, varbit_name: str) -> None:
        """Filter varbit changes invalidate the cached filter fingerprint."""
        if varbit_name not in FILTER_VARBIT_NAMES:
            return

        def _update() -> None:
            self._manager.update_cached_snapshot()
            self.refresh()

        self._executor.submit(_update)

    def on_feature_toggled(self) -> None:
        """The prayer plugin was enabled or disabled."""
        self.refresh()

    def refresh(self) -> None:
        if self._on_refresh is not None:
            self._on_refresh()

    # --- Panel queries ---

    def is_logged_in(self) -> bool:
        return self._logged_in

    def is_feature_enabled(self) -> bool:
        return self._live.is_feature_enabled()

    def loadout_names(self) -> list[str]:
        return self._manager.loadout_names()

    def active_loadout_name(self) -> str | None:
        return self._manager.active_loadout_name(self._logged_in)

    # --- Panel actions ---

    def save_loadout(self, name: str) -> Future[bool]:
        def _save() -> bool:
            saved = self._manager.save(name)
            self._manager.update_cached_snapshot()
            self.refresh()
            return saved

        return self._executor.submit(_save)

    def load_loadout(self, name: str) -> bool:
        """
        Load a loadout and wait for the answer.

        Blocks up to load_timeout_seconds. A timeout or a failing task
        reports False.
        """
        try:
            return invoke_and_wait(
                self._executor,
                lambda: self._manager.load(name, on_applied=self.refresh),
                self._settings.load_timeout_seconds,
            )
        except TimeoutError:
            logger.warning("Timed out loading loadout %s", name)
            return False
        except Exception:
            logger.exception("Loading loadout %s failed", name)
            return False

    def reset_to_defaults(self) -> None:
        def _refresh_after_reset() -> None:
            self._manager.update_cached_snapshot()
            self.refresh()

        def _reset() -> None:
            if self._manager.reset_to_defaults():
                self._executor.schedule(
                    self._settings.reset_refresh_delay_seconds, _refresh_after_reset
                )

        self._executor.submit(_reset)

    def delete_loadout(self, name: str) -> bool:
        deleted = self._manager.delete(name)
        self.refresh()
        return deleted

    def rename_loadout(self, old_name: str, new_name: str) -> bool:
        renamed = self._manager.rename(old_name, new_name)
        self.refresh()
        return renamed

    def export_loadout(self, name: str) -> bool:
        return self._serializer.export_loadout(name)

    def import_loadout(self, name: str | None = None) -> bool:
        imported = self._serializer.import_loadout(name)
        self.refresh()
        return imported
