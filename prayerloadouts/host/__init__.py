from prayerloadouts.host.client_thread import (
    ClientExecutor,
    ClientThread,
    ImmediateExecutor,
    invoke_and_wait,
)
from prayerloadouts.host.clipboard import Clipboard, MemoryClipboard
from prayerloadouts.host.live_state import (
    FILTER_VARBIT_NAMES,
    FILTER_VARBITS,
    PRAYERBOOK_VARBIT,
    ClientLiveState,
    GameClient,
    LiveState,
)

__all__ = [
    "FILTER_VARBITS",
    "FILTER_VARBIT_NAMES",
    "PRAYERBOOK_VARBIT",
    "ClientExecutor",
    "ClientLiveState",
    "ClientThread",
    "Clipboard",
    "GameClient",
    "ImmediateExecutor",
    "LiveState",
    "MemoryClipboard",
    "invoke_and_wait",
]
