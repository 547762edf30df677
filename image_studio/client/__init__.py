"""Client side of Image Studio: relay adapter, state controller and history."""

from .controller import StudioController, StudioState, TAB_CONFIGURE, TAB_HISTORY
from .countdown import Countdown
from .history_store import HistoryStore
from .relay_client import RelayClient

__all__ = [
    "StudioController",
    "StudioState",
    "TAB_CONFIGURE",
    "TAB_HISTORY",
    "Countdown",
    "HistoryStore",
    "RelayClient",
]
