"""Shared application state (injected into routes and the TCP server)."""
from typing import Optional

from funkoshelf.core.dispatcher import Dispatcher
from funkoshelf.core.record_store import FunkoStore


class AppState:
    def __init__(self, store: Optional[FunkoStore] = None) -> None:
        self.store = store if store is not None else FunkoStore()
        self.dispatcher = Dispatcher(self.store)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState()
    return _state
