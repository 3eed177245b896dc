"""Core services: record store, partial-update merge, command dispatch."""
from funkoshelf.core.dispatcher import Dispatcher
from funkoshelf.core.record_store import FunkoStore, StoreError

__all__ = ["Dispatcher", "FunkoStore", "StoreError"]
