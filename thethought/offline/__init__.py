"""Variante offline: todo el estado en un JSON local, sin red."""
from thethought.offline.store import LocalStateStore
from thethought.offline.service import OfflineApp

__all__ = ["LocalStateStore", "OfflineApp"]
