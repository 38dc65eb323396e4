from .store_call import StoreCallSignals, StoreCallWorker

__all__ = [
    "StoreCallSignals",
    "StoreCallWorker",
]
