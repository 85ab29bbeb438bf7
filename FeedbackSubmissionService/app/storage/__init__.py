"""
Local storage module for development record storage.
"""
from app.storage.local_storage import LocalStorage

__all__ = [
    "LocalStorage",
]
