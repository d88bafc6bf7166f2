"""Persistence backends for the taught mapping table."""
from .api import MappingBackend, make_backend
from .memory_store import MemoryBackend

__all__ = ["MappingBackend", "make_backend", "MemoryBackend"]
