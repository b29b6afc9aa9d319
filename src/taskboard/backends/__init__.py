"""Backend implementations."""

from taskboard.backends.memory import MemoryBackend

__all__ = ["MemoryBackend"]
