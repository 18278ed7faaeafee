"""Exports for test fakes."""

from .filesystem import InMemoryFileSystem
from .pool import BlockingPoolProvider, FailingPoolProvider, InMemoryPoolProvider

__all__ = [
    "BlockingPoolProvider",
    "FailingPoolProvider",
    "InMemoryFileSystem",
    "InMemoryPoolProvider",
]
