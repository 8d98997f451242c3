"""Whole-document persistence contract.

A store only ever reads and writes a complete :class:`Document`;
merging partial updates is the caller's job.
"""

from abc import ABC, abstractmethod

from .document import Document


class StoreError(Exception):
    """Raised when a store cannot be read or written."""


class DocumentStore(ABC):
    @classmethod
    @abstractmethod
    def from_config(cls, config) -> "DocumentStore":
        """Build the store from an :class:`~tinymonth.config.AppConfig`."""

    @abstractmethod
    async def read(self) -> Document:
        """Return the stored document, creating a default one if absent."""

    @abstractmethod
    async def write(self, document: Document) -> None:
        """Replace the stored document."""
