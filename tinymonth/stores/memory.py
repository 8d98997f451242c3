from typing import Optional

from ..core.document import Document
from ..core.registry import register_store
from ..core.store import DocumentStore


@register_store("memory")
class MemoryStore(DocumentStore):
    """Keeps the document in process memory only."""

    def __init__(self, document: Optional[Document] = None):
        self._document = document.model_copy(deep=True) if document else None
        self.writes = 0

    @classmethod
    def from_config(cls, config) -> "MemoryStore":
        return cls()

    async def read(self) -> Document:
        if self._document is None:
            self._document = Document()
        return self._document.model_copy(deep=True)

    async def write(self, document: Document) -> None:
        self._document = document.model_copy(deep=True)
        self.writes += 1
