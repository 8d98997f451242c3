from pathlib import Path
from typing import Union
import asyncio
import json
import logging
import os
import tempfile

from pydantic import ValidationError

from ..core.document import Document
from ..core.registry import register_store
from ..core.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)


@register_store("json")
class JsonFileStore(DocumentStore):
    """Stores the document as a pretty-printed JSON file.

    A missing file is not an error: the first read creates it with an
    empty document. Writes go through a temporary file so a crash never
    leaves a half-written document behind, and run one at a time in the
    order they were requested.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config) -> "JsonFileStore":
        return cls(config.data_file)

    async def read(self) -> Document:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, document: Document) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._write_sync, document)

    def _read_sync(self) -> Document:
        if not self.path.exists():
            logger.info("No data file at %s, creating default document", self.path)
            document = Document()
            self._write_sync(document)
            return document

        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            document = Document.model_validate(raw)
        except (OSError, ValueError, ValidationError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            raise StoreError(f"Failed to read {self.path}: {e}") from e

        logger.debug("Read %d calendars from %s", len(document.calendars), self.path)
        return document

    def _write_sync(self, document: Document) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent,
                prefix=f".{self.path.name}.", suffix=".tmp", delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(document.to_json_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Failed to write {self.path}: {e}") from e
        logger.debug("Wrote document to %s", self.path)
