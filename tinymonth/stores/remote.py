from typing import Optional
import asyncio
import logging

import requests

from ..core.document import Document
from ..core.registry import register_store
from ..core.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)


@register_store("remote")
class RemoteStore(DocumentStore):
    """Client for a ``/api/data`` persistence endpoint."""

    def __init__(self, url: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "RemoteStore":
        if not config.remote_url:
            raise ValueError("remote_url is required for the remote store")
        return cls(config.remote_url, timeout=config.remote_timeout)

    async def read(self) -> Document:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, document: Document) -> None:
        await asyncio.to_thread(self._write_sync, document)

    def _read_sync(self) -> Document:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            # Covers both JSON decode errors and ValidationError
            return Document.model_validate(response.json())
        except (requests.RequestException, ValueError) as e:
            raise StoreError(f"GET {self.url} failed: {e}") from e

    def _write_sync(self, document: Document) -> None:
        try:
            response = self.session.put(
                self.url,
                json=document.to_json_dict(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StoreError(f"PUT {self.url} failed: {e}") from e
        logger.debug("PUT %s succeeded", self.url)
