import pytest

from tinymonth.config import AppConfig
from tinymonth.core.document import Document
from tinymonth.core.registry import StoreRegistry, create_store, register_store
from tinymonth.core.store import DocumentStore
from tinymonth.stores.json_file import JsonFileStore
from tinymonth.stores.memory import MemoryStore


class NullStore(DocumentStore):
    @classmethod
    def from_config(cls, config):
        return cls()

    async def read(self) -> Document:
        return Document()

    async def write(self, document: Document) -> None:
        pass


def test_store_registry_singleton():
    registry1 = StoreRegistry()
    registry2 = StoreRegistry()
    assert registry1 is registry2


def test_register_store_decorator():
    @register_store("test_null")
    class DecoratedStore(NullStore):
        pass

    assert StoreRegistry.get_store("test_null") is DecoratedStore


def test_builtin_backends_discovered():
    StoreRegistry.discover_stores()

    stores = StoreRegistry.list_stores()
    assert {"json", "memory", "remote"} <= set(stores)


def test_create_store_from_config(tmp_path):
    memory = create_store(AppConfig(store_backend="memory"))
    assert isinstance(memory, MemoryStore)

    data_file = tmp_path / "data.json"
    json_store = create_store(AppConfig(store_backend="json", data_file=str(data_file)))
    assert isinstance(json_store, JsonFileStore)
    assert json_store.path == data_file


def test_registry_error_handling():
    with pytest.raises(ValueError, match="Unknown store backend"):
        StoreRegistry.create_store("unknown", AppConfig())

    class NotAStore:
        pass

    with pytest.raises(ValueError, match="must inherit from DocumentStore"):
        StoreRegistry.register("invalid", NotAStore)


def test_remote_store_requires_url():
    with pytest.raises(ValueError, match="remote_url"):
        create_store(AppConfig(store_backend="remote"))
