from typing import Dict, Type, List, Optional
import importlib
import logging
import pkgutil
from pathlib import Path

from .store import DocumentStore

logger = logging.getLogger(__name__)


class StoreRegistry:
    _instance: Optional["StoreRegistry"] = None
    _stores: Dict[str, Type[DocumentStore]] = {}

    def __new__(cls) -> "StoreRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def register(cls, name: str, store_class: Type[DocumentStore]) -> None:
        if not (isinstance(store_class, type) and issubclass(store_class, DocumentStore)):
            raise ValueError(f"Store {store_class} must inherit from DocumentStore")
        cls._stores[name] = store_class

    @classmethod
    def get_store(cls, name: str) -> Optional[Type[DocumentStore]]:
        return cls._stores.get(name)

    @classmethod
    def list_stores(cls) -> List[str]:
        return list(cls._stores.keys())

    @classmethod
    def create_store(cls, name: str, config) -> DocumentStore:
        store_class = cls.get_store(name)
        if store_class is None:
            raise ValueError(f"Unknown store backend: {name}")
        return store_class.from_config(config)

    @classmethod
    def discover_stores(cls, package_path: str = "tinymonth.stores") -> None:
        package = importlib.import_module(package_path)
        package_dir = Path(package.__file__).parent

        for _, module_name, _ in pkgutil.iter_modules([str(package_dir)]):
            module_path = f"{package_path}.{module_name}"
            try:
                importlib.import_module(module_path)
            except ImportError as e:
                # A backend with a missing optional dependency is skipped
                logger.warning("Skipping store backend %s: %s", module_path, e)


def register_store(name: str):
    def decorator(cls: Type[DocumentStore]) -> Type[DocumentStore]:
        StoreRegistry.register(name, cls)
        return cls
    return decorator


def create_store(config) -> DocumentStore:
    """Build the store selected by ``config.store_backend``."""
    StoreRegistry.discover_stores()
    return StoreRegistry.create_store(config.store_backend, config)
