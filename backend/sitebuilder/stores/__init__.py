from .base import DocumentStore
from .memory import MemoryDocumentStore
from .sql import SqlDocumentStore

__all__ = ["DocumentStore", "MemoryDocumentStore", "SqlDocumentStore"]
