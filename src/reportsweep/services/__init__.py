from .memory_store import InMemoryReportStore
from .file_store import JsonDirectoryReportStore
from .rest_store import RestReportStore

__all__ = ["InMemoryReportStore", "JsonDirectoryReportStore", "RestReportStore"]
