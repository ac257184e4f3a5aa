"""Base adapter interface — Abstract classes for document-store connectors."""

from searchport.adapters.base.adapter import AdapterHealth, SearchPortAdapter

__all__ = ["AdapterHealth", "SearchPortAdapter"]
