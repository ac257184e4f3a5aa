"""searchport — Document-store and search port over the Elasticsearch REST API."""

__version__ = "0.1.0"
