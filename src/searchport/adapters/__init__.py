"""Search port adapter layer — Pluggable connectors for document-store backends.

Built-in adapters:
  - elasticsearch: Elasticsearch v7+ over its REST API

Implement ``SearchPortAdapter`` to connect your own backend.
"""
