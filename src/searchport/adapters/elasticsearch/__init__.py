"""Elasticsearch adapter package."""

from searchport.adapters.elasticsearch.adapter import ElasticsearchAdapter

__all__ = ["ElasticsearchAdapter"]
