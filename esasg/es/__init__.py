"""Elasticsearch cluster services over a small HTTP client."""