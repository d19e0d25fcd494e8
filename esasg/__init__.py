"""Snapshot retention, CloudWatch event decoding and extra Elasticsearch cluster APIs."""

__version__ = "2.0.0"