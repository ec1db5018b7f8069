"""Catalog ingestion pipeline.

This module reads module descriptors and external score feeds.
It assembles immutable catalog snapshots for the store layer.
"""
