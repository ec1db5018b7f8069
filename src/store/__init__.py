"""Snapshot publication layer.

This module holds the currently published catalog snapshot.
It renders the bootstrap script and exposes the rebuild service.
"""
