"""Ingestion layer.

This package contains adapters that receive data from the Home Connect
event stream and turn it into item store updates and connectivity changes.
"""

__all__: list[str] = []
