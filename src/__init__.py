"""
Japanese Properties API - Core Package

This package contains the CSV ingestion pipeline, the in-memory property store
and the REST API that serves uploaded listings.
"""

__version__ = "0.1.0"
