"""
Japanese real estate listings: CSV ingestion, in-memory store and REST API.
"""
