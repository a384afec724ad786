"""
FastAPI REST API for the Japanese Properties service

Provides REST endpoints to:
- Upload a CSV of property listings (replaces all data)
- List every property
- Fetch a single property by id
- Health checks
"""
