"""
Ingestion Package

Provides the pipeline that turns uploaded CSV files into store generations.
"""

from src.japanese_properties.ingestion.pipeline import IngestionPipeline, IngestSummary

__all__ = ["IngestionPipeline", "IngestSummary"]
