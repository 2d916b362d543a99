"""Dataset ingestion module."""
from .dataset_loader import DatasetLoader

__all__ = ["DatasetLoader"]
