"""Loading the world universities dataset."""
import json
from pathlib import Path
from typing import List, Optional
import requests
from loguru import logger
from pydantic import ValidationError as RecordValidationError
from config.settings import settings
from exceptions import DatasetError
from storage.models import University


class DatasetLoader:
    """
    Reads the university dataset from a local JSON file.
    Downloads and caches it first when the file is missing and a URL is configured.
    """
    
    def __init__(self, path: Optional[Path] = None, url: Optional[str] = None):
        """
        Initialize dataset loader.
        
        Args:
            path: Local JSON file, defaults to settings.dataset_path
            url: Download source, defaults to settings.dataset_url
        """
        self.logger = logger.bind(name=self.__class__.__name__)
        self.path = Path(path or settings.dataset_path)
        self.url = settings.dataset_url if url is None else url
    
    @staticmethod
    def _parse(raw: str) -> list:
        """Decode the payload, which must be a JSON array."""
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DatasetError(f"Dataset is not valid JSON: {e}") from e
        
        if not isinstance(entries, list):
            raise DatasetError("Dataset must be a JSON array of universities")
        return entries
    
    def _download(self) -> list:
        """Fetch the dataset; it is cached at self.path only once it parses."""
        self.logger.info(f"Downloading dataset from {self.url}")
        try:
            response = requests.get(self.url, timeout=settings.dataset_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DatasetError(f"Failed to download dataset: {e}") from e
        
        entries = self._parse(response.text)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(response.text, encoding="utf-8")
        return entries
    
    def _read_entries(self) -> list:
        if self.path.exists():
            return self._parse(self.path.read_text(encoding="utf-8"))
        if self.url:
            return self._download()
        raise DatasetError(f"Dataset not found at {self.path} and no download URL configured")
    
    def load(self) -> List[University]:
        """
        Parse the dataset into university records.
        
        Returns:
            Valid records in file order; invalid entries are skipped
        """
        entries = self._read_entries()
        
        universities = []
        skipped = 0
        for entry in entries:
            try:
                universities.append(University.model_validate(entry))
            except RecordValidationError as e:
                skipped += 1
                self.logger.debug(f"Skipping invalid entry {entry!r}: {e}")
        
        if skipped:
            self.logger.warning(f"Skipped {skipped} invalid dataset entries")
        self.logger.info(f"Loaded {len(universities)} universities from {self.path}")
        return universities
