"""Service for the one-time dataset import."""
from loguru import logger
from config.settings import settings
from exceptions import DatasetError
from ingestion.dataset_loader import DatasetLoader
from storage.neo4j_store import UniversityStore


class SeedService:
    """
    Populates an empty store from the dataset: load -> insert in one transaction.
    """
    
    def __init__(self, store: UniversityStore, loader: DatasetLoader = None):
        """
        Initialize seed service.
        
        Args:
            store: University record store
            loader: Dataset loader, defaults to one built from settings
        """
        self.logger = logger.bind(name=self.__class__.__name__)
        self.store = store
        self.loader = loader or DatasetLoader()
    
    def ensure_seeded(self) -> int:
        """
        Import the dataset unless the store already holds records.
        
        Returns:
            Number of records inserted (0 when skipped or the dataset is unavailable)
        """
        existing = self.store.count()
        if existing > 0:
            self.logger.info(f"Database already has {existing} universities")
            return 0
        
        try:
            universities = self.loader.load()
        except DatasetError as e:
            self.logger.error(f"Error importing data: {e}")
            return 0
        
        self.logger.info(f"Importing {len(universities)} universities...")
        inserted = self.store.insert_many(universities, batch_size=settings.seed_batch_size)
        
        self.logger.info(f"Successfully imported {inserted} universities")
        return inserted
