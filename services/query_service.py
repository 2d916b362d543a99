"""Service for browsing and searching university records."""
from typing import List, Optional
from urllib.parse import unquote
from loguru import logger
from config.settings import settings
from exceptions import NotFoundError, ValidationError
from storage.models import University
from storage.neo4j_store import UniversityStore


def decode(value: Optional[str]) -> Optional[str]:
    """Percent-decode free-text input; None passes through."""
    if value is None:
        return None
    return unquote(value)


class UniversityQueryService:
    """Read operations over the university record store."""
    
    def __init__(self, store: UniversityStore):
        """
        Initialize query service.
        
        Args:
            store: University record store
        """
        self.logger = logger.bind(name=self.__class__.__name__)
        self.store = store
    
    def list_countries(self) -> List[str]:
        """All distinct countries, sorted."""
        return sorted(self.store.distinct_values("country"))
    
    def list_provinces(self, country: str) -> List[str]:
        """Distinct non-empty provinces of a country, sorted."""
        country = decode(country)
        provinces = self.store.distinct_values("state_province", {"country": country})
        return sorted(p for p in provinces if p)
    
    def list_universities(
        self,
        country: Optional[str] = None,
        province: Optional[str] = None,
    ) -> List[University]:
        """
        List universities, optionally filtered by country and province.
        
        Args:
            country: Exact country name; omitted means any country
            province: Exact state/province name; omitted means any province
            
        Returns:
            At most settings.query_limit records
        """
        filters = {}
        if country:
            filters["country"] = decode(country)
        if province:
            filters["state_province"] = decode(province)
        
        universities = self.store.find(filters, limit=settings.query_limit)
        self.logger.debug(f"Listed {len(universities)} universities for filters {filters}")
        return universities
    
    def get_university_by_name(self, name: str) -> University:
        """First university with exactly this name."""
        name = decode(name)
        university = self.store.find_one({"name": name})
        if university is None:
            raise NotFoundError("University not found")
        return university
    
    def search_universities(self, query: Optional[str]) -> List[University]:
        """
        Case-insensitive substring search on university names.
        
        Args:
            query: Text to look for; matched literally
            
        Returns:
            At most settings.search_limit records
        """
        if not query:
            raise ValidationError("Search query required")
        
        text = decode(query)
        results = self.store.search_by_name(text, limit=settings.search_limit)
        self.logger.info(f"Search '{text}' matched {len(results)} universities")
        return results
