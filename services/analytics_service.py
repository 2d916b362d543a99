"""Service for aggregate statistics over university records."""
from typing import Dict, List, Optional
from loguru import logger
from config.settings import settings
from exceptions import ValidationError
from storage.neo4j_store import UniversityStore
from .query_service import decode


class AnalyticsService:
    """
    Grouped counts and summaries computed at query time.
    Nothing is cached; every call queries the store.
    """
    
    def __init__(self, store: UniversityStore):
        """
        Initialize analytics service.
        
        Args:
            store: University record store
        """
        self.logger = logger.bind(name=self.__class__.__name__)
        self.store = store
    
    def get_overview_stats(self) -> Dict:
        """Total records, distinct countries and distinct named provinces."""
        provinces = [p for p in self.store.distinct_values("state_province") if p]
        return {
            "totalUniversities": self.store.count(),
            "totalCountries": len(self.store.distinct_values("country")),
            "totalProvinces": len(provinces),
        }
    
    def get_counts_by_country(self, limit: Optional[int] = None) -> List[Dict]:
        """
        Universities per country, largest first.
        
        Args:
            limit: Maximum number of countries; None returns all
        """
        if limit is not None and limit <= 0:
            raise ValidationError("Limit must be a positive integer")
        
        rows = self.store.group_counts("country", limit=limit)
        return [{"country": row["key"], "count": row["count"]} for row in rows]
    
    def _province_counts(self, country: str) -> List[Dict]:
        rows = self.store.group_counts(
            "state_province", {"country": country}, skip_null=True
        )
        return [{"province": row["key"], "count": row["count"]} for row in rows]
    
    def get_country_detail(self, country: str) -> Dict:
        """Total universities in a country and their split by province."""
        country = decode(country)
        return {
            "country": country,
            "total": self.store.count({"country": country}),
            "provinces": self._province_counts(country),
        }
    
    def get_province_breakdown(self, country: str) -> Dict:
        """Province counts plus the country's universities for drill-down views."""
        country = decode(country)
        return {
            "country": country,
            "provinces": self._province_counts(country),
            "withoutProvince": self.store.count({"country": country, "state_province": None}),
            "totalInCountry": self.store.count({"country": country}),
            "universities": self.store.find({"country": country}, limit=settings.query_limit),
        }
    
    def get_country_distribution(self) -> Dict:
        """Per-country counts with min/max/average across countries."""
        countries = self.get_counts_by_country()
        counts = [c["count"] for c in countries]
        
        stats = {
            "totalCountries": len(counts),
            "avgPerCountry": round(sum(counts) / len(counts), 2) if counts else 0,
            "maxCount": max(counts) if counts else 0,
            "minCount": min(counts) if counts else 0,
        }
        return {"countries": countries, "stats": stats}
    
    def get_website_presence(self) -> Dict:
        """
        Records with and without a listed web page.
        
        Two roundings of the same share are returned: "percentage" is a whole
        number for the dashboard, "percentageWithWebsite" a two-decimal string
        for the summary view.
        """
        total = self.store.count()
        with_website = self.store.count_with_web_pages()
        without_website = total - with_website
        
        share = (with_website / total) * 100 if total else 0.0
        # round() is half-to-even; the dashboard figure rounds halves up
        percentage = int(share + 0.5)
        
        return {
            "withWebsite": with_website,
            "withoutWebsite": without_website,
            "total": total,
            "percentage": percentage,
            "percentageWithWebsite": f"{share:.2f}",
        }
