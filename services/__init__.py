"""Service layer for coordinating components."""
from .query_service import UniversityQueryService
from .analytics_service import AnalyticsService
from .seed_service import SeedService

__all__ = ["UniversityQueryService", "AnalyticsService", "SeedService"]
