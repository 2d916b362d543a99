"""Record storage module backed by Neo4j."""
from .models import University
from .neo4j_store import UniversityStore

__all__ = ["University", "UniversityStore"]
