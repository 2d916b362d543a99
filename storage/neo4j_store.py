"""Neo4j record store for university records."""
from typing import Any, Dict, Iterable, List, Optional, Tuple
from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError
from loguru import logger
from config.settings import settings
from exceptions import StoreError
from .models import University


class UniversityStore:
    """
    Manages the :University nodes in Neo4j.

    Offers count / distinct / group-count / find primitives over the flat
    record. Filters are dicts of field -> value; a value of None matches
    records where the field is absent.
    """

    LABEL = "University"
    FIELDS = ("name", "country", "state_province", "domains", "web_pages", "alpha_two_code")
    INDEXED_FIELDS = ("name", "country", "state_province")

    def __init__(self, driver=None, database: Optional[str] = None):
        """
        Initialize Neo4j connection.

        Args:
            driver: Existing driver to use instead of creating one from settings
            database: Database name, defaults to settings.neo4j_database
        """
        self.logger = logger.bind(name=self.__class__.__name__)
        self.database = database or settings.neo4j_database
        self.driver = driver or GraphDatabase.driver(
            settings.neo4j_uri,
            auth=(settings.neo4j_user, settings.neo4j_password)
        )

    @classmethod
    def _field(cls, field: str) -> str:
        """Validate a field name before it is interpolated into Cypher."""
        if field not in cls.FIELDS:
            raise ValueError(f"Unknown university field: {field}")
        return field

    @classmethod
    def _where(cls, filters: Optional[Dict[str, Optional[str]]]) -> Tuple[str, Dict[str, Any]]:
        """Build a WHERE clause and its parameters from equality filters."""
        if not filters:
            return "", {}

        clauses = []
        params = {}
        for index, (field, value) in enumerate(filters.items()):
            prop = cls._field(field)
            if value is None:
                clauses.append(f"u.{prop} IS NULL")
            else:
                param_key = f"f{index}"
                clauses.append(f"u.{prop} = ${param_key}")
                params[param_key] = value

        return "WHERE " + " AND ".join(clauses), params

    def _run(self, query: str, **params) -> List[Dict[str, Any]]:
        """Run a query in a fresh session and return plain records."""
        try:
            with self.driver.session(database=self.database) as session:
                result = session.run(query, **params)
                return [record.data() for record in result]
        except (Neo4jError, DriverError) as e:
            self.logger.error(f"Neo4j query failed: {e}")
            raise StoreError("Record store query failed") from e

    def verify_connectivity(self):
        """Fail fast if the database cannot be reached."""
        try:
            self.driver.verify_connectivity()
        except (Neo4jError, DriverError) as e:
            self.logger.error(f"Cannot reach Neo4j at {settings.neo4j_uri}: {e}")
            raise StoreError("Record store unavailable") from e
        self.logger.info("Connected to Neo4j")

    def ensure_indexes(self):
        """Create range indexes on the filtered fields."""
        for field in self.INDEXED_FIELDS:
            self._run(
                f"CREATE INDEX university_{field} IF NOT EXISTS "
                f"FOR (u:{self.LABEL}) ON (u.{field})"
            )
        self.logger.info("Neo4j indexes ensured")

    def count(self, filters: Optional[Dict[str, Optional[str]]] = None) -> int:
        """Count records matching the filters."""
        where, params = self._where(filters)
        rows = self._run(f"MATCH (u:{self.LABEL}) {where} RETURN count(u) AS count", **params)
        return rows[0]["count"] if rows else 0

    def count_with_web_pages(self) -> int:
        """Count records that list at least one web page."""
        rows = self._run(
            f"MATCH (u:{self.LABEL}) WHERE size(coalesce(u.web_pages, [])) > 0 "
            "RETURN count(u) AS count"
        )
        return rows[0]["count"] if rows else 0

    def distinct_values(
        self,
        field: str,
        filters: Optional[Dict[str, Optional[str]]] = None,
    ) -> List[str]:
        """Distinct non-null values of a field across matching records."""
        prop = self._field(field)
        where, params = self._where(filters)
        where = f"{where} AND" if where else "WHERE"
        rows = self._run(
            f"MATCH (u:{self.LABEL}) {where} u.{prop} IS NOT NULL "
            f"RETURN DISTINCT u.{prop} AS value",
            **params,
        )
        return [row["value"] for row in rows]

    def group_counts(
        self,
        field: str,
        filters: Optional[Dict[str, Optional[str]]] = None,
        limit: Optional[int] = None,
        skip_null: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Count records per value of a field.

        Returns:
            List of {"key", "count"} dicts, count descending then key ascending
        """
        prop = self._field(field)
        where, params = self._where(filters)
        having = "WHERE key IS NOT NULL" if skip_null else ""
        limit_clause = ""
        if limit is not None:
            limit_clause = "LIMIT $limit"
            params["limit"] = limit

        query = f"""
        MATCH (u:{self.LABEL}) {where}
        WITH u.{prop} AS key, count(u) AS count
        {having}
        RETURN key, count
        ORDER BY count DESC, key ASC
        {limit_clause}
        """
        return self._run(query, **params)

    def find(
        self,
        filters: Optional[Dict[str, Optional[str]]] = None,
        limit: Optional[int] = None,
    ) -> List[University]:
        """Records matching the filters, in store order."""
        where, params = self._where(filters)
        limit_clause = ""
        if limit is not None:
            limit_clause = "LIMIT $limit"
            params["limit"] = limit
        rows = self._run(
            f"MATCH (u:{self.LABEL}) {where} RETURN properties(u) AS props {limit_clause}",
            **params,
        )
        return [University.model_validate(row["props"]) for row in rows]

    def find_one(self, filters: Dict[str, Optional[str]]) -> Optional[University]:
        """First record matching the filters, or None."""
        records = self.find(filters, limit=1)
        return records[0] if records else None

    def search_by_name(self, text: str, limit: int) -> List[University]:
        """Records whose name contains text, ignoring case."""
        rows = self._run(
            f"MATCH (u:{self.LABEL}) WHERE toLower(u.name) CONTAINS toLower($text) "
            "RETURN properties(u) AS props LIMIT $limit",
            text=text,
            limit=limit,
        )
        return [University.model_validate(row["props"]) for row in rows]

    def insert_many(self, records: Iterable[University], batch_size: Optional[int] = None) -> int:
        """
        Create one node per record, all batches in a single transaction.

        Args:
            records: Records to insert
            batch_size: Records per UNWIND statement; None sends them all at once

        Returns:
            Number of nodes created; a failure rolls back every batch
        """
        rows = [record.to_properties() for record in records]
        if not rows:
            return 0

        step = batch_size if batch_size and batch_size > 0 else len(rows)
        query = f"UNWIND $batch AS props CREATE (u:{self.LABEL}) SET u = props"
        try:
            with self.driver.session(database=self.database) as session:
                with session.begin_transaction() as tx:
                    for start in range(0, len(rows), step):
                        tx.run(query, batch=rows[start:start + step])
                    tx.commit()
        except (Neo4jError, DriverError) as e:
            self.logger.error(f"Bulk insert rolled back: {e}")
            raise StoreError("Record store insert failed") from e

        self.logger.debug(f"Inserted {len(rows)} university nodes")
        return len(rows)

    def close(self):
        """Close Neo4j driver connection."""
        self.driver.close()
        self.logger.info("Neo4j connection closed")
