"""Listing main API."""

import logging

import duckdb

from gridsort.config import GridsortConfig, build_connection_string
from gridsort.core.path_resolver import DEFAULT_MAX_DEPTH
from gridsort.core.registry import SortFieldRegistry
from gridsort.core.schema_provider import SchemaProvider
from gridsort.headers import HeaderColumn, SortableHeader
from gridsort.sql.record_list import RecordList
from gridsort.sql.sort_applier import SortApplier, SortDirection, SortRequest

logger = logging.getLogger(__name__)


class Listing:
    """A sortable list view over one entity type.

    Provides a high-level API for sorting records by registered fields.
    """

    def __init__(
        self,
        provider: SchemaProvider,
        entity: str,
        sortable: dict[str, str] | None = None,
        columns: dict[str, str] | None = None,
        connection: str = "duckdb:///:memory:",
        dialect: str = "duckdb",
        max_path_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """Initialize a listing.

        Args:
            provider: Schema provider describing the entities
            entity: Entity type listed
            sortable: Sort label -> dotted relation path
            columns: Displayed column -> header title
            connection: Database connection string (default: in-memory DuckDB)
            dialect: SQL dialect for query generation (default: duckdb)
            max_path_depth: Maximum relation hops per sort path
        """
        self.provider = provider
        self.entity = entity
        self.dialect = dialect
        self.registry = SortFieldRegistry(sortable)
        self.applier = SortApplier(self.registry, provider, max_depth=max_path_depth)
        self.header = SortableHeader(self.applier, columns)

        if connection.startswith("duckdb://"):
            db_path = connection.replace("duckdb:///", "") or ":memory:"
            self.conn = duckdb.connect(db_path)
        else:
            raise NotImplementedError(f"Connection type {connection} not yet supported")

    @classmethod
    def from_config(cls, config: GridsortConfig, name: str) -> "Listing":
        """Build a listing declared in a configuration.

        Raises:
            KeyError: If the listing is not declared
            EntityValidationError: If the entity definitions are inconsistent
        """
        listing = config.get_listing(name)
        provider = SchemaProvider.from_entities(config.entities)
        logger.info(f"Loaded listing {name} over {listing.entity} with {len(listing.sortable)} sortable field(s)")
        return cls(
            provider,
            listing.entity,
            sortable=listing.sortable,
            columns=listing.columns,
            connection=build_connection_string(config),
            max_path_depth=config.max_path_depth,
        )

    def records(self) -> RecordList:
        """The unsorted records of the listed entity."""
        return RecordList(self.provider, self.entity, conn=self.conn, dialect=self.dialect)

    def sort(self, column: str | None, direction: str | SortDirection = SortDirection.ASC) -> RecordList:
        """Sort the listing by a registered column.

        Raises:
            InvalidSortColumnError: If the column is not registered
            InvalidSortDirectionError: If the direction is neither asc nor desc
        """
        request = SortRequest.create(column, direction)
        return self.header.get_manipulated_data(self.records(), request)

    def compile(self, column: str | None, direction: str | SortDirection = SortDirection.ASC) -> str:
        """Compile a sort to SQL without executing."""
        return self.sort(column, direction).sql(pretty=True)

    def headers(
        self, column: str | None = None, direction: str | SortDirection = SortDirection.ASC
    ) -> list[HeaderColumn]:
        """Header state of the listing's columns for the given sort."""
        return self.header.header_columns(SortRequest.create(column, direction))

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
