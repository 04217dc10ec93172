"""gridsort: relation-aware sorting for list views on SQLGlot."""

__version__ = "0.1.0"

from gridsort.core.entity import EntityDef, RelationDef
from gridsort.core.registry import SortFieldRegistry
from gridsort.core.schema_provider import SchemaProvider
from gridsort.sql.record_list import RecordList
from gridsort.sql.sort_applier import SortApplier, SortDirection, SortRequest, ValidatedColumn

__all__ = [
    "EntityDef",
    "Listing",
    "RecordList",
    "RelationDef",
    "SchemaProvider",
    "SortApplier",
    "SortDirection",
    "SortFieldRegistry",
    "SortRequest",
    "ValidatedColumn",
]


def __getattr__(name):  # Lazy import to avoid importing duckdb on package import
    if name == "Listing":
        from gridsort.listing import Listing  # type: ignore
        return Listing
    raise AttributeError(name)
