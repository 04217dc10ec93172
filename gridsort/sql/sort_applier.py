"""Validation and application of sort requests to record lists."""

import logging
from dataclasses import dataclass
from enum import Enum

from gridsort.core.join_plan import JoinPlan, JoinPlanBuilder
from gridsort.core.path_resolver import DEFAULT_MAX_DEPTH, resolve_path
from gridsort.core.registry import SortFieldRegistry
from gridsort.core.schema_provider import SchemaProvider
from gridsort.sql.record_list import RecordList, join_condition, quoted_column
from gridsort.validation import (
    InvalidSortColumnError,
    InvalidSortDirectionError,
    SortConfigurationError,
    SortStateError,
)

logger = logging.getLogger(__name__)


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: "str | SortDirection") -> "SortDirection":
        """Parse a direction case-insensitively.

        Raises:
            InvalidSortDirectionError: If the value is neither asc nor desc
        """
        if isinstance(value, SortDirection):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidSortDirectionError(str(value)) from None


@dataclass(frozen=True)
class SortRequest:
    """Sort state supplied by the list view: the requested column and direction."""

    column: str | None = None
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def create(cls, column: str | None, direction: "str | SortDirection" = SortDirection.ASC) -> "SortRequest":
        return cls(column=column, direction=SortDirection.parse(direction))


@dataclass(frozen=True)
class ValidatedColumn:
    """A sort column that passed registry validation."""

    requested: str
    path: str


class SortStatus(str, Enum):
    UNVALIDATED = "unvalidated"
    VALIDATED = "validated"
    APPLIED = "applied"
    REJECTED = "rejected"


class SortApplier:
    """Validates sort columns against a registry and applies them to record lists."""

    def __init__(
        self,
        registry: SortFieldRegistry,
        provider: SchemaProvider,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.registry = registry
        self.provider = provider
        self.max_depth = max_depth
        self.builder = JoinPlanBuilder(provider)

    def register_sortable(self, label: str, dotted_path: str) -> None:
        self.registry.register(label, dotted_path)

    def validate(self, sort_column: str) -> ValidatedColumn:
        """Look up a requested sort column in the registry.

        Raises:
            InvalidSortColumnError: If the column is not registered
        """
        path = self.registry.resolve_path(sort_column)
        if path is None:
            raise InvalidSortColumnError(sort_column)
        return ValidatedColumn(requested=sort_column, path=path)

    def plan(self, root_type: str, column: ValidatedColumn) -> JoinPlan:
        """Resolve a validated column into the join plan for ``root_type``."""
        resolved = resolve_path(column.path, root_type, self.provider, self.max_depth)
        return self.builder.build(root_type, resolved)

    def apply(
        self,
        records: RecordList,
        column: ValidatedColumn,
        direction: "str | SortDirection" = SortDirection.ASC,
    ) -> RecordList:
        """Sort a record list by a validated column.

        Args:
            records: List to sort (left unmodified)
            column: Column returned by :meth:`validate`
            direction: "asc" or "desc", case-insensitive

        Returns:
            New record list with the joins and ORDER BY applied

        Raises:
            SortStateError: If ``column`` did not come from :meth:`validate` on this applier
            SortConfigurationError: If the path cannot be resolved or its joins clash with the list's joins
        """
        if not isinstance(column, ValidatedColumn):
            raise SortStateError(f"Sort column {column!r} must be validated before it is applied")
        if self.registry.resolve_path(column.requested) != column.path:
            raise SortStateError(f"Sort column {column.requested!r} was not validated against this registry")

        direction = SortDirection.parse(direction)
        plan = self.plan(records.entity_type, column)

        query = records.query
        for clause in plan.clauses:
            on_expr = join_condition(
                clause.alias, clause.on_target_column, clause.on_source_alias, clause.on_source_column
            )
            try:
                query.add_left_join(clause.table, clause.alias, on_expr)
            except ValueError as e:
                raise SortConfigurationError(f"Sort path {column.path!r} clashes with an existing join: {e}") from e
        # A new sort replaces the list's previous ordering
        query.add_order_by(quoted_column(plan.column.column, plan.column.alias), direction.value, append=False)

        logger.debug("Sorted %s by %s %s", records.entity_type, plan.column, direction.value)
        return records.with_query(query)


class SortOperation:
    """One sort resolution moving through validation to application.

    UNVALIDATED -> VALIDATED -> APPLIED, or UNVALIDATED -> REJECTED.
    """

    def __init__(self, applier: SortApplier, sort_column: str):
        self.applier = applier
        self.sort_column = sort_column
        self.status = SortStatus.UNVALIDATED
        self.validated: ValidatedColumn | None = None

    def validate(self) -> ValidatedColumn:
        if self.status != SortStatus.UNVALIDATED:
            raise SortStateError(f"Sort operation is already {self.status.value}")
        try:
            self.validated = self.applier.validate(self.sort_column)
        except InvalidSortColumnError:
            self.status = SortStatus.REJECTED
            raise
        self.status = SortStatus.VALIDATED
        return self.validated

    def apply(self, records: RecordList, direction: "str | SortDirection" = SortDirection.ASC) -> RecordList:
        if self.status != SortStatus.VALIDATED:
            raise SortStateError(f"Cannot apply a sort operation that is {self.status.value}")
        sorted_records = self.applier.apply(records, self.validated, direction)
        self.status = SortStatus.APPLIED
        return sorted_records
