"""Join plan construction for relation sort paths."""

import logging
from dataclasses import dataclass

from gridsort.core.inheritance import EntitySchema
from gridsort.core.path_resolver import RelationHop, ResolvedPath
from gridsort.core.schema_provider import SchemaProvider
from gridsort.validation import SchemaInconsistencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinClause:
    """A LEFT JOIN of ``table`` AS ``alias``.

    The join condition is ``alias.on_target_column = on_source_alias.on_source_column``.
    """

    table: str
    alias: str
    on_source_alias: str
    on_source_column: str
    on_target_column: str

    def __str__(self) -> str:
        return (
            f'LEFT JOIN "{self.table}" AS "{self.alias}" '
            f'ON "{self.alias}"."{self.on_target_column}" = "{self.on_source_alias}"."{self.on_source_column}"'
        )


@dataclass(frozen=True)
class ColumnRef:
    """A column qualified by the table alias that stores it."""

    alias: str
    column: str

    def __str__(self) -> str:
        return f'"{self.alias}"."{self.column}"'


@dataclass(frozen=True)
class JoinPlan:
    """Ordered, deduplicated joins reaching a sort column."""

    clauses: tuple[JoinClause, ...]
    column: ColumnRef

    def aliases(self) -> list[str]:
        return [clause.alias for clause in self.clauses]

    def __str__(self) -> str:
        lines = ["Join Plan"]
        for clause in self.clauses:
            lines.append(f"  {clause}")
        lines.append(f"  ORDER BY {self.column}")
        return "\n".join(lines)


def alias_prefix(relation_names: list[str]) -> str:
    """Alias prefix for a chain of relations, e.g. ["Cheerleader", "Hat"] -> "cheerleader_hat"."""
    return "_".join(name.lower() for name in relation_names)


class JoinPlanBuilder:
    """Builds join plans from resolved relation paths.

    Tables of the root entity are referenced by their own names. Every table
    joined for a hop is aliased ``<prefix>_<table>``, where the prefix names
    the relations traversed so far, so the same prefix always yields the same
    alias. Relation names containing underscores can collide: a relation
    named ``A_B`` and the path ``A.B`` share the prefix ``a_b``, and stacking
    both sorts on one list raises ``SortConfigurationError``.
    """

    def __init__(self, provider: SchemaProvider):
        self.provider = provider

    def build(self, root_type: str, resolved: ResolvedPath) -> JoinPlan:
        """Build the join plan for a resolved path.

        Args:
            root_type: Entity type listed by the query
            resolved: Path resolved from ``root_type``

        Returns:
            Join plan with the qualified sort column

        Raises:
            SchemaInconsistencyError: If an entity on the path has no table mapping
        """
        schema = self._schema(root_type, resolved.path)
        aliases = {table: table for table in schema.tables()}

        clauses: list[JoinClause] = []
        emitted: set[tuple[str, str]] = set()
        relation_names: list[str] = []

        for hop in resolved.hops:
            target = self._schema(hop.target_type, resolved.path)
            relation_names.append(hop.relation_name)
            prefix = alias_prefix(relation_names)
            target_aliases = {table: f"{prefix}_{table}" for table in target.tables()}

            for clause in self._hop_clauses(hop, schema, aliases, target, target_aliases, prefix):
                key = (clause.table, clause.alias)
                if key in emitted:
                    logger.debug("Skipping duplicate join %s AS %s", clause.table, clause.alias)
                    continue
                emitted.add(key)
                clauses.append(clause)

            schema, aliases = target, target_aliases

        column_table = self.provider.column_table(schema.type_name, resolved.column)
        plan = JoinPlan(clauses=tuple(clauses), column=ColumnRef(aliases[column_table], resolved.column))
        logger.debug("Built join plan for %r with %d join(s)", resolved.path, len(plan.clauses))
        return plan

    def _schema(self, entity_type: str, path: str) -> EntitySchema:
        if not self.provider.has_entity(entity_type):
            raise SchemaInconsistencyError(f"Entity '{entity_type}' on sort path {path!r} has no table mapping")
        schema = self.provider.entity_schema(entity_type)
        if not schema.base_table:
            raise SchemaInconsistencyError(f"Entity '{entity_type}' on sort path {path!r} has no base table")
        return schema

    def _hop_clauses(
        self,
        hop: RelationHop,
        source: EntitySchema,
        source_aliases: dict[str, str],
        target: EntitySchema,
        target_aliases: dict[str, str],
        prefix: str,
    ) -> list[JoinClause]:
        """Joins for one hop: the target's base table first, then its subclass tables."""
        relation = hop.relation
        owner = source.relation_owner[hop.relation_name]
        source_alias = source_aliases[source.owning_table_per_class[owner]]
        base_alias = target_aliases[target.base_table]

        if relation.kind == "has_one":
            clauses = [
                JoinClause(
                    table=target.base_table,
                    alias=base_alias,
                    on_source_alias=source_alias,
                    on_source_column=relation.source_column,
                    on_target_column=target.primary_key,
                )
            ]
        elif relation.kind == "has_many":
            clauses = [
                JoinClause(
                    table=target.base_table,
                    alias=base_alias,
                    on_source_alias=source_alias,
                    on_source_column=source.primary_key,
                    on_target_column=relation.foreign_key,
                )
            ]
        else:
            pivot_alias = f"{prefix}_{relation.join_table}"
            clauses = [
                JoinClause(
                    table=relation.join_table,
                    alias=pivot_alias,
                    on_source_alias=source_alias,
                    on_source_column=source.primary_key,
                    on_target_column=relation.foreign_key,
                ),
                JoinClause(
                    table=target.base_table,
                    alias=base_alias,
                    on_source_alias=pivot_alias,
                    on_source_column=relation.target_key,
                    on_target_column=target.primary_key,
                ),
            ]

        # Subclass tables join on the shared key of their own base alias
        for table in target.tables()[1:]:
            clauses.append(
                JoinClause(
                    table=table,
                    alias=target_aliases[table],
                    on_source_alias=base_alias,
                    on_source_column=target.primary_key,
                    on_target_column=target.primary_key,
                )
            )

        return clauses
