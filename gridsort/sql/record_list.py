"""Immutable record lists backed by SQLGlot SELECT statements."""

from typing import Any

from sqlglot import exp, select

from gridsort.core.schema_provider import SchemaProvider


def quoted_table(name: str, alias: str | None = None) -> exp.Table:
    """Build a quoted table reference, optionally aliased."""
    table = exp.Table(this=exp.to_identifier(name, quoted=True))
    if alias:
        table.set("alias", exp.TableAlias(this=exp.to_identifier(alias, quoted=True)))
    return table


def quoted_column(column: str, table: str) -> exp.Column:
    return exp.column(column, table=table, quoted=True)


def join_condition(target_alias: str, target_column: str, source_alias: str, source_column: str) -> exp.EQ:
    """Equality condition ``target_alias.target_column = source_alias.source_column``."""
    return exp.EQ(
        this=quoted_column(target_column, target_alias),
        expression=quoted_column(source_column, source_alias),
    )


class RecordQuery:
    """Query builder for a record list.

    Mutating methods rebind the wrapped statement to a modified copy, so a
    clone never shares state with the query it was cloned from.
    """

    def __init__(self, statement: exp.Select, join_keys: list[tuple[str, str | None, str]] | None = None):
        self._statement = statement
        self._join_keys = list(join_keys or [])

    @classmethod
    def for_entity(cls, provider: SchemaProvider, entity_type: str) -> "RecordQuery":
        """Select the records of an entity type.

        Reads from the hierarchy's base table and LEFT JOINs each further table
        of the hierarchy on the shared primary key. Subclass lists filter on
        the discriminator column when the hierarchy declares one.
        """
        schema = provider.entity_schema(entity_type)
        base = schema.base_table
        columns: list[exp.Expression] = [exp.Column(this=exp.Star(), table=exp.to_identifier(base, quoted=True))]
        for column, owner in schema.field_owner.items():
            table = schema.owning_table_per_class[owner]
            if table != base:
                columns.append(quoted_column(column, table))

        query = cls(select(*columns).from_(quoted_table(base)))
        for table in schema.tables()[1:]:
            query.add_left_join(
                table,
                None,
                join_condition(table, schema.primary_key, base, schema.primary_key),
            )

        if schema.is_subclass and schema.discriminator:
            classes = provider.descendant_types(entity_type)
            query._statement = query._statement.where(
                exp.In(
                    this=quoted_column(schema.discriminator, base),
                    expressions=[exp.Literal.string(name) for name in classes],
                )
            )
        return query

    @property
    def statement(self) -> exp.Select:
        return self._statement

    def add_left_join(self, table: str, alias: str | None, on_expr: exp.Expression) -> None:
        """Add a LEFT JOIN; an exact duplicate of an existing join is a no-op.

        Raises:
            ValueError: If the alias is already joined with a different table or condition
        """
        key = (table, alias, on_expr.sql())
        if key in self._join_keys:
            return
        name = alias or table
        for joined_table, joined_alias, joined_on in self._join_keys:
            if (joined_alias or joined_table) == name:
                raise ValueError(
                    f"Alias {name!r} is already joined ON {joined_on}, cannot join it again ON {key[2]}"
                )
        self._join_keys.append(key)
        self._statement = self._statement.join(quoted_table(table, alias), on=on_expr, join_type="left")

    def add_order_by(self, qualified_column: exp.Column, direction: str, append: bool = True) -> None:
        """Add an ORDER BY term; direction must be "asc" or "desc".

        With ``append=False`` the term replaces any existing ordering.
        """
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction {direction!r}")
        ordered = exp.Ordered(this=qualified_column, desc=direction == "desc")
        self._statement = self._statement.order_by(ordered, append=append)

    def project(self, *columns: exp.Expression) -> "RecordQuery":
        """Copy of this query selecting only ``columns``."""
        statement = self._statement.copy()
        statement.set("expressions", list(columns))
        return RecordQuery(statement, self._join_keys)

    def clone_without_mutating_original(self) -> "RecordQuery":
        return RecordQuery(self._statement.copy(), self._join_keys)

    def sql(self, dialect: str = "duckdb", pretty: bool = False) -> str:
        return self._statement.sql(dialect=dialect, pretty=pretty)


class RecordList:
    """An immutable list of records of one entity type.

    Sorting never modifies a list: it produces a new list wrapping a modified
    copy of the query, so the original keeps its own iteration order.
    """

    def __init__(
        self,
        provider: SchemaProvider,
        entity_type: str,
        query: RecordQuery | None = None,
        conn: Any = None,
        dialect: str = "duckdb",
    ):
        self.provider = provider
        self.entity_type = entity_type
        self.conn = conn
        self.dialect = dialect
        self._query = query or RecordQuery.for_entity(provider, entity_type)

    @property
    def query(self) -> RecordQuery:
        """A private copy of this list's query."""
        return self._query.clone_without_mutating_original()

    def with_query(self, query: RecordQuery) -> "RecordList":
        return RecordList(self.provider, self.entity_type, query=query, conn=self.conn, dialect=self.dialect)

    def sql(self, pretty: bool = False) -> str:
        return self._query.sql(dialect=self.dialect, pretty=pretty)

    def rows(self) -> list[dict[str, Any]]:
        """Execute the list query and return rows keyed by column name."""
        result = self._execute(self.sql())
        columns = [col[0] for col in result.description]
        return [dict(zip(columns, row)) for row in result.fetchall()]

    def column(self, name: str) -> list[Any]:
        """Values of one column of the listed entity, in list order."""
        table = self.provider.column_table(self.entity_type, name)
        projected = self._query.project(quoted_column(name, table))
        result = self._execute(projected.sql(dialect=self.dialect))
        return [row[0] for row in result.fetchall()]

    def _execute(self, sql: str) -> Any:
        if self.conn is None:
            raise RuntimeError(f"Record list of {self.entity_type} has no database connection")
        return self.conn.execute(sql)

    def __repr__(self) -> str:
        return f"RecordList({self.entity_type!r}, sql={self.sql()!r})"
