"""Resolution of dotted relation paths into typed relation hops."""

import logging
from dataclasses import dataclass, field

from gridsort.core.entity import RelationDef
from gridsort.core.registry import split_path
from gridsort.core.schema_provider import SchemaProvider
from gridsort.validation import (
    CyclicPathError,
    PathTooDeepError,
    SchemaInconsistencyError,
    UnknownRelationError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 8


@dataclass(frozen=True)
class RelationHop:
    """One relation traversal from a source entity type to a target type."""

    relation_name: str
    source_type: str
    target_type: str
    relation: RelationDef = field(compare=False)


@dataclass(frozen=True)
class ResolvedPath:
    """A dotted path parsed into relation hops plus the trailing column."""

    path: str
    root_type: str
    hops: tuple[RelationHop, ...]
    column: str

    @property
    def target_type(self) -> str:
        """Entity type that stores the column."""
        return self.hops[-1].target_type if self.hops else self.root_type


def resolve_path(
    dotted_path: str,
    root_type: str,
    provider: SchemaProvider,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ResolvedPath:
    """Resolve a dotted path against the schema.

    Every segment but the last names a relation on the current entity type;
    the last segment is a column on the final entity type.

    Args:
        dotted_path: Path such as "Cheerleader.Hat.Colour"
        root_type: Entity type the path starts from
        provider: Schema provider
        max_depth: Maximum number of relation hops

    Returns:
        Resolved path with hops in path order

    Raises:
        EmptyPathError: If the path or a segment is empty
        UnknownRelationError: If a segment names an undeclared relation
        CyclicPathError: If a (entity type, relation) pair repeats
        PathTooDeepError: If the path has more than max_depth hops
        SchemaInconsistencyError: If an entity on the path is not declared
    """
    segments = split_path(dotted_path)
    relation_names, column = segments[:-1], segments[-1]

    if len(relation_names) > max_depth:
        raise PathTooDeepError(dotted_path, max_depth)

    hops: list[RelationHop] = []
    visited: set[tuple[str, str]] = set()
    current = root_type

    for relation_name in relation_names:
        if not provider.has_entity(current):
            raise SchemaInconsistencyError(f"Entity '{current}' on sort path {dotted_path!r} is not declared")

        relation = provider.relations(current).get(relation_name)
        if relation is None:
            raise UnknownRelationError(relation_name, current)

        key = (current, relation_name)
        if key in visited:
            raise CyclicPathError(dotted_path, current, relation_name)
        visited.add(key)

        hops.append(
            RelationHop(
                relation_name=relation_name,
                source_type=current,
                target_type=relation.target,
                relation=relation,
            )
        )
        current = relation.target

    logger.debug("Resolved sort path %r from %s into %d hop(s)", dotted_path, root_type, len(hops))
    return ResolvedPath(path=dotted_path, root_type=root_type, hops=tuple(hops), column=column)
