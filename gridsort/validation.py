"""Validation and error handling for relation-aware sorting."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridsort.core.entity import EntityDef
    from gridsort.core.registry import SortFieldRegistry
    from gridsort.core.schema_provider import SchemaProvider


class SortValidationError(Exception):
    """Base class for sort resolution failures."""

    pass


class InvalidSortColumnError(SortValidationError):
    """Raised when a requested sort column is not registered.

    This is user input, so callers can reject the request without side effects.
    """

    def __init__(self, sort_column: str):
        self.sort_column = sort_column
        super().__init__(f"Invalid SortColumn: {sort_column}")


class InvalidSortDirectionError(SortValidationError):
    """Raised when a sort direction is neither asc nor desc."""

    def __init__(self, direction: str):
        self.direction = direction
        super().__init__(f"Invalid SortDirection: {direction}")


class SortConfigurationError(SortValidationError):
    """Raised when the sort registry and the schema disagree."""

    pass


class EmptyPathError(SortConfigurationError):
    """Raised when a dotted path is empty or has an empty segment."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Invalid sort path {path!r}: path and its segments must be non-empty")


class UnknownRelationError(SortConfigurationError):
    """Raised when a path segment names a relation the entity does not declare."""

    def __init__(self, relation_name: str, entity_type: str):
        self.relation_name = relation_name
        self.entity_type = entity_type
        super().__init__(f"Relation '{relation_name}' not found on entity '{entity_type}'")


class SchemaInconsistencyError(SortConfigurationError):
    """Raised when a relation targets an entity without a table mapping."""

    pass


class CyclicPathError(SortConfigurationError):
    """Raised when a path revisits a relation hop it already traversed."""

    def __init__(self, path: str, entity_type: str, relation_name: str):
        self.path = path
        self.entity_type = entity_type
        self.relation_name = relation_name
        super().__init__(f"Sort path {path!r} revisits relation '{relation_name}' on entity '{entity_type}'")


class PathTooDeepError(SortConfigurationError):
    """Raised when a path has more relation hops than allowed."""

    def __init__(self, path: str, max_depth: int):
        self.path = path
        self.max_depth = max_depth
        super().__init__(f"Sort path {path!r} exceeds the maximum of {max_depth} relation hops")


class EntityValidationError(SortConfigurationError):
    """Raised when entity definitions fail validation."""

    pass


class SortStateError(RuntimeError):
    """Raised when a sort operation is applied without a successful validation."""

    pass


def validate_entity(entity: "EntityDef", entities: dict[str, "EntityDef"]) -> list[str]:
    """Validate an entity definition against its siblings.

    Args:
        entity: Entity to validate
        entities: All entity definitions by name

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if entity.extends and entity.extends not in entities:
        errors.append(f"Entity '{entity.name}' extends unknown entity '{entity.extends}'")

    if not entity.extends and not entity.table:
        errors.append(f"Entity '{entity.name}' is the base of its hierarchy and must define a table")

    if entity.extends and entity.discriminator:
        errors.append(f"Entity '{entity.name}': only the base of a hierarchy may define a discriminator")

    seen = set()
    for relation in entity.relations:
        if relation.name in seen:
            errors.append(f"Entity '{entity.name}': relation '{relation.name}' is defined twice")
        seen.add(relation.name)

        if relation.target not in entities:
            errors.append(
                f"Entity '{entity.name}': relation '{relation.name}' targets unknown entity '{relation.target}'"
            )

    return errors


def validate_registry(
    registry: "SortFieldRegistry",
    root_type: str,
    provider: "SchemaProvider",
    max_depth: int | None = None,
) -> list[str]:
    """Check that every registered sort path resolves against the schema.

    Args:
        registry: Sort field registry of a listing
        root_type: Entity type listed by the view
        provider: Schema provider
        max_depth: Maximum number of relation hops (defaults to the resolver's)

    Returns:
        List of validation errors (empty if valid)
    """
    from gridsort.core.join_plan import JoinPlanBuilder
    from gridsort.core.path_resolver import DEFAULT_MAX_DEPTH, resolve_path

    errors = []
    builder = JoinPlanBuilder(provider)

    if not provider.has_entity(root_type):
        return [f"Listing root entity '{root_type}' is not declared"]

    for label, path in registry.items():
        try:
            resolved = resolve_path(path, root_type, provider, max_depth or DEFAULT_MAX_DEPTH)
            builder.build(root_type, resolved)
        except SortConfigurationError as e:
            errors.append(f"Sort field '{label}': {e}")

    return errors
