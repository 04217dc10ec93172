"""Schema provider exposing entity tables, hierarchies and relations."""

from collections.abc import Iterable

from gridsort.core.entity import EntityDef, RelationDef
from gridsort.core.inheritance import EntitySchema, resolve_entity_inheritance


class SchemaProvider:
    """Entity metadata consulted by the path resolver and join plan builder.

    Definitions are registered up front; lookups never modify the provider, so a
    configured provider can be shared by concurrent requests.
    """

    def __init__(self, entities: Iterable[EntityDef] | None = None):
        self.entities: dict[str, EntityDef] = {}
        self._schemas: dict[str, EntitySchema] = {}
        for entity in entities or []:
            self.add_entity(entity)

    @classmethod
    def from_entities(cls, entities: Iterable[EntityDef]) -> "SchemaProvider":
        """Build a provider and validate the definitions as a whole.

        Raises:
            EntityValidationError: If any definition is inconsistent
        """
        from gridsort.validation import EntityValidationError, validate_entity

        provider = cls(entities)
        errors = []
        for entity in provider.entities.values():
            errors.extend(validate_entity(entity, provider.entities))
        if errors:
            raise EntityValidationError("Entity validation failed:\n" + "\n".join(f"  - {e}" for e in errors))
        return provider

    def add_entity(self, entity: EntityDef) -> None:
        """Add an entity definition.

        Args:
            entity: Entity to add

        Raises:
            ValueError: If the entity already exists or inheritance is circular
        """
        if entity.name in self.entities:
            raise ValueError(f"Entity {entity.name} already exists")

        self.entities[entity.name] = entity
        try:
            self._schemas = resolve_entity_inheritance(self.entities)
        except ValueError:
            del self.entities[entity.name]
            raise

    def has_entity(self, entity_type: str) -> bool:
        return entity_type in self._schemas

    def entity_schema(self, entity_type: str) -> EntitySchema:
        """Get the resolved schema of an entity type.

        Raises:
            KeyError: If entity not found
        """
        if entity_type not in self._schemas:
            raise KeyError(f"Entity {entity_type} not found")
        return self._schemas[entity_type]

    def base_table(self, entity_type: str) -> str | None:
        return self.entity_schema(entity_type).base_table

    def owning_table(self, entity_type: str, class_name: str) -> str | None:
        """Table storing the columns of ``class_name`` within ``entity_type``'s hierarchy."""
        owning = self.entity_schema(entity_type).owning_table_per_class
        if class_name not in owning:
            raise KeyError(f"Class {class_name} is not part of the hierarchy of {entity_type}")
        return owning[class_name]

    def relations(self, entity_type: str) -> dict[str, RelationDef]:
        """Relations of an entity type, inherited ones included."""
        return self.entity_schema(entity_type).relations

    def relation_owner(self, entity_type: str, relation_name: str) -> str:
        """Class that declares a relation visible on ``entity_type``."""
        return self.entity_schema(entity_type).relation_owner[relation_name]

    def is_subclass_in_hierarchy(self, entity_type: str) -> bool:
        return self.entity_schema(entity_type).is_subclass

    def hierarchy_base_type(self, entity_type: str) -> str:
        return self.entity_schema(entity_type).base_type

    def hierarchy(self, entity_type: str) -> tuple[str, ...]:
        """Class names from the hierarchy base down to ``entity_type``."""
        return self.entity_schema(entity_type).hierarchy

    def primary_key(self, entity_type: str) -> str:
        return self.entity_schema(entity_type).primary_key

    def column_table(self, entity_type: str, column: str) -> str | None:
        """Table storing ``column`` for ``entity_type``.

        Columns not declared in any class's ``fields`` are assumed to live on
        the base table.
        """
        schema = self.entity_schema(entity_type)
        owner = schema.field_owner.get(column)
        if owner is None:
            return schema.base_table
        return schema.owning_table_per_class[owner]

    def descendant_types(self, entity_type: str) -> list[str]:
        """``entity_type`` and every type that inherits from it."""
        return [name for name, schema in self._schemas.items() if entity_type in schema.hierarchy]
