"""Class-table inheritance resolution for entity hierarchies."""

from dataclasses import dataclass, field

from gridsort.core.entity import EntityDef, RelationDef


@dataclass(frozen=True)
class EntitySchema:
    """Resolved view of one entity type within its inheritance hierarchy.

    ``base_table`` holds the primary key shared by every class in the hierarchy.
    ``owning_table_per_class`` maps each class from the base down to this type
    onto the table storing its own columns; a class without a table maps to the
    nearest ancestor's table.
    """

    type_name: str
    base_table: str | None
    owning_table_per_class: dict[str, str | None]
    relations: dict[str, RelationDef]
    hierarchy: tuple[str, ...]  # base first, this type last
    relation_owner: dict[str, str] = field(default_factory=dict)  # relation -> declaring class
    field_owner: dict[str, str] = field(default_factory=dict)  # column -> declaring class
    primary_key: str = "ID"
    discriminator: str | None = None

    @property
    def base_type(self) -> str:
        return self.hierarchy[0]

    @property
    def is_subclass(self) -> bool:
        return len(self.hierarchy) > 1

    def tables(self) -> list[str]:
        """Distinct tables of the hierarchy, base table first."""
        tables = []
        for class_name in self.hierarchy:
            table = self.owning_table_per_class[class_name]
            if table and table not in tables:
                tables.append(table)
        return tables


def merge_entity(child: EntityDef, parent: EntitySchema) -> EntitySchema:
    """Merge a child entity definition onto its resolved parent.

    Child relations and fields override parent ones with the same name.

    Args:
        child: Child entity with extends reference
        parent: Resolved parent schema

    Returns:
        New schema for the child type
    """
    owning = dict(parent.owning_table_per_class)
    owning[child.name] = child.table or owning[parent.type_name]

    relations = dict(parent.relations)
    relation_owner = dict(parent.relation_owner)
    for relation in child.relations:
        relations[relation.name] = relation
        relation_owner[relation.name] = child.name

    field_owner = dict(parent.field_owner)
    if child.table:
        for column in child.fields:
            field_owner[column] = child.name

    return EntitySchema(
        type_name=child.name,
        base_table=parent.base_table,
        owning_table_per_class=owning,
        relations=relations,
        hierarchy=parent.hierarchy + (child.name,),
        relation_owner=relation_owner,
        field_owner=field_owner,
        primary_key=parent.primary_key,
        discriminator=parent.discriminator,
    )


def base_schema(entity: EntityDef) -> EntitySchema:
    """Build the schema of an entity that extends nothing."""
    return EntitySchema(
        type_name=entity.name,
        base_table=entity.table,
        owning_table_per_class={entity.name: entity.table},
        relations={r.name: r for r in entity.relations},
        hierarchy=(entity.name,),
        relation_owner={r.name: entity.name for r in entity.relations},
        field_owner={column: entity.name for column in entity.fields},
        primary_key=entity.primary_key,
        discriminator=entity.discriminator,
    )


def resolve_entity_inheritance(entities: dict[str, EntityDef]) -> dict[str, EntitySchema]:
    """Resolve inheritance for all entities.

    Entities whose parent chain is incomplete are left out; they resolve once
    the missing parent is added.

    Args:
        entities: Dictionary of entity name to definition

    Returns:
        Dictionary of entity name to resolved schema

    Raises:
        ValueError: If circular inheritance detected
    """
    resolved: dict[str, EntitySchema] = {}
    in_progress = set()

    def resolve(name: str) -> EntitySchema | None:
        if name in resolved:
            return resolved[name]

        if name in in_progress:
            raise ValueError(f"Circular inheritance detected for entity '{name}'")

        entity = entities.get(name)
        if entity is None:
            return None

        if not entity.extends:
            resolved[name] = base_schema(entity)
            return resolved[name]

        in_progress.add(name)
        parent = resolve(entity.extends)
        in_progress.remove(name)

        if parent is None:
            return None

        resolved[name] = merge_entity(entity, parent)
        return resolved[name]

    for name in entities:
        resolve(name)

    return resolved
