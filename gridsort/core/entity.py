"""Entity and relation definitions."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class RelationDef(BaseModel):
    """Represents a relation from one entity to another.

    Relation kinds:
    - has_one: This entity stores a foreign key to the target ({name}ID by default)
    - has_many: The target stores a foreign key pointing back at this entity
    - many_many: Both sides are linked through a join (pivot) table
    """

    name: str = Field(..., description="Relation name, used as a segment in dotted sort paths")
    target: str = Field(..., description="Name of the related entity type")
    kind: Literal["has_one", "has_many", "many_many"] = Field(default="has_one", description="Relation kind")
    foreign_key: str | None = Field(
        default=None,
        description=(
            "has_one: column on this entity (defaults to {name}ID); "
            "has_many: column on the target; many_many: pivot column pointing at this entity"
        ),
    )
    join_table: str | None = Field(default=None, description="Pivot table for many_many relations")
    target_key: str | None = Field(default=None, description="Pivot column pointing at the target (many_many)")

    @model_validator(mode="after")
    def check_kind_keys(self) -> "RelationDef":
        """Ensure the columns each relation kind needs are present."""
        if self.kind == "has_many" and not self.foreign_key:
            raise ValueError(f"has_many relation '{self.name}' requires foreign_key")
        if self.kind == "many_many":
            missing = [f for f in ("join_table", "foreign_key", "target_key") if not getattr(self, f)]
            if missing:
                raise ValueError(f"many_many relation '{self.name}' requires {', '.join(missing)}")
        return self

    @property
    def source_column(self) -> str:
        """Foreign key column stored on the source side of a has_one relation."""
        return self.foreign_key or f"{self.name}ID"


class EntityDef(BaseModel):
    """Entity (record class) definition.

    Entities form class-table-inheritance hierarchies through ``extends``: the
    base entity owns the table holding the shared primary key, and each
    subclass may add its own table joined on that key.
    """

    name: str = Field(..., description="Unique entity type name")
    table: str | None = Field(None, description="Own table (None when the class adds no columns)")
    extends: str | None = Field(None, description="Parent entity type in the inheritance hierarchy")
    primary_key: str = Field(default="ID", description="Primary key column shared by the hierarchy")
    discriminator: str | None = Field(
        None, description="Column on the base table naming each record's class (base entities only)"
    )
    description: str | None = Field(None, description="Human-readable description")
    fields: list[str] = Field(default_factory=list, description="Columns stored on this entity's own table")
    relations: list[RelationDef] = Field(default_factory=list, description="Relations to other entities")

    def __hash__(self) -> int:
        return hash(self.name)

    def get_relation(self, name: str) -> RelationDef | None:
        """Get relation by name."""
        for relation in self.relations:
            if relation.name == name:
                return relation
        return None
