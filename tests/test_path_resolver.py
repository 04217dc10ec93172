"""Test dotted relation path resolution."""

import pytest

from gridsort import EntityDef, RelationDef, SchemaProvider
from gridsort.core.path_resolver import resolve_path
from gridsort.validation import (
    CyclicPathError,
    EmptyPathError,
    PathTooDeepError,
    SchemaInconsistencyError,
    SortConfigurationError,
    UnknownRelationError,
)


def test_direct_column_has_no_hops(provider):
    """Test a bare column resolves to zero hops."""
    resolved = resolve_path("City", "Team", provider)

    assert resolved.hops == ()
    assert resolved.column == "City"
    assert resolved.target_type == "Team"


def test_two_hop_path(provider):
    """Test hops are produced in path order with their types."""
    resolved = resolve_path("Cheerleader.Hat.Colour", "Team", provider)

    assert [(h.relation_name, h.source_type, h.target_type) for h in resolved.hops] == [
        ("Cheerleader", "Team", "Cheerleader"),
        ("Hat", "Cheerleader", "CheerleaderHat"),
    ]
    assert resolved.column == "Colour"
    assert resolved.target_type == "CheerleaderHat"


def test_inherited_relations_resolve_from_subclass(provider):
    """Test relations declared on a base class resolve from a subclass."""
    resolved = resolve_path("CheerleadersMom.Hat.Colour", "TeamGroup", provider)

    assert [h.target_type for h in resolved.hops] == ["Mom", "CheerleaderHat"]
    # Hat is declared on Cheerleader, the base of Mom
    assert resolved.hops[1].source_type == "Mom"


def test_unknown_relation(provider):
    """Test that an undeclared relation names the relation and entity."""
    with pytest.raises(UnknownRelationError, match="Relation 'Coach' not found on entity 'Team'") as exc_info:
        resolve_path("Coach.Name", "Team", provider)

    assert exc_info.value.relation_name == "Coach"
    assert exc_info.value.entity_type == "Team"
    assert isinstance(exc_info.value, SortConfigurationError)


def test_unknown_relation_deeper_in_path(provider):
    """Test the failing entity is the one reached so far."""
    with pytest.raises(UnknownRelationError) as exc_info:
        resolve_path("Cheerleader.Shoes.Size", "Team", provider)

    assert exc_info.value.entity_type == "Cheerleader"


@pytest.mark.parametrize("path", ["", "Cheerleader..Name", "Cheerleader."])
def test_empty_paths(provider, path):
    """Test empty paths and empty segments are rejected."""
    with pytest.raises(EmptyPathError):
        resolve_path(path, "Team", provider)


def test_cyclic_path():
    """Test revisiting a relation hop fails instead of looping."""
    provider = SchemaProvider(
        [
            EntityDef(
                name="Page",
                table="Page",
                relations=[RelationDef(name="Parent", target="Page")],
            )
        ]
    )

    with pytest.raises(CyclicPathError, match="revisits relation 'Parent' on entity 'Page'"):
        resolve_path("Parent.Parent.Title", "Page", provider)


def test_mutual_relations_are_not_a_cycle():
    """Test that different relations between the same entities are allowed."""
    provider = SchemaProvider(
        [
            EntityDef(name="Author", table="Author", relations=[RelationDef(name="Book", target="Book")]),
            EntityDef(name="Book", table="Book", relations=[RelationDef(name="Author", target="Author")]),
        ]
    )

    resolved = resolve_path("Book.Author.Name", "Author", provider)

    assert len(resolved.hops) == 2


def test_path_depth_bound(provider):
    """Test paths beyond the maximum depth are rejected."""
    with pytest.raises(PathTooDeepError, match="maximum of 1 relation hops"):
        resolve_path("Cheerleader.Hat.Colour", "Team", provider, max_depth=1)

    assert len(resolve_path("Cheerleader.Name", "Team", provider, max_depth=1).hops) == 1


def test_relation_to_undeclared_entity():
    """Test a relation whose target is not declared."""
    provider = SchemaProvider(
        [EntityDef(name="Team", table="Team", relations=[RelationDef(name="Coach", target="Coach")])]
    )

    with pytest.raises(SchemaInconsistencyError, match="Coach"):
        resolve_path("Coach.Office.Name", "Team", provider)
