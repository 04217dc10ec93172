"""Test the sort field registry."""

import pytest

from gridsort import SortFieldRegistry
from gridsort.validation import EmptyPathError


def test_register_and_resolve_label():
    """Test a registered label resolves to its path."""
    registry = SortFieldRegistry()
    registry.register("Cheerleader Hat", "Cheerleader.Hat.Colour")

    assert registry.resolve_path("Cheerleader Hat") == "Cheerleader.Hat.Colour"


def test_registered_path_resolves_verbatim():
    """Test the dotted path itself is accepted as a sort column."""
    registry = SortFieldRegistry({"Name": "Cheerleader.Name"})

    assert registry.resolve_path("Cheerleader.Name") == "Cheerleader.Name"


def test_unknown_label_resolves_to_none():
    """Test that unregistered values are not sortable."""
    registry = SortFieldRegistry({"City": "City"})

    assert registry.resolve_path("INVALID") is None
    assert registry.resolve_path(None) is None


def test_reregistration_overwrites():
    """Test re-registering a label replaces its path."""
    registry = SortFieldRegistry({"Name": "City"})
    registry.register("Name", "Cheerleader.Name")

    assert registry.resolve_path("Name") == "Cheerleader.Name"
    assert registry.resolve_path("City") is None
    assert len(registry) == 1


@pytest.mark.parametrize("path", ["", "Cheerleader..Colour", ".Name", "Name.", "  "])
def test_malformed_paths_rejected(path):
    """Test that malformed paths cannot be registered."""
    registry = SortFieldRegistry()

    with pytest.raises(EmptyPathError):
        registry.register("Broken", path)

    assert "Broken" not in registry


def test_labels_and_items_keep_registration_order():
    """Test labels are listed in registration order."""
    registry = SortFieldRegistry({"Name": "Name", "City": "City"})
    registry.register("Cheerleader Hat", "Cheerleader.Hat.Colour")

    assert registry.labels() == ["Name", "City", "Cheerleader Hat"]
    assert registry.items()[-1] == ("Cheerleader Hat", "Cheerleader.Hat.Colour")
    assert list(registry) == registry.labels()
