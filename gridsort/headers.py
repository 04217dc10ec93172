"""Sortable header state for list views."""

from collections.abc import Mapping
from dataclasses import dataclass

from gridsort.sql.record_list import RecordList
from gridsort.sql.sort_applier import SortApplier, SortDirection, SortOperation, SortRequest


@dataclass(frozen=True)
class HeaderColumn:
    """Header state of one displayed column."""

    name: str
    title: str
    sort_path: str | None = None
    direction: SortDirection | None = None  # set on the column the list is sorted by

    @property
    def sortable(self) -> bool:
        return self.sort_path is not None

    @property
    def action_name(self) -> str | None:
        """Name of the action that sorts by this column, e.g. "SetOrderCheerleader-Hat-Colour"."""
        if self.sort_path is None:
            return None
        return "SetOrder" + self.sort_path.replace(".", "-")

    def next_direction(self) -> SortDirection:
        """Direction a click on this header requests."""
        return SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC


class SortableHeader:
    """List view component deciding which headers sort and applying the requested sort."""

    def __init__(self, applier: SortApplier, columns: Mapping[str, str] | None = None):
        self.applier = applier
        self.columns = dict(columns or {})

    def set_field_sorting(self, fields: Mapping[str, str]) -> None:
        """Register label -> dotted path pairs as sortable."""
        for label, path in fields.items():
            self.applier.register_sortable(label, path)

    def header_columns(self, request: SortRequest | None = None) -> list[HeaderColumn]:
        """Header state for every displayed column.

        A column is sortable when its name or its title resolves through the
        registry.
        """
        registry = self.applier.registry
        current = registry.resolve_path(request.column) if request and request.column else None

        headers = []
        for name, title in self.columns.items():
            path = registry.resolve_path(name) or registry.resolve_path(title)
            direction = request.direction if path is not None and path == current else None
            headers.append(HeaderColumn(name=name, title=title, sort_path=path, direction=direction))
        return headers

    def get_manipulated_data(self, records: RecordList, request: SortRequest) -> RecordList:
        """Sort ``records`` as requested; a request without a column leaves them unsorted.

        Raises:
            InvalidSortColumnError: If the requested column is not sortable
        """
        if not request.column:
            return records
        operation = SortOperation(self.applier, request.column)
        operation.validate()
        return operation.apply(records, request.direction)
