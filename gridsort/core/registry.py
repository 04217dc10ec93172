"""Registry of sortable fields for a listing."""

from collections.abc import Iterator, Mapping

from gridsort.validation import EmptyPathError


def split_path(dotted_path: str) -> list[str]:
    """Split a dotted path, rejecting empty paths and empty segments.

    Raises:
        EmptyPathError: If the path or any segment is empty
    """
    if not dotted_path or not dotted_path.strip():
        raise EmptyPathError(dotted_path)
    segments = dotted_path.split(".")
    if any(not segment.strip() for segment in segments):
        raise EmptyPathError(dotted_path)
    return segments


class SortFieldRegistry:
    """Explicit allow-list mapping sort labels to dotted relation paths.

    Only values reachable through :meth:`resolve_path` can be sorted on.
    """

    def __init__(self, fields: Mapping[str, str] | None = None):
        self._paths: dict[str, str] = {}
        for label, path in (fields or {}).items():
            self.register(label, path)

    def register(self, label: str, dotted_path: str) -> None:
        """Register a sortable label, replacing any previous path for it.

        Args:
            label: Display label or column name
            dotted_path: Relation path ending in a column, e.g. "Cheerleader.Hat.Colour"

        Raises:
            EmptyPathError: If the path is malformed
        """
        split_path(dotted_path)
        self._paths[label] = dotted_path

    def resolve_path(self, label_or_column: str | None) -> str | None:
        """Get the dotted path for a label or a registered path.

        Args:
            label_or_column: Sort label, or a dotted path registered under any label

        Returns:
            The dotted path, or None if nothing matches
        """
        if label_or_column is None:
            return None
        if label_or_column in self._paths:
            return self._paths[label_or_column]
        for path in self._paths.values():
            if path == label_or_column:
                return path
        return None

    def labels(self) -> list[str]:
        return list(self._paths)

    def items(self) -> list[tuple[str, str]]:
        return list(self._paths.items())

    def __contains__(self, label: object) -> bool:
        return label in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)
