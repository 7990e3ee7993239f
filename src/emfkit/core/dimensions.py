"""Dimension sets: the grouping keys of metric extraction."""

from collections.abc import Iterator

from emfkit.core.constants import MAX_DIMENSION_SET_SIZE
from emfkit.core.exceptions import ValidationError
from emfkit.core.validation import validate_dimension


class DimensionSet:
    """An ordered collection of dimension names bound to string values.

    Names are unique within a set and insertion order is kept, since the
    order of names is what the backend sees in the ``Dimensions`` array.

    Example:
        ```python
        dimensions = DimensionSet("Service", "checkout")
        dimensions.add_dimension("Region", "us-east-1")
        dimensions.dimension_keys  # ("Service", "Region")
        ```
    """

    def __init__(self, name: str | None = None, value: str | None = None) -> None:
        self._dimensions: dict[str, str] = {}
        if name is not None or value is not None:
            self.add_dimension(name, value)  # type: ignore[arg-type]

    @classmethod
    def of(cls, **dimensions: str) -> "DimensionSet":
        """Build a set from keyword arguments, in argument order."""
        dimension_set = cls()
        for name, value in dimensions.items():
            dimension_set.add_dimension(name, value)
        return dimension_set

    def add_dimension(self, name: str, value: str) -> None:
        """Append a dimension to the set.

        Raises:
            ValidationError: If the name or value is invalid, the name is
                already in the set, or the set is already full.
        """
        validate_dimension(name, value)
        if name in self._dimensions:
            raise ValidationError(f"Dimension {name!r} is already in the set")
        if len(self._dimensions) >= MAX_DIMENSION_SET_SIZE:
            raise ValidationError(
                f"Maximum number of dimensions per set allowed is "
                f"{MAX_DIMENSION_SET_SIZE}"
            )
        self._dimensions[name] = value

    @property
    def dimension_keys(self) -> tuple[str, ...]:
        return tuple(self._dimensions)

    def get_dimension_value(self, name: str) -> str | None:
        return self._dimensions.get(name)

    def as_dict(self) -> dict[str, str]:
        return dict(self._dimensions)

    def merged_with(self, other: "DimensionSet") -> "DimensionSet":
        """Return a new set with this set's dimensions followed by ``other``'s.

        Values from ``other`` win when both sets hold the same name; the
        name keeps the position it had in this set. Neither input changes.
        """
        merged = DimensionSet()
        merged._dimensions = {**self._dimensions, **other._dimensions}
        return merged

    def clone(self) -> "DimensionSet":
        copy = DimensionSet()
        copy._dimensions = dict(self._dimensions)
        return copy

    def __len__(self) -> int:
        return len(self._dimensions)

    def __contains__(self, name: object) -> bool:
        return name in self._dimensions

    def __iter__(self) -> Iterator[str]:
        return iter(self._dimensions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DimensionSet):
            return NotImplemented
        return list(self._dimensions.items()) == list(other._dimensions.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DimensionSet({self._dimensions!r})"
