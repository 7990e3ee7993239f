"""The metric directive: namespace, dimension sets and metric definitions."""

from collections.abc import Iterable

from emfkit.core.constants import DEFAULT_NAMESPACE, MAX_DIMENSION_SETS
from emfkit.core.dimensions import DimensionSet
from emfkit.core.exceptions import ValidationError
from emfkit.core.models import MetricDefinition, StorageResolution, Unit


class MetricDirective:
    """One entry of the ``CloudWatchMetrics`` array.

    Holds the namespace, the default dimension set, any custom dimension
    sets, and the ordered table of metric definitions. Default dimensions
    are merged into every custom set when the effective sets are computed,
    unless the caller opted out through ``set_dimensions``/``reset_dimensions``.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self.default_dimension_set = DimensionSet()
        self.custom_dimension_sets: list[DimensionSet] = []
        self.metrics: dict[str, MetricDefinition] = {}
        self.should_use_default_dimension_set = True

    def put_metric(
        self,
        key: str,
        value: float,
        unit: Unit | str = Unit.NONE,
        storage_resolution: StorageResolution = StorageResolution.STANDARD,
    ) -> None:
        """Append ``value`` to the samples of ``key``.

        The first call for a key fixes its unit and resolution; later calls
        only add samples.
        """
        definition = self.metrics.get(key)
        if definition is None:
            definition = MetricDefinition(
                name=key, unit=unit, storage_resolution=storage_resolution
            )
            self.metrics[key] = definition
        definition.add_value(value)

    def put_dimension(self, dimension_set: DimensionSet) -> None:
        """Add a custom dimension set.

        Raises:
            ValidationError: If the directive would hold more than
                MAX_DIMENSION_SETS effective dimension sets.
        """
        if len(self.custom_dimension_sets) + 1 > MAX_DIMENSION_SETS:
            raise ValidationError(
                f"Maximum number of dimension sets allowed is {MAX_DIMENSION_SETS}"
            )
        self.custom_dimension_sets.append(dimension_set)

    def set_dimensions(
        self, dimension_sets: Iterable[DimensionSet], use_default: bool = False
    ) -> None:
        """Replace all custom dimension sets.

        ``use_default`` controls whether the default set is merged in until
        the dimensions are set or reset again; the default set itself is
        kept either way.

        Raises:
            ValidationError: If more than MAX_DIMENSION_SETS sets are given.
        """
        new_sets = list(dimension_sets)
        if len(new_sets) > MAX_DIMENSION_SETS:
            raise ValidationError(
                f"Maximum number of dimension sets allowed is {MAX_DIMENSION_SETS}"
            )
        self.should_use_default_dimension_set = use_default
        self.custom_dimension_sets = new_sets

    def reset_dimensions(self, use_default: bool) -> None:
        """Drop all custom dimension sets, and the default set too unless kept."""
        self.should_use_default_dimension_set = use_default
        self.custom_dimension_sets = []
        if not use_default:
            self.default_dimension_set = DimensionSet()

    def get_all_dimension_sets(self) -> list[DimensionSet]:
        """Compute the effective dimension sets for serialization.

        Returns:
            Without custom sets, the default set alone (or nothing when it
            is empty). With custom sets, each custom set merged over the
            default set. Only the custom sets when default dimensions are
            switched off.
        """
        if not self.should_use_default_dimension_set:
            return [d.clone() for d in self.custom_dimension_sets]
        if not self.custom_dimension_sets:
            if len(self.default_dimension_set) == 0:
                return []
            return [self.default_dimension_set.clone()]
        return [
            self.default_dimension_set.merged_with(custom)
            for custom in self.custom_dimension_sets
        ]

    def deep_clone_with_new_metrics(
        self, metrics: Iterable[MetricDefinition]
    ) -> "MetricDirective":
        """Copy this directive, keeping only ``metrics`` in the given order."""
        clone = MetricDirective(self.namespace)
        clone.default_dimension_set = self.default_dimension_set.clone()
        clone.custom_dimension_sets = [d.clone() for d in self.custom_dimension_sets]
        clone.should_use_default_dimension_set = self.should_use_default_dimension_set
        clone.metrics = {m.name: m.clone() for m in metrics}
        return clone
