"""MetricsContext: the mutable EMF document of one unit of work."""

import copy
import logging
import threading
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from emfkit.core.constants import MAX_METRICS_PER_EVENT, RESERVED_METADATA_KEYS
from emfkit.core.dimensions import DimensionSet
from emfkit.core.document import RootNode
from emfkit.core.exceptions import DuplicateKeyError, ValidationError
from emfkit.core.models import PropertyValue, StorageResolution, Unit
from emfkit.core.validation import (
    validate_metric,
    validate_namespace,
    validate_property_key,
    validate_property_value,
    validate_timestamp,
)

logger = logging.getLogger(__name__)


class MetricsContext:
    """Accumulates metrics, dimensions, properties and metadata.

    Every insertion is validated before the document is touched, so a
    rejected call leaves the context as it was. Mutations and serialization
    of one context may be called from several threads.

    Example:
        ```python
        context = MetricsContext()
        context.namespace = "Checkout"
        context.put_dimension("Service", "cart")
        context.put_metric("Latency", 12, Unit.MILLISECONDS)
        for payload in context.serialize():
            print(payload)
        ```
    """

    def __init__(self, root_node: RootNode | None = None) -> None:
        self._root_node = root_node if root_node is not None else RootNode()
        self._metric_directive = self._root_node.aws.metric_directive
        # Resolution each metric name was first recorded with; not serialized
        self._metric_resolutions: dict[str, StorageResolution] = {
            name: definition.storage_resolution
            for name, definition in self._metric_directive.metrics.items()
        }
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        namespace: str,
        properties: Mapping[str, PropertyValue],
        dimension_sets: Iterable[DimensionSet],
        default_dimension_set: DimensionSet,
    ) -> "MetricsContext":
        """Build a context from existing namespace, properties and dimensions.

        Raises:
            ValidationError: If the namespace, a property, or the number of
                dimension sets is invalid.
        """
        context = cls()
        context.namespace = namespace
        context.default_dimensions = default_dimension_set.clone()
        for dimension_set in dimension_sets:
            context.put_dimension(dimension_set.clone())
        for name, value in properties.items():
            context.put_property(name, value)
        return context

    def create_copy_with_context(
        self, preserve_dimensions: bool = True
    ) -> "MetricsContext":
        """Derive a context for the next flush of the same unit of work.

        The copy has this context's namespace, default dimensions and a
        snapshot of its properties, but no metrics and no resolution
        history. Custom dimension sets are carried over only when
        ``preserve_dimensions`` is true. Custom metadata is not copied.
        """
        with self._lock:
            directive = self._metric_directive
            copied = MetricsContext()
            copied_directive = copied._metric_directive
            copied_directive.namespace = directive.namespace
            copied_directive.default_dimension_set = (
                directive.default_dimension_set.clone()
            )
            if preserve_dimensions:
                copied_directive.custom_dimension_sets = [
                    d.clone() for d in directive.custom_dimension_sets
                ]
                copied_directive.should_use_default_dimension_set = (
                    directive.should_use_default_dimension_set
                )
            for name, value in self._root_node.get_properties().items():
                copied._root_node.put_property(name, value)
        logger.debug(
            "Copied metrics context for namespace %s (preserve_dimensions=%s)",
            copied.namespace,
            preserve_dimensions,
        )
        return copied

    @property
    def namespace(self) -> str:
        return self._metric_directive.namespace

    @namespace.setter
    def namespace(self, value: str) -> None:
        validate_namespace(value)
        with self._lock:
            self._metric_directive.namespace = value

    @property
    def default_dimensions(self) -> DimensionSet:
        """Dimensions merged into every custom dimension set."""
        return self._metric_directive.default_dimension_set

    @default_dimensions.setter
    def default_dimensions(self, value: DimensionSet) -> None:
        with self._lock:
            self._metric_directive.default_dimension_set = value

    @property
    def has_default_dimensions(self) -> bool:
        return len(self.default_dimensions.dimension_keys) > 0

    @property
    def metric_count(self) -> int:
        return len(self._metric_directive.metrics)

    @property
    def timestamp(self) -> int:
        """Document timestamp in epoch milliseconds."""
        return self._root_node.aws.timestamp

    def set_timestamp(self, timestamp: datetime | int) -> None:
        """Set the document timestamp.

        Args:
            timestamp: A datetime (naive values are taken as UTC) or epoch
                milliseconds.

        Raises:
            ValidationError: If the timestamp is more than 14 days in the
                past or more than 2 hours in the future.
        """
        if isinstance(timestamp, datetime):
            moment = timestamp
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=timezone.utc)
            millis = int(moment.timestamp() * 1000)
        else:
            millis = int(timestamp)
            try:
                moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
            except (ValueError, OverflowError, OSError) as e:
                raise ValidationError(
                    f"Timestamp {millis} is not a valid epoch in milliseconds"
                ) from e
        validate_timestamp(moment, datetime.now(timezone.utc))
        self._root_node.aws.timestamp = millis

    def put_metric(
        self,
        key: str,
        value: float,
        unit: Unit | str | StorageResolution = Unit.NONE,
        storage_resolution: StorageResolution = StorageResolution.STANDARD,
    ) -> None:
        """Record a metric sample.

        Repeated calls with the same key are emitted as an array of values
        in call order. A StorageResolution passed in place of ``unit``
        records a unit-less metric with that resolution.

        Raises:
            ValidationError: If the key is empty or the value is not a
                finite number.
            InvalidMetricError: If ``key`` was already recorded with a
                different storage resolution.
        """
        if isinstance(unit, StorageResolution):
            unit, storage_resolution = Unit.NONE, unit
        with self._lock:
            validate_metric(key, value, storage_resolution, self._metric_resolutions)
            self._metric_directive.put_metric(
                key, float(value), unit, storage_resolution
            )
            self._metric_resolutions.setdefault(key, storage_resolution)

    def put_dimension(
        self, dimension: DimensionSet | str, value: str | None = None
    ) -> None:
        """Add a dimension set, or a single dimension given as name and value.

        Raises:
            ValidationError: If the dimension is invalid or the context
                already holds the maximum number of dimension sets.
        """
        if isinstance(dimension, DimensionSet):
            dimension_set = dimension
        else:
            dimension_set = DimensionSet(dimension, value)
        with self._lock:
            self._metric_directive.put_dimension(dimension_set)

    def get_all_dimension_sets(self) -> list[DimensionSet]:
        """Return the effective dimension sets, default dimensions included."""
        return self._metric_directive.get_all_dimension_sets()

    def set_dimensions(
        self, *dimension_sets: DimensionSet, use_default: bool = False
    ) -> None:
        """Replace all custom dimension sets.

        Default dimensions are left out of the effective sets unless
        ``use_default`` is true, until dimensions are set or reset again.
        """
        with self._lock:
            self._metric_directive.set_dimensions(dimension_sets, use_default)

    def reset_dimensions(self, use_default: bool) -> None:
        """Remove all custom dimension sets, and the defaults unless kept."""
        with self._lock:
            self._metric_directive.reset_dimensions(use_default)

    def put_property(self, name: str, value: PropertyValue) -> None:
        """Add a top-level property.

        Properties are searchable in logs but are not extracted as metrics.
        """
        with self._lock:
            self._root_node.put_property(name, value)

    def get_property(self, name: str) -> PropertyValue | None:
        """Return the value of a property, or None if it was never set."""
        return self._root_node.get_property(name)

    def put_metadata(self, key: str, value: PropertyValue) -> None:
        """Add an entry to the ``_aws`` metadata block.

        Raises:
            DuplicateKeyError: If ``key`` is already present or reserved.
            ValidationError: If the value is not a supported property value.
        """
        validate_property_key(key)
        validate_property_value(value)
        with self._lock:
            custom_metadata = self._root_node.aws.custom_metadata
            if key in custom_metadata or key in RESERVED_METADATA_KEYS:
                raise DuplicateKeyError(f"Metadata key {key!r} already exists")
            custom_metadata[key] = copy.deepcopy(value)

    def serialize(self) -> list[str]:
        """Render the context as one or more EMF documents.

        The backend accepts at most MAX_METRICS_PER_EVENT metrics per log
        event. Larger contexts are split into consecutive chunks in
        recording order; every chunk carries the full metadata, dimensions
        and properties.

        Returns:
            One JSON string per log event, in chunk order.
        """
        with self._lock:
            metrics = list(self._metric_directive.metrics.values())
            if len(metrics) <= MAX_METRICS_PER_EVENT:
                return [self._root_node.serialize()]

            nodes = [
                self._root_node.deep_clone_with_new_metrics(
                    metrics[start : start + MAX_METRICS_PER_EVENT]
                )
                for start in range(0, len(metrics), MAX_METRICS_PER_EVENT)
            ]
        logger.debug("Split %d metrics into %d events", len(metrics), len(nodes))
        return [node.serialize() for node in nodes]
