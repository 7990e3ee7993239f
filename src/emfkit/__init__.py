"""emfkit - build CloudWatch Embedded Metric Format documents in-process."""

from emfkit.core.constants import (
    MAX_DIMENSION_SET_SIZE,
    MAX_DIMENSION_SETS,
    MAX_METRICS_PER_EVENT,
)
from emfkit.core.context import MetricsContext
from emfkit.core.dimensions import DimensionSet
from emfkit.core.directive import MetricDirective
from emfkit.core.document import MetadataNode, RootNode
from emfkit.core.exceptions import (
    DuplicateKeyError,
    EMFError,
    InvalidMetricError,
    ValidationError,
)
from emfkit.core.models import MetricDefinition, PropertyValue, StorageResolution, Unit

__all__ = [
    "MAX_DIMENSION_SETS",
    "MAX_DIMENSION_SET_SIZE",
    "MAX_METRICS_PER_EVENT",
    "DimensionSet",
    "DuplicateKeyError",
    "EMFError",
    "InvalidMetricError",
    "MetadataNode",
    "MetricDefinition",
    "MetricDirective",
    "MetricsContext",
    "PropertyValue",
    "RootNode",
    "StorageResolution",
    "Unit",
    "ValidationError",
]
