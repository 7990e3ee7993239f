"""EMF JSON encoder for root nodes.

Output shape::

    {
      "_aws": {
        "Timestamp": 1702300000000,
        "CloudWatchMetrics": [
          {"Namespace": "...", "Dimensions": [["Service"]],
           "Metrics": [{"Name": "Latency", "Unit": "Milliseconds"}]}
        ]
      },
      "Service": "checkout",
      "Latency": [12.0, 15.0]
    }
"""

import json
from typing import TYPE_CHECKING, Any

from emfkit.core.constants import (
    CLOUDWATCH_METRICS_KEY,
    METADATA_KEY,
    TIMESTAMP_KEY,
)
from emfkit.core.models import MetricDefinition, StorageResolution, Unit

if TYPE_CHECKING:
    from emfkit.core.document import RootNode


def _encode_unit(unit: Unit | str) -> str:
    return unit.value if isinstance(unit, Unit) else str(unit)


def encode_metric_definition(definition: MetricDefinition) -> dict[str, Any]:
    """Encode the ``{Name, Unit}`` entry of a metric.

    ``StorageResolution`` is only written for high resolution metrics; the
    backend treats its absence as standard resolution.
    """
    encoded: dict[str, Any] = {
        "Name": definition.name,
        "Unit": _encode_unit(definition.unit),
    }
    if definition.storage_resolution == StorageResolution.HIGH:
        encoded["StorageResolution"] = int(StorageResolution.HIGH)
    return encoded


def encode_root_node(node: "RootNode") -> dict[str, Any]:
    """Encode a root node to a JSON-ready dict.

    Top-level fields are written as properties, then dimension values, then
    metric values; a later field replaces an earlier one with the same name.
    """
    directive = node.aws.metric_directive
    dimension_sets = directive.get_all_dimension_sets()
    dimensions = [list(d.dimension_keys) for d in dimension_sets] or [[]]

    metadata: dict[str, Any] = {TIMESTAMP_KEY: node.aws.timestamp}
    metadata.update(node.aws.custom_metadata)
    metadata[CLOUDWATCH_METRICS_KEY] = [
        {
            "Namespace": directive.namespace,
            "Dimensions": dimensions,
            "Metrics": [
                encode_metric_definition(m) for m in directive.metrics.values()
            ],
        }
    ]

    document: dict[str, Any] = {METADATA_KEY: metadata}
    document.update(node.get_properties())
    for dimension_set in dimension_sets:
        document.update(dimension_set.as_dict())
    for definition in directive.metrics.values():
        values = definition.values
        document[definition.name] = values[0] if len(values) == 1 else list(values)
    return document


def encode_json(node: "RootNode") -> str:
    """Encode a root node to a compact, newline-free JSON string."""
    return json.dumps(
        encode_root_node(node),
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )
