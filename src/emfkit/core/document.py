"""The EMF document: metadata block plus top-level properties."""

import copy
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from emfkit.core.directive import MetricDirective
from emfkit.core.encoding.emf import encode_json
from emfkit.core.models import MetricDefinition, PropertyValue
from emfkit.core.validation import validate_property_key, validate_property_value


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class MetadataNode:
    """The reserved ``_aws`` block of a document.

    Attributes:
        timestamp: Epoch milliseconds, fixed when the node is created.
        metric_directive: Namespace, dimensions and metric definitions.
        custom_metadata: Extra entries rendered inside the block.
    """

    timestamp: int = field(default_factory=_now_millis)
    metric_directive: MetricDirective = field(default_factory=MetricDirective)
    custom_metadata: dict[str, PropertyValue] = field(default_factory=dict)


class RootNode:
    """Root of an EMF document.

    Owns the metadata block and the top-level properties. Properties are
    rendered as sibling fields of the metrics, so they are searchable in
    logs without becoming metrics themselves.
    """

    def __init__(self, aws: MetadataNode | None = None) -> None:
        self.aws = aws if aws is not None else MetadataNode()
        self._properties: dict[str, PropertyValue] = {}

    def put_property(self, name: str, value: PropertyValue) -> None:
        """Set a top-level property; a later value replaces an earlier one.

        Raises:
            ValidationError: If the name is empty or reserved, or the value
                is not a supported property value.
        """
        validate_property_key(name)
        validate_property_value(value)
        self._properties[name] = copy.deepcopy(value)

    def get_property(self, name: str) -> PropertyValue | None:
        return copy.deepcopy(self._properties.get(name))

    def get_properties(self) -> dict[str, PropertyValue]:
        """Return a deep copy of the properties."""
        return copy.deepcopy(self._properties)

    def deep_clone_with_new_metrics(
        self, metrics: Iterable[MetricDefinition]
    ) -> "RootNode":
        """Copy this node with only ``metrics`` in its metric table.

        The copy shares no mutable containers with this node, so either can
        be changed afterwards without affecting the other.
        """
        clone = RootNode(
            MetadataNode(
                timestamp=self.aws.timestamp,
                metric_directive=self.aws.metric_directive.deep_clone_with_new_metrics(
                    metrics
                ),
                custom_metadata=copy.deepcopy(self.aws.custom_metadata),
            )
        )
        clone._properties = copy.deepcopy(self._properties)
        return clone

    def serialize(self) -> str:
        """Render the node as a single-line EMF JSON document."""
        return encode_json(self)
