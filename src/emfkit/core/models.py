"""Core domain models for EMF documents."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TypeAlias

PropertyValue: TypeAlias = (
    str | int | float | bool | list["PropertyValue"] | dict[str, "PropertyValue"]
)


class Unit(str, Enum):
    """CloudWatch metric units.

    The value of each member is the exact string the backend expects in the
    ``Unit`` field of a metric definition.
    """

    SECONDS = "Seconds"
    MICROSECONDS = "Microseconds"
    MILLISECONDS = "Milliseconds"
    BYTES = "Bytes"
    KILOBYTES = "Kilobytes"
    MEGABYTES = "Megabytes"
    GIGABYTES = "Gigabytes"
    TERABYTES = "Terabytes"
    BITS = "Bits"
    KILOBITS = "Kilobits"
    MEGABITS = "Megabits"
    GIGABITS = "Gigabits"
    TERABITS = "Terabits"
    PERCENT = "Percent"
    COUNT = "Count"
    BYTES_PER_SECOND = "Bytes/Second"
    KILOBYTES_PER_SECOND = "Kilobytes/Second"
    MEGABYTES_PER_SECOND = "Megabytes/Second"
    GIGABYTES_PER_SECOND = "Gigabytes/Second"
    TERABYTES_PER_SECOND = "Terabytes/Second"
    BITS_PER_SECOND = "Bits/Second"
    KILOBITS_PER_SECOND = "Kilobits/Second"
    MEGABITS_PER_SECOND = "Megabits/Second"
    GIGABITS_PER_SECOND = "Gigabits/Second"
    TERABITS_PER_SECOND = "Terabits/Second"
    COUNT_PER_SECOND = "Count/Second"
    NONE = "None"

    def __str__(self) -> str:
        return self.value


class StorageResolution(IntEnum):
    """Retention granularity of a metric, in seconds."""

    STANDARD = 60
    HIGH = 1


@dataclass
class MetricDefinition:
    """All samples recorded under one metric name.

    Attributes:
        name: Metric name as it appears in the document.
        unit: CloudWatch unit, passed through untouched.
        storage_resolution: Resolution the metric was first recorded with.
        values: Samples in the order they were recorded.
    """

    name: str
    unit: Unit | str = Unit.NONE
    storage_resolution: StorageResolution = StorageResolution.STANDARD
    values: list[float] = field(default_factory=list)

    def add_value(self, value: float) -> None:
        self.values.append(value)

    def clone(self) -> "MetricDefinition":
        """Return a copy that shares no mutable state with this definition."""
        return MetricDefinition(
            name=self.name,
            unit=self.unit,
            storage_resolution=self.storage_resolution,
            values=list(self.values),
        )
