"""Input validation shared by the document model.

Every validator raises before anything is mutated, so a rejected call
leaves the document exactly as it was.
"""

import math
import numbers
import re
from collections.abc import Mapping
from datetime import datetime

from emfkit.core.constants import (
    MAX_DIMENSION_NAME_LENGTH,
    MAX_DIMENSION_VALUE_LENGTH,
    MAX_METRIC_NAME_LENGTH,
    MAX_NAMESPACE_LENGTH,
    MAX_TIMESTAMP_FUTURE_AGE,
    MAX_TIMESTAMP_PAST_AGE,
    METADATA_KEY,
    VALID_NAMESPACE_PATTERN,
)
from emfkit.core.exceptions import InvalidMetricError, ValidationError
from emfkit.core.models import PropertyValue, StorageResolution

_NAMESPACE_RE = re.compile(VALID_NAMESPACE_PATTERN)


def _is_blank(text: object) -> bool:
    return not isinstance(text, str) or not text.strip()


def validate_dimension(name: str, value: str) -> None:
    """Validate a single dimension name/value pair.

    Raises:
        ValidationError: If the name or value is empty, too long, contains
            non-ASCII characters, or the name starts with a colon.
    """
    if _is_blank(name):
        raise ValidationError("Dimension name must not be empty")
    if _is_blank(value):
        raise ValidationError(f"Dimension value for {name!r} must not be empty")
    if len(name) > MAX_DIMENSION_NAME_LENGTH:
        raise ValidationError(
            f"Dimension name {name[:32]!r}... exceeds "
            f"{MAX_DIMENSION_NAME_LENGTH} characters"
        )
    if len(value) > MAX_DIMENSION_VALUE_LENGTH:
        raise ValidationError(
            f"Dimension value for {name!r} exceeds "
            f"{MAX_DIMENSION_VALUE_LENGTH} characters"
        )
    if not name.isascii():
        raise ValidationError(f"Dimension name {name!r} has non-ASCII characters")
    if not value.isascii():
        raise ValidationError(
            f"Dimension value for {name!r} has non-ASCII characters"
        )
    if name.startswith(":"):
        raise ValidationError(f"Dimension name {name!r} cannot start with ':'")


def validate_metric(
    name: str,
    value: float,
    storage_resolution: StorageResolution,
    registered: Mapping[str, StorageResolution],
) -> None:
    """Validate a metric sample against its name's registration history.

    Args:
        name: Metric name.
        value: Sample value; must be a finite real number.
        storage_resolution: Resolution requested for this sample.
        registered: Resolutions already recorded per metric name.

    Raises:
        ValidationError: If the name is empty or too long, the value is not
            a finite number, or the resolution is not a StorageResolution.
        InvalidMetricError: If ``name`` was first recorded with a different
            storage resolution.
    """
    if _is_blank(name):
        raise ValidationError("Metric name must not be empty")
    if name == METADATA_KEY:
        raise ValidationError(
            f"Metric name {METADATA_KEY!r} is reserved for metadata"
        )
    if len(name) > MAX_METRIC_NAME_LENGTH:
        raise ValidationError(
            f"Metric name {name[:32]!r}... exceeds {MAX_METRIC_NAME_LENGTH} characters"
        )
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(
            f"Value for metric {name!r} must be a number, "
            f"got {type(value).__name__}"
        )
    try:
        as_float = float(value)
    except OverflowError as e:
        raise ValidationError(
            f"Value for metric {name!r} is too large for a double"
        ) from e
    if not math.isfinite(as_float):
        raise ValidationError(
            f"Value for metric {name!r} must be finite, got {value}"
        )
    if not isinstance(storage_resolution, StorageResolution):
        raise ValidationError(
            f"Storage resolution for metric {name!r} must be a StorageResolution, "
            f"got {storage_resolution!r}"
        )
    previous = registered.get(name)
    if previous is not None and previous != storage_resolution:
        raise InvalidMetricError(
            f"Metric {name!r} was recorded with {previous.name} resolution "
            f"and cannot be reused with {storage_resolution.name}"
        )


def validate_namespace(namespace: str) -> None:
    """Validate a metric namespace.

    Raises:
        ValidationError: If the namespace is empty, too long, or contains
            characters outside ``[a-zA-Z0-9._#:/-]``.
    """
    if _is_blank(namespace):
        raise ValidationError("Namespace must not be empty")
    if len(namespace) > MAX_NAMESPACE_LENGTH:
        raise ValidationError(f"Namespace exceeds {MAX_NAMESPACE_LENGTH} characters")
    if not _NAMESPACE_RE.match(namespace):
        raise ValidationError(f"Namespace {namespace!r} contains invalid characters")


def validate_property_key(name: str) -> None:
    """Validate a top-level property key.

    Raises:
        ValidationError: If the key is empty or collides with the metadata key.
    """
    if not isinstance(name, str) or not name:
        raise ValidationError("Property name must be a non-empty string")
    if name == METADATA_KEY:
        raise ValidationError(
            f"Property name {METADATA_KEY!r} is reserved for metadata"
        )


def validate_property_value(value: PropertyValue, path: str = "value") -> None:
    """Check that ``value`` is a JSON-serializable property value.

    Accepts strings, finite numbers, booleans, and lists and string-keyed
    dicts of those, nested to any depth.

    Raises:
        ValidationError: On any other type, a non-finite float, or a
            non-string mapping key.
    """
    if isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"{path} must be finite, got {value}")
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            validate_property_value(item, f"{path}[{index}]")
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValidationError(f"{path} has non-string key {key!r}")
            validate_property_value(item, f"{path}[{key!r}]")
        return
    raise ValidationError(f"{path} has unsupported type {type(value).__name__}")


def validate_timestamp(timestamp: datetime, now: datetime) -> None:
    """Check that ``timestamp`` falls inside the window the backend accepts.

    Raises:
        ValidationError: If the timestamp is more than 14 days in the past
            or more than 2 hours in the future relative to ``now``.
    """
    if timestamp < now - MAX_TIMESTAMP_PAST_AGE:
        raise ValidationError(
            f"Timestamp {timestamp.isoformat()} is more than "
            f"{MAX_TIMESTAMP_PAST_AGE.days} days in the past"
        )
    if timestamp > now + MAX_TIMESTAMP_FUTURE_AGE:
        raise ValidationError(
            f"Timestamp {timestamp.isoformat()} is more than "
            f"{MAX_TIMESTAMP_FUTURE_AGE} in the future"
        )
