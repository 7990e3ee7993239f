"""Tests for input validators."""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from emfkit.core.exceptions import InvalidMetricError, ValidationError
from emfkit.core.models import StorageResolution
from emfkit.core.validation import (
    validate_metric,
    validate_namespace,
    validate_property_value,
    validate_timestamp,
)

pytestmark = [pytest.mark.unit, pytest.mark.tier(0)]


class TestValidateMetric:
    """Tests for validate_metric()."""

    @pytest.mark.tra("Core.Validation.Metric.Resolution")
    def test_same_resolution_passes(self) -> None:
        """A name already registered with the same resolution is accepted."""
        registered = {"X": StorageResolution.HIGH}

        validate_metric("X", 1.0, StorageResolution.HIGH, registered)

    @pytest.mark.tra("Core.Validation.Metric.Resolution")
    def test_other_resolution_raises(self) -> None:
        """A name registered with another resolution is rejected."""
        registered = {"X": StorageResolution.HIGH}

        with pytest.raises(InvalidMetricError, match="HIGH"):
            validate_metric("X", 1.0, StorageResolution.STANDARD, registered)

    @pytest.mark.tra("Core.Validation.Metric.Resolution")
    def test_non_enum_resolution_raises(self) -> None:
        """Resolutions must be StorageResolution members."""
        with pytest.raises(ValidationError):
            validate_metric("X", 1.0, 60, {})  # type: ignore[arg-type]

    @pytest.mark.tra("Core.Validation.Metric.Name")
    def test_long_name_raises(self) -> None:
        """Names longer than 1024 characters are rejected."""
        validate_metric("n" * 1024, 1.0, StorageResolution.STANDARD, {})
        with pytest.raises(ValidationError):
            validate_metric("n" * 1025, 1.0, StorageResolution.STANDARD, {})

    @pytest.mark.tra("Core.Validation.Metric.Property.FiniteValues")
    @given(value=st.floats(allow_nan=False, allow_infinity=False))
    def test_any_finite_float_passes(self, value: float) -> None:
        """Every finite float is a valid sample."""
        validate_metric("X", value, StorageResolution.STANDARD, {})


class TestValidateNamespace:
    """Tests for validate_namespace()."""

    @pytest.mark.tra("Core.Validation.Namespace")
    @pytest.mark.parametrize("namespace", ["App", "a.b_c#d:e/f-g", "n" * 256])
    def test_valid_namespaces(self, namespace: str) -> None:
        """Allowed characters within the length limit pass."""
        validate_namespace(namespace)

    @pytest.mark.tra("Core.Validation.Namespace")
    @pytest.mark.parametrize("namespace", ["", " ", "a b", "ünï", "n" * 257])
    def test_invalid_namespaces(self, namespace: str) -> None:
        """Empty, too long or oddly-charactered namespaces fail."""
        with pytest.raises(ValidationError):
            validate_namespace(namespace)


class TestValidatePropertyValue:
    """Tests for validate_property_value()."""

    @pytest.mark.tra("Core.Validation.Property.Path")
    def test_error_names_nested_path(self) -> None:
        """The error message points at the offending nested item."""
        with pytest.raises(ValidationError, match=r"value\['a'\]\[1\]"):
            validate_property_value({"a": [1, object()]})  # type: ignore[list-item]

    @pytest.mark.tra("Core.Validation.Property.Tuple")
    def test_tuples_are_accepted(self) -> None:
        """Tuples serialize as JSON arrays and are accepted."""
        validate_property_value(("a", 1))  # type: ignore[arg-type]


class TestValidateTimestamp:
    """Tests for validate_timestamp()."""

    NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.tra("Core.Validation.Timestamp")
    @pytest.mark.parametrize(
        "offset", [timedelta(days=-14), timedelta(0), timedelta(hours=2)]
    )
    def test_window_edges_pass(self, offset: timedelta) -> None:
        """The window is inclusive at both ends."""
        validate_timestamp(self.NOW + offset, self.NOW)

    @pytest.mark.tra("Core.Validation.Timestamp")
    @pytest.mark.parametrize(
        "offset",
        [timedelta(days=-14, seconds=-1), timedelta(hours=2, seconds=1)],
    )
    def test_outside_window_raises(self, offset: timedelta) -> None:
        """One second outside the window is rejected."""
        with pytest.raises(ValidationError):
            validate_timestamp(self.NOW + offset, self.NOW)
