"""BDD step definitions for metrics context features."""

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from emfkit import DimensionSet, InvalidMetricError, MetricsContext, StorageResolution

_RESOLUTIONS = {
    "standard": StorageResolution.STANDARD,
    "high": StorageResolution.HIGH,
}


@dataclass
class ContextScenario:
    """State shared between the steps of one scenario."""

    context: MetricsContext = field(default_factory=MetricsContext)
    copy: MetricsContext | None = None
    error: Exception | None = None

    def documents(self) -> list[dict[str, Any]]:
        return [json.loads(p) for p in self.context.serialize()]


@pytest.fixture
def scenario_state() -> ContextScenario:
    """Fresh scenario state for each test."""
    return ContextScenario()


# === Background Steps ===
@given(parsers.parse('a metrics context in namespace "{namespace}"'))
def step_context(scenario_state: ContextScenario, namespace: str) -> None:
    scenario_state.context.namespace = namespace


@given(parsers.parse('the default dimension "{name}" is "{value}"'))
def step_default_dimension(
    scenario_state: ContextScenario, name: str, value: str
) -> None:
    scenario_state.context.default_dimensions = DimensionSet(name, value)


@given(parsers.parse('the custom dimension "{name}" is "{value}"'))
def step_custom_dimension(
    scenario_state: ContextScenario, name: str, value: str
) -> None:
    scenario_state.context.put_dimension(name, value)


@given(parsers.parse('the property "{name}" is "{value}"'))
def step_property(scenario_state: ContextScenario, name: str, value: str) -> None:
    scenario_state.context.put_property(name, value)


# === Recording Steps ===
@when(parsers.parse("{n:d} distinct metrics are recorded"))
def when_distinct_metrics(scenario_state: ContextScenario, n: int) -> None:
    for i in range(n):
        scenario_state.context.put_metric(f"Metric{i}", float(i))


@when(
    parsers.parse(
        'the metric "{name}" is recorded with value {value:g} '
        "at {resolution} resolution"
    )
)
def when_metric_with_resolution(
    scenario_state: ContextScenario, name: str, value: float, resolution: str
) -> None:
    try:
        scenario_state.context.put_metric(name, value, _RESOLUTIONS[resolution])
    except InvalidMetricError as e:
        scenario_state.error = e


@when("the context is copied without custom dimensions")
def when_copied(scenario_state: ContextScenario) -> None:
    scenario_state.copy = scenario_state.context.create_copy_with_context(
        preserve_dimensions=False
    )


# === Serialization Steps ===
@then(
    parsers.re(r"serializing yields (?P<n>\d+) documents?"), converters={"n": int}
)
def then_document_count(scenario_state: ContextScenario, n: int) -> None:
    assert len(scenario_state.documents()) == n


@then(parsers.parse("every document holds at most {n:d} metrics"))
def then_max_metrics(scenario_state: ContextScenario, n: int) -> None:
    for document in scenario_state.documents():
        assert len(document["_aws"]["CloudWatchMetrics"][0]["Metrics"]) <= n


@then(parsers.parse('every document has the dimension "{name}" set to "{value}"'))
def then_dimension_everywhere(
    scenario_state: ContextScenario, name: str, value: str
) -> None:
    for document in scenario_state.documents():
        directive = document["_aws"]["CloudWatchMetrics"][0]
        assert all(name in keys for keys in directive["Dimensions"])
        assert document[name] == value


@then(parsers.parse('the metric "{name}" serializes as "{values}"'))
def then_metric_values(scenario_state: ContextScenario, name: str, values: str) -> None:
    expected = [float(v) for v in values.split(",")]
    [document] = scenario_state.documents()
    rendered = document[name]
    assert (rendered if isinstance(rendered, list) else [rendered]) == expected


# === Error Steps ===
@then("an InvalidMetricError is raised")
def then_invalid_metric(scenario_state: ContextScenario) -> None:
    assert isinstance(scenario_state.error, InvalidMetricError)


@then("no error is raised")
def then_no_error(scenario_state: ContextScenario) -> None:
    assert scenario_state.error is None


# === Copy Steps ===
@then(parsers.parse("the copy holds {n:d} metrics"))
def then_copy_metric_count(scenario_state: ContextScenario, n: int) -> None:
    assert scenario_state.copy is not None
    assert scenario_state.copy.metric_count == n


@then(parsers.parse('the copy has the property "{name}" set to "{value}"'))
def then_copy_property(scenario_state: ContextScenario, name: str, value: str) -> None:
    assert scenario_state.copy is not None
    assert scenario_state.copy.get_property(name) == value


@then(parsers.parse('the copy has the dimension sets "{keys}"'))
def then_copy_dimensions(scenario_state: ContextScenario, keys: str) -> None:
    assert scenario_state.copy is not None
    expected = [tuple(group.split("+")) for group in keys.split(",")]
    actual = [d.dimension_keys for d in scenario_state.copy.get_all_dimension_sets()]
    assert actual == expected
