"""Shared test fixtures for all test modules."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from emfkit import DimensionSet, MetricsContext


@pytest.fixture
def context() -> MetricsContext:
    """Provide an empty metrics context in a test namespace."""
    metrics_context = MetricsContext()
    metrics_context.namespace = "TestNamespace"
    return metrics_context


@pytest.fixture
def service_context(context: MetricsContext) -> MetricsContext:
    """Context with default dimension Service=X."""
    context.default_dimensions = DimensionSet("Service", "X")
    return context


@pytest.fixture
def parse_payloads() -> Callable[[list[str]], list[dict[str, Any]]]:
    """Factory fixture that decodes serialized EMF payloads.

    Also checks that every payload is a single line, as log transports
    require one document per line.
    """

    def _parse(payloads: list[str]) -> list[dict[str, Any]]:
        for payload in payloads:
            assert "\n" not in payload
        return [json.loads(payload) for payload in payloads]

    return _parse


def metric_names(document: dict[str, Any]) -> list[str]:
    """Names listed in the metric definitions of a decoded document."""
    directive = document["_aws"]["CloudWatchMetrics"][0]
    return [metric["Name"] for metric in directive["Metrics"]]


@pytest.fixture
def names_of() -> Callable[[dict[str, Any]], list[str]]:
    """Fixture exposing metric_names() to test modules."""
    return metric_names
