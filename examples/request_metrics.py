"""Record per-request metrics and flush them as EMF log lines.

Run with:
    python examples/request_metrics.py

Each printed line is one EMF document; when the lines land in CloudWatch
Logs the backend extracts the metrics from them.
"""

import logging
import random

from emfkit import DimensionSet, MetricsContext, StorageResolution, Unit

logger = logging.getLogger(__name__)


def handle_request(context: MetricsContext, route: str) -> None:
    """Record the metrics of one simulated request."""
    latency = random.uniform(5, 250)
    context.put_metric("Latency", latency, Unit.MILLISECONDS)
    context.put_metric("Requests", 1, Unit.COUNT)
    context.put_metric(f"Route.{route}", 1, Unit.COUNT, StorageResolution.HIGH)


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    context = MetricsContext()
    context.namespace = "ExampleApp"
    context.default_dimensions = DimensionSet("Service", "checkout")
    context.put_dimension("Region", "us-east-1")
    context.put_property("RequestBatch", "demo")
    context.put_metadata("Source", "examples")

    # 150 distinct routes push the document past the per-event metric limit
    for i in range(500):
        handle_request(context, route=f"r{i % 150}")

    for payload in context.serialize():
        print(payload)

    # The next flush keeps namespace, dimensions and properties
    next_context = context.create_copy_with_context()
    handle_request(next_context, route="r0")
    logger.info("Next flush holds %d metrics", next_context.metric_count)
    for payload in next_context.serialize():
        print(payload)


if __name__ == "__main__":
    main()
