"""Limits and reserved names of the Embedded Metric Format."""

from datetime import timedelta

# Backend-enforced limits
MAX_METRICS_PER_EVENT = 100
MAX_DIMENSION_SETS = 9
MAX_DIMENSION_SET_SIZE = 30

MAX_DIMENSION_NAME_LENGTH = 250
MAX_DIMENSION_VALUE_LENGTH = 1024
MAX_METRIC_NAME_LENGTH = 1024
MAX_NAMESPACE_LENGTH = 256
VALID_NAMESPACE_PATTERN = r"^[a-zA-Z0-9._#:/-]+$"

MAX_TIMESTAMP_PAST_AGE = timedelta(days=14)
MAX_TIMESTAMP_FUTURE_AGE = timedelta(hours=2)

DEFAULT_NAMESPACE = "aws-embedded-metrics"

# Reserved document keys
METADATA_KEY = "_aws"
TIMESTAMP_KEY = "Timestamp"
CLOUDWATCH_METRICS_KEY = "CloudWatchMetrics"
RESERVED_METADATA_KEYS = frozenset({TIMESTAMP_KEY, CLOUDWATCH_METRICS_KEY})
