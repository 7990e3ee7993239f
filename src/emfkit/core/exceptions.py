"""Exceptions raised while building EMF documents."""


class EMFError(Exception):
    """Base class for all emfkit errors."""


class ValidationError(EMFError, ValueError):
    """Input is malformed or would push the document past a backend limit."""


class InvalidMetricError(ValidationError):
    """A metric name was reused with a conflicting storage resolution."""


class DuplicateKeyError(EMFError, ValueError):
    """A metadata key is already present in the document."""
