"""Core EMF document model."""
