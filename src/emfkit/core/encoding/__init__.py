"""Encoders for EMF documents."""
