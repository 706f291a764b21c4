"""Operational metrics."""
