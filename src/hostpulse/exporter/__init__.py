"""Snapshot exporters."""
