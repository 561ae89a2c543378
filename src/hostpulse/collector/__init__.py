"""Metric collectors and snapshot assembly."""
