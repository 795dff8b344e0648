"""Deduplicate static-analysis findings and enrich them with cached AI recommendations."""

__version__ = "0.1.0"
