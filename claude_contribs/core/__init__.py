"""
Core modules for Claude Contribs.

This package contains the aggregation pipeline: record validation,
deduplication, daily aggregation, intensity classification and grid layout.
"""
