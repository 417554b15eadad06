"""Hierarchical aggregation engine for weekly outcome records."""
