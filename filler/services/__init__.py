"""Batch pipeline services: matching, grouping, transforming, naming, sinks, orchestration."""
