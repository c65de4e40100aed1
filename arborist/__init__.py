"""Arborist - hierarchical placement and hybrid retrieval for work item trees."""

__version__ = "0.1.0"
