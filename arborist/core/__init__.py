"""Core models, configuration, exceptions and pure utilities for Arborist."""
