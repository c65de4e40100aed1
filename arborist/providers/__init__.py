"""Concrete adapter implementations for Arborist."""
