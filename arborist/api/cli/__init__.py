"""Arborist developer CLI."""
