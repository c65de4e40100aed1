"""Shared helpers for Arborist CLI commands."""
