"""User-facing entry points for Arborist."""
