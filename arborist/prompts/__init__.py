"""Prompt templates for LLM-backed oracles."""
