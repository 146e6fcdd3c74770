"""Utility helpers shared across the snippetpick package."""
