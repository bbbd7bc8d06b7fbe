"""Presentation-side adapters that consume the task store."""
