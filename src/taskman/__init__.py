"""taskman: a personal day-by-day task tracker with a durable JSON store."""

__version__ = "0.1.0"
