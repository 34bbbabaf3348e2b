"""Shared helpers: HTTP, logging, and the error taxonomy."""
