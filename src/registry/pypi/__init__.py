"""PyPI index access."""
