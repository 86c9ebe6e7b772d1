"""Numerical core: symmetric map, palette builder and hit histogram."""
