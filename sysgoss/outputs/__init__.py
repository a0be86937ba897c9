"""Namespace for test-result reporters; it holds none at present."""

__all__: list[str] = []