"""Matchers that judge observed values, and transforms applied before matching."""

__all__ = ["basic", "core", "patterns", "semver_constraint", "transforms"]