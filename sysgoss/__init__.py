"""Server validation building blocks: value matchers, transforms and logging setup."""

__version__ = "0.1.0"

__all__ = ["logs", "matchers"]