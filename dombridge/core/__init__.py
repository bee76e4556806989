"""Core value types."""

from .vector import DegenerateVectorError, Vector2d

__all__ = ["Vector2d", "DegenerateVectorError"]
