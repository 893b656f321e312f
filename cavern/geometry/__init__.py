"""Geometry helpers."""

from cavern.geometry.outline import Outline

__all__ = ["Outline"]
