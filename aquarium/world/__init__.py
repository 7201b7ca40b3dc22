"""World-space helpers for the aquarium."""

from .viewport import Viewport, ViewportModel

__all__ = ["Viewport", "ViewportModel"]
