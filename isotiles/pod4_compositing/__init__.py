"""
POD 4: Compositing Module
Assembles diamond tiles into the final encoded canvas
"""

from .compositor import CanvasCompositor

__all__ = [
    "CanvasCompositor"
]
