"""
Renderers for contribution grids.

Provides terminal and SVG output for a built ContributionGrid.
"""

from .svg import render_svg
from .terminal import render_terminal

__all__ = ["render_svg", "render_terminal"]
