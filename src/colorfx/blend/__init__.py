"""
Compositing: blend modes and the "over" operator.
"""

from colorfx.blend.api import composite, composite_array, dissolve_draws
from colorfx.blend.modes import NON_SEPARABLE_MODES, BlendMode

__all__ = [
    "BlendMode",
    "NON_SEPARABLE_MODES",
    "composite",
    "composite_array",
    "dissolve_draws",
]
