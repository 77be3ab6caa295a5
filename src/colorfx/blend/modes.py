"""
Blend mode enumeration.
"""

from enum import IntEnum


class BlendMode(IntEnum):
    """
    Rule combining a bottom and a top color during compositing.

    ``ALPHA`` is an alias of ``NORMAL`` and ``LINEAR_DODGE`` of ``ADD``.
    Lookup by name is case-insensitive (``BlendMode("soft_light")``).
    """

    NORMAL = 0
    ALPHA = 0
    DISSOLVE = 1
    MULTIPLY = 2
    SCREEN = 3
    DIVIDE = 4
    REMAINDER = 5
    BOTTOM = 6
    TOP = 7
    COLOR_BURN = 8
    COLOR_DODGE = 9
    HUE = 10
    SATURATION = 11
    COLOR = 12
    LUMINOSITY = 13
    DARKEN = 14
    LIGHTEN = 15
    OVERLAY = 16
    SOFT_LIGHT = 17
    HARD_LIGHT = 18
    ADD = 19
    LINEAR_DODGE = 19
    SUBTRACT = 20
    DIFFERENCE = 21
    EXCLUSION = 22
    AVERAGE = 23
    HARD_MIX = 24
    PIN_LIGHT = 25
    VIVID_LIGHT = 26
    LINEAR_LIGHT = 27
    HALFWAY_LERP = 28
    BINARY_OR = 29
    BINARY_AND = 30
    BINARY_XOR = 31
    BINARY_NOR = 32
    BINARY_NAND = 33
    BINARY_NXOR = 34
    BINARY_SHL = 35
    BINARY_SHR = 36
    BINARY_ROL = 37
    BINARY_ROR = 38

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_").replace(" ", "_")
            member = cls.__members__.get(key)
            if member is not None:
                return member
        return None

    @property
    def is_bitwise(self) -> bool:
        """Operates on the packed word and bypasses alpha compositing."""
        return self >= BlendMode.BINARY_OR

    @property
    def is_stochastic(self) -> bool:
        return self is BlendMode.DISSOLVE


NON_SEPARABLE_MODES = frozenset(
    {BlendMode.HUE, BlendMode.SATURATION, BlendMode.COLOR, BlendMode.LUMINOSITY}
)
