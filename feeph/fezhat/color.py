#!/usr/bin/env python3

from attrs import field, frozen


def _validate_intensity(instance, attribute, value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{attribute.name} intensity must be an integer")
    if not 0 <= value <= 255:
        raise ValueError(f"{attribute.name} intensity {value} is out of range (0 ≤ x ≤ 255)")


@frozen
class Color:
    """
    the color of an onboard RGB LED (8 bit per channel)
    """
    red:   int = field(validator=_validate_intensity)
    green: int = field(validator=_validate_intensity)
    blue:  int = field(validator=_validate_intensity)


RED     = Color(255,   0,   0)
GREEN   = Color(  0, 255,   0)  # noqa: E201
BLUE    = Color(  0,   0, 255)  # noqa: E201
CYAN    = Color(  0, 255, 255)  # noqa: E201
MAGENTA = Color(255,   0, 255)
YELLOW  = Color(255, 255,   0)
WHITE   = Color(255, 255, 255)
BLACK   = Color(  0,   0,   0)  # noqa: E201
