#!/usr/bin/env python3
"""
directly wired GPIO lines

A thin wrapper around digitalio.DigitalInOut which remembers the line's
direction and refuses to be used after it was released.
"""

import logging
from enum import Enum

LH = logging.getLogger('feeph.fezhat')


class LineDirection(Enum):
    INPUT  = 1
    OUTPUT = 2


class GpioLine:

    def __init__(self, io, direction: LineDirection, value: bool = False, name: str = "<unnamed>"):
        """
        wrap an opened digitalio.DigitalInOut (or a compatible object)
        and switch it to the requested direction

        'value' is the initial state of an output line
        """
        self._io = io
        self._name = name
        self._released = False
        self._direction = direction
        self.set_direction(direction, value=value)

    def get_name(self) -> str:
        return self._name

    def get_direction(self) -> LineDirection:
        return self._direction

    def set_direction(self, direction: LineDirection, value: bool = False):
        self._ensure_active()
        if direction == LineDirection.OUTPUT:
            self._io.switch_to_output(value=value)
        elif direction == LineDirection.INPUT:
            self._io.switch_to_input()
        else:
            raise ValueError(f"unsupported line direction '{direction}'")
        self._direction = direction

    def read(self) -> bool:
        self._ensure_active()
        return bool(self._io.value)

    def write(self, value: bool):
        self._ensure_active()
        if self._direction != LineDirection.OUTPUT:
            raise RuntimeError(f"line {self._name} is not configured as output")
        self._io.value = value

    def release(self):
        """
        release the underlying pin

        releasing a line more than once has no effect
        """
        if not self._released:
            self._released = True
            self._io.deinit()

    def is_released(self) -> bool:
        return self._released

    def _ensure_active(self):
        if self._released:
            raise RuntimeError(f"line {self._name} has been released")


def open_line(pin_number: int, direction: LineDirection, value: bool = False) -> GpioLine:
    """
    open the GPIO line with the provided (BCM) number
    """
    # modules board and digitalio can only be imported on supported hardware
    import board  # type: ignore
    import digitalio  # type: ignore
    pin = getattr(board, f"D{pin_number}", None)
    if pin is None:
        raise ValueError(f"GPIO line {pin_number} is not available on this board")
    LH.debug("Opening GPIO line D%i as %s.", pin_number, direction.name.lower())
    return GpioLine(io=digitalio.DigitalInOut(pin), direction=direction, value=value, name=f"D{pin_number}")
