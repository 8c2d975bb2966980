#!/usr/bin/env python3
"""
shared access to the board's I²C bus

All chips on the FEZ HAT sit on the same physical bus. Multiple FezHat
instances within the same process share a single bus handle, the handle
is closed once the last user releases it.
"""

import logging
import threading
from collections.abc import Callable

# module busio provides no type hints
import busio  # type: ignore

LH = logging.getLogger('feeph.fezhat')


def open_default_bus() -> busio.I2C:
    # module board can only be imported on supported hardware
    import board  # type: ignore
    return busio.I2C(scl=board.SCL, sda=board.SDA)


class SharedI2cBus:
    """
    a reference-counted I²C bus handle
    """

    def __init__(self, factory: Callable[[], busio.I2C] = open_default_bus):
        self._factory = factory
        self._lock = threading.Lock()
        self._i2c_bus = None
        self._references = 0

    def acquire(self) -> busio.I2C:
        """
        return the bus handle, opening the bus if nobody holds it yet
        """
        with self._lock:
            if self._i2c_bus is None:
                LH.debug("Opening I²C bus.")
                self._i2c_bus = self._factory()
            self._references += 1
            LH.debug("Acquired I²C bus. (references: %i)", self._references)
            return self._i2c_bus

    def release(self, i2c_bus: busio.I2C):
        """
        give up a reference obtained by acquire() and close the bus once
        the last reference is gone
        """
        with self._lock:
            if self._i2c_bus is None or i2c_bus is not self._i2c_bus:
                raise RuntimeError("provided bus was not acquired from this handle")
            self._references -= 1
            LH.debug("Released I²C bus. (references: %i)", self._references)
            if self._references == 0:
                LH.debug("Closing I²C bus.")
                bus = self._i2c_bus
                self._i2c_bus = None
                bus.deinit()

    def get_reference_count(self) -> int:
        with self._lock:
            return self._references

    def is_open(self) -> bool:
        with self._lock:
            return self._i2c_bus is not None


# the process-wide bus handle used by FezHat unless told otherwise
shared_i2c_bus = SharedI2cBus()
