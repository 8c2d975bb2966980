#!/usr/bin/env python3
"""
interface to the MMA8453 3-axis, 10-bit accelerometer

datasheet: https://www.nxp.com/docs/en/data-sheet/MMA8453Q.pdf
"""

import logging

# module busio provides no type hints
import busio  # type: ignore
from feeph.i2c import BurstHandler

from feeph.fezhat.conversions import convert_bytes2acceleration
from feeph.fezhat.transfers import read_block

LH = logging.getLogger('feeph.fezhat')


# registers
OUT_X_MSB = 0x01  # followed by OUT_X_LSB, OUT_Y_MSB, ..., OUT_Z_LSB
CTRL_REG1 = 0x2A

CTRL_REG1_ACTIVE = 0b0000_0001


def get_address(a0: bool) -> int:
    """
    compute the I²C address from the address select pin
    (False -> 0x1C, True -> 0x1D)
    """
    if a0:
        return 0x1D
    else:
        return 0x1C


class MMA8453:
    """
    interface to the MMA8453 accelerometer
    """

    def __init__(self, i2c_bus: busio.I2C, i2c_adr: int = 0x1C):
        """
        initialize the chip and put it into active mode

        may raise a RuntimeError if the chip can't be activated
        """
        self._i2c_bus = i2c_bus
        self._i2c_adr = i2c_adr
        self._released = False
        with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
            bh.write_register(CTRL_REG1, CTRL_REG1_ACTIVE, max_tries=1)

    def get_acceleration(self) -> tuple[float, float, float]:
        """
        get the current acceleration (in g) for the X, Y and Z axis

        All three values are taken from the same burst read.
        """
        self._ensure_active()
        buf = read_block(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr, register=OUT_X_MSB, byte_count=6)
        LH.debug("acceleration readings: %s", buf.hex())
        x = convert_bytes2acceleration(msb=buf[0], lsb=buf[1])
        y = convert_bytes2acceleration(msb=buf[2], lsb=buf[3])
        z = convert_bytes2acceleration(msb=buf[4], lsb=buf[5])
        return (x, y, z)

    def deinit(self):
        self._released = True

    def is_released(self) -> bool:
        return self._released

    def _ensure_active(self):
        if self._released:
            raise RuntimeError(f"MMA8453 (0x{self._i2c_adr:02X}) has been released")
