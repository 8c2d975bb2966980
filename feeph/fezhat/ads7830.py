#!/usr/bin/env python3
"""
interface to the ADS7830 8-channel, 8-bit analog-to-digital converter

datasheet: https://www.ti.com/lit/ds/symlink/ads7830.pdf

The chip has no registers. Each conversion is triggered by writing a
command byte which selects the input channel, the result is returned in
the following read.
"""

import logging

# module busio provides no type hints
import busio  # type: ignore
from feeph.i2c import BurstHandler

LH = logging.getLogger('feeph.fezhat')


CHANNEL_COUNT = 8

# command byte (datasheet table 2)
CMD_SINGLE_ENDED = 0b1000_0000  # SD: single-ended inputs
CMD_ADC_ON       = 0b0000_0100  # PD1/PD0: internal reference off, converter on


def get_address(a0: bool, a1: bool) -> int:
    """
    compute the I²C address from the address select pins
    (0x48 ≤ x ≤ 0x4B)
    """
    address = 0x48
    if a0:
        address |= 0b01
    if a1:
        address |= 0b10
    return address


class ADS7830:
    """
    interface to the ADS7830 analog-to-digital converter
    """

    def __init__(self, i2c_bus: busio.I2C, i2c_adr: int = 0x48):
        self._i2c_bus = i2c_bus
        self._i2c_adr = i2c_adr
        self._released = False

    def read_raw(self, channel: int) -> int:
        """
        sample the provided single-ended channel (0 ≤ x ≤ 255)
        """
        command = convert_channel2command(channel)
        self._ensure_active()
        with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
            value = bh.read_register(command, max_tries=1)
        LH.debug("ADC channel %i (command: 0x%02X) -> 0x%02X", channel, command, value)
        return value

    def read(self, channel: int) -> float:
        """
        sample the provided single-ended channel (0.0 ≤ x ≤ 1.0)
        """
        return self.read_raw(channel) / 255.0

    def deinit(self):
        self._released = True

    def is_released(self) -> bool:
        return self._released

    def _ensure_active(self):
        if self._released:
            raise RuntimeError(f"ADS7830 (0x{self._i2c_adr:02X}) has been released")


def convert_channel2command(channel: int) -> int:
    """
    compute the command byte for the provided single-ended channel

    The channel select bits are not sequential: even channels use the
    lower half of the select space, odd channels the upper half.
    (0 -> 0, 1 -> 4, 2 -> 1, 3 -> 5, ..., 7 -> 7)
    """
    if not 0 <= channel < CHANNEL_COUNT:
        raise ValueError(f"provided channel {channel} is out of range (0 ≤ x ≤ {CHANNEL_COUNT - 1})")
    if channel % 2 == 0:
        select = channel // 2
    else:
        select = (channel - 1) // 2 + 4
    return CMD_SINGLE_ENDED | (select << 4) | CMD_ADC_ON
