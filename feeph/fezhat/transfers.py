#!/usr/bin/env python3
"""
multi-byte register transfers

BurstHandle reads and writes one register at a time. Some operations need
to move several consecutive registers in a single bus transaction (e.g.
the PCA9685's 4 tick registers or the MMA8453's 6 byte burst read). These
functions perform such transfers while holding the bus lock.
"""

import logging

# module busio provides no type hints
import busio  # type: ignore
from feeph.i2c import BurstHandler

LH = logging.getLogger('feeph.fezhat')


def write_block(i2c_bus: busio.I2C, i2c_adr: int, register: int, values: bytes | bytearray | list[int], max_tries: int = 1):
    """
    write consecutive registers in a single transaction, starting with
    the provided register
     - the device must have register auto-increment enabled
     - a failed transaction raises a RuntimeError, it is only repeated
       if 'max_tries' asks for it
    """
    buf = bytearray(1 + len(values))
    buf[0] = register
    for i, value in enumerate(values):
        buf[1 + i] = value & 0xFF
    with BurstHandler(i2c_bus=i2c_bus, i2c_adr=i2c_adr):
        for cur_try in range(1, 1 + max_tries):
            try:
                i2c_bus.writeto(address=i2c_adr, buffer=buf)
                return
            except OSError as e:
                # [Errno 121] Remote I/O error
                LH.warning("Failed to write %i bytes to register 0x%02X of device 0x%02X (%i/%i): %s", len(values), register, i2c_adr, cur_try, max_tries, e)
        else:
            raise RuntimeError(f"Unable to write register 0x{register:02X} of device 0x{i2c_adr:02X} after {cur_try} attempts. Giving up.")


def read_block(i2c_bus: busio.I2C, i2c_adr: int, register: int, byte_count: int, max_tries: int = 1) -> bytearray:
    """
    read consecutive registers in a single transaction, starting with
    the provided register
     - a failed transaction raises a RuntimeError, it is only repeated
       if 'max_tries' asks for it
    """
    if byte_count < 1:
        raise ValueError(f"provided byte count {byte_count} is out of range (1 ≤ x)")
    buf_w = bytearray(1)
    buf_w[0] = register
    buf_r = bytearray(byte_count)
    with BurstHandler(i2c_bus=i2c_bus, i2c_adr=i2c_adr):
        for cur_try in range(1, 1 + max_tries):
            try:
                i2c_bus.writeto_then_readfrom(address=i2c_adr, buffer_out=buf_w, buffer_in=buf_r)
                return buf_r
            except OSError as e:
                # [Errno 121] Remote I/O error
                LH.warning("Failed to read %i bytes from register 0x%02X of device 0x%02X (%i/%i): %s", byte_count, register, i2c_adr, cur_try, max_tries, e)
        else:
            raise RuntimeError(f"Unable to read register 0x{register:02X} of device 0x{i2c_adr:02X} after {cur_try} attempts. Giving up.")
