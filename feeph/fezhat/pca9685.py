#!/usr/bin/env python3
"""
interface to the PCA9685 16-channel, 12-bit PWM controller

datasheet: https://www.nxp.com/docs/en/data-sheet/PCA9685.pdf

All 16 channels share the same frequency. Changing the frequency affects
every channel, including channels used by motors or servos. Actuators
which depend on a specific frequency should claim it (see
claim_frequency()) so conflicting changes are rejected instead of
silently breaking them.

Drivers for the same chip (same bus, same address) share the chip's
frequency and claims. A driver created while another one is still in
use does not reinitialize the chip.
"""

import logging
import threading
import time
import weakref

# module busio provides no type hints
import busio  # type: ignore
from feeph.i2c import BurstHandler

from feeph.fezhat.conversions import convert_dutycycle2ticks, convert_frequency2prescale
from feeph.fezhat.gpio import GpioLine
from feeph.fezhat.transfers import read_block, write_block

LH = logging.getLogger('feeph.fezhat')


CHANNEL_COUNT = 16
TICKS_MAX = 0x0FFF
FULL_ON_OFF = 0x1000  # bit 4 of LEDn_ON_H / LEDn_OFF_H (datasheet section 7.3.3)

# registers
MODE1     = 0x00
MODE2     = 0x01
LED0_ON_L = 0x06  # 4 registers per channel: ON_L, ON_H, OFF_L, OFF_H
PRESCALE  = 0xFE

# MODE1 (datasheet section 7.3.1)
MODE1_RESTART = 0b1000_0000
MODE1_AI      = 0b0010_0000  # register auto-increment
MODE1_SLEEP   = 0b0001_0000  # low power mode, oscillator off
# MODE2 (datasheet section 7.3.2)
MODE2_OUTDRV  = 0b0000_0100  # totem pole outputs


def get_address(a0: bool, a1: bool, a2: bool, a3: bool, a4: bool, a5: bool) -> int:
    """
    compute the I²C address from the address select pins
    (all False -> 0x40, all True -> 0x7F)
    """
    address = 0x40
    for bit, is_set in enumerate([a0, a1, a2, a3, a4, a5]):
        if is_set:
            address |= 1 << bit
    return address


class ChipState:
    """
    state of a physical chip, shared by all drivers using it
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.frequency = 0
        # (driver, owner) -> frequency
        self.claims: dict[tuple[object, str], int] = {}
        self.drivers = 0


# bus -> address -> chip state
_chip_states: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
_chip_states_lock = threading.Lock()


def _get_chip_state(i2c_bus: busio.I2C, i2c_adr: int) -> ChipState:
    with _chip_states_lock:
        states = _chip_states.setdefault(i2c_bus, {})
        return states.setdefault(i2c_adr, ChipState())


class PCA9685:
    """
    interface to the PCA9685 PWM controller
    """

    def __init__(self, i2c_bus: busio.I2C, i2c_adr: int = 0x40, output_enable: GpioLine | None = None, frequency: int = 200):
        """
        initialize the chip

        'output_enable' is the line connected to the chip's active-low OE
        pin. If the pin is hard-wired the outputs are always enabled.

        If another driver is already using the chip the configuration is
        kept and only the frequency is changed. This is rejected with a
        RuntimeError if an actuator depends on a different frequency.
        """
        self._i2c_bus = i2c_bus
        self._i2c_adr = i2c_adr
        self._output_enable = output_enable
        self._released = False
        self._state = _get_chip_state(i2c_bus=i2c_bus, i2c_adr=i2c_adr)
        self._lock = self._state.lock
        with self._lock:
            if self._state.drivers == 0:
                with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
                    bh.write_register(MODE1, MODE1_AI, max_tries=1)
                    bh.write_register(MODE2, MODE2_OUTDRV, max_tries=1)
                self._apply_frequency(frequency)
            elif self._state.frequency != frequency:
                LH.info("PCA9685 (0x%02X) is already in use, changing its frequency from %iHz to %iHz.", self._i2c_adr, self._state.frequency, frequency)
                self._check_claims(frequency)
                self._apply_frequency(frequency)
            self._state.drivers += 1

    # ---------------------------------------------------------------------
    # frequency
    # ---------------------------------------------------------------------

    def get_frequency(self) -> int:
        """
        get the configured (not the effective) frequency in Hz
        """
        return self._state.frequency

    def get_prescale(self) -> int:
        """
        read the prescaler from the chip
        """
        self._ensure_active()
        with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
            return bh.read_register(PRESCALE, max_tries=1)

    def set_frequency(self, frequency: int):
        """
        change the frequency of all channels

        Raises a RuntimeError if an actuator depends on a different
        frequency.
        """
        convert_frequency2prescale(frequency)  # range check
        with self._lock:
            self._ensure_active()
            self._check_claims(frequency)
            self._apply_frequency(frequency)

    def claim_frequency(self, owner: str, frequency: int):
        """
        declare that 'owner' depends on the provided frequency and apply
        it if necessary

        Raises a RuntimeError if another owner requires a different
        frequency. Claiming again replaces the owner's previous claim.
        """
        convert_frequency2prescale(frequency)  # range check
        with self._lock:
            self._ensure_active()
            self._check_claims(frequency, ignore=(self, owner))
            if self._state.frequency != frequency:
                LH.info("Changing PWM frequency from %iHz to %iHz as requested by %s.", self._state.frequency, frequency, owner)
                self._apply_frequency(frequency)
            self._state.claims[(self, owner)] = frequency

    def release_frequency(self, owner: str):
        with self._lock:
            self._state.claims.pop((self, owner), None)

    def get_frequency_claims(self) -> dict[str, int]:
        """
        get the frequency claims of all actuators using the chip
        """
        with self._lock:
            return {owner: frequency for (_, owner), frequency in self._state.claims.items()}

    def _check_claims(self, frequency: int, ignore: tuple[object, str] | None = None):
        for key, required in self._state.claims.items():
            if key != ignore and required != frequency:
                raise RuntimeError(f"unable to change frequency to {frequency}Hz: {key[1]} requires {required}Hz")

    def _apply_frequency(self, frequency: int):
        # the prescaler can only be written while the chip is asleep
        # (datasheet section 7.3.5)
        prescale = convert_frequency2prescale(frequency)
        LH.debug("PWM frequency: %iHz -> prescale: %i", frequency, prescale)
        with self._lock:
            with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
                mode1 = bh.read_register(MODE1, max_tries=1) & ~MODE1_RESTART & ~MODE1_SLEEP & 0xFF
            try:
                with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
                    bh.write_register(MODE1, mode1 | MODE1_SLEEP, max_tries=1)
                    bh.write_register(PRESCALE, prescale, max_tries=1)
            finally:
                # the chip must be woken up even if the prescaler could not be written
                self._wake_up(mode1)
            self._state.frequency = frequency

    def _wake_up(self, mode1: int):
        try:
            with BurstHandler(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr) as bh:
                bh.write_register(MODE1, mode1, max_tries=1)
                # oscillator needs 500µs to stabilize
                time.sleep(0.0005)
                bh.write_register(MODE1, mode1 | MODE1_RESTART, max_tries=1)
                restored = bh.read_register(MODE1, max_tries=1)
        except RuntimeError as e:
            LH.error("Failed to wake up PCA9685 after changing the prescaler.")
            raise RuntimeError(f"PCA9685 (0x{self._i2c_adr:02X}) may still be asleep: {e}") from e
        if restored & MODE1_SLEEP:
            LH.error("PCA9685 did not leave sleep mode. (MODE1: 0x%02X)", restored)
            raise RuntimeError(f"PCA9685 (0x{self._i2c_adr:02X}) did not leave sleep mode")

    # ---------------------------------------------------------------------
    # output control
    # ---------------------------------------------------------------------

    def is_output_enabled(self) -> bool:
        self._ensure_active()
        if self._output_enable is not None:
            # active-low
            return not self._output_enable.read()
        else:
            return True

    def set_output_enabled(self, enabled: bool):
        """
        physically drive (or float) all outputs

        outputs must be enabled before any channel has an effect
        """
        self._ensure_active()
        if self._output_enable is not None:
            self._output_enable.write(not enabled)
        elif not enabled:
            raise RuntimeError("unable to disable outputs: no output enable line available")

    # ---------------------------------------------------------------------
    # channel control
    # ---------------------------------------------------------------------

    def set_duty_cycle(self, channel: int, value: float):
        """
        set the channel's duty cycle (0.0 ≤ x ≤ 1.0)

        A duty cycle of 0.0 uses the chip's full-off setting. Programming
        an off tick of 0 instead would still produce a short pulse.
        """
        _validate_channel(channel)
        off = convert_dutycycle2ticks(value)
        if value == 0.0:
            off = FULL_ON_OFF
        self.set_channel(channel, 0x0000, off)

    def set_channel(self, channel: int, on: int, off: int):
        """
        set the raw tick values at which the channel turns on and off
        (0 ≤ x ≤ 4095, 4096 selects full-on or full-off)
        """
        _validate_channel(channel)
        if not 0 <= on <= FULL_ON_OFF:
            raise ValueError(f"provided on tick {on} is out of range (0 ≤ x ≤ 4096)")
        if not 0 <= off <= FULL_ON_OFF:
            raise ValueError(f"provided off tick {off} is out of range (0 ≤ x ≤ 4096)")
        with self._lock:
            self._ensure_active()
            values = [on & 0xFF, on >> 8, off & 0xFF, off >> 8]
            write_block(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr, register=_get_channel_register(channel), values=values)

    def get_channel(self, channel: int) -> tuple[int, int]:
        """
        read the raw tick values (on, off) from the chip
        """
        _validate_channel(channel)
        with self._lock:
            self._ensure_active()
            buf = read_block(i2c_bus=self._i2c_bus, i2c_adr=self._i2c_adr, register=_get_channel_register(channel), byte_count=4)
        on = buf[0] | (buf[1] << 8)
        off = buf[2] | (buf[3] << 8)
        return (on, off)

    def turn_on(self, channel: int):
        self.set_channel(channel, FULL_ON_OFF, 0x0000)

    def turn_off(self, channel: int):
        self.set_channel(channel, 0x0000, FULL_ON_OFF)

    # ---------------------------------------------------------------------

    def deinit(self):
        """
        release the driver and its frequency claims; any further use
        raises a RuntimeError

        releasing a driver more than once has no effect
        """
        with self._lock:
            if not self._released:
                self._released = True
                for key in [key for key in self._state.claims if key[0] is self]:
                    del self._state.claims[key]
                self._state.drivers -= 1

    def is_released(self) -> bool:
        return self._released

    def _ensure_active(self):
        if self._released:
            raise RuntimeError(f"PCA9685 (0x{self._i2c_adr:02X}) has been released")


def _validate_channel(channel: int):
    if not 0 <= channel < CHANNEL_COUNT:
        raise ValueError(f"provided channel {channel} is out of range (0 ≤ x ≤ {CHANNEL_COUNT - 1})")


def _get_channel_register(channel: int) -> int:
    return LED0_ON_L + 4 * channel
