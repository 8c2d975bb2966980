#!/usr/bin/env python3
"""
the GHI FEZ HAT

The board combines a PWM controller (PCA9685), an analog-to-digital
converter (ADS7830) and an accelerometer (MMA8453) with a couple of
directly wired GPIO lines. This module ties them together and provides
the motors, servos and RGB LEDs found on the board.
"""

import logging
from collections.abc import Callable

# module busio provides no type hints
import busio  # type: ignore

from feeph.fezhat.ads7830 import ADS7830
from feeph.fezhat.bus import SharedI2cBus, shared_i2c_bus
from feeph.fezhat.conversions import convert_voltage2temperature
from feeph.fezhat.gpio import GpioLine, LineDirection, open_line
from feeph.fezhat.mma8453 import MMA8453
from feeph.fezhat.motor import Motor
from feeph.fezhat.pca9685 import PCA9685
from feeph.fezhat.pins import (ADS7830_ADDRESS, D2_CHANNELS, D3_CHANNELS, DEFAULT_PWM_FREQUENCY, LIGHT_CHANNEL, MMA8453_ADDRESS, MOTOR_A_CHANNEL,
                               MOTOR_B_CHANNEL, PCA9685_ADDRESS, S1_CHANNEL, S2_CHANNEL, TEMPERATURE_CHANNEL, AnalogPin, DigitalPin, PinConfig, PwmPin,
                               fezhat_default_pins)
from feeph.fezhat.rgb_led import RgbLed
from feeph.fezhat.servo import Servo

LH = logging.getLogger('feeph.fezhat')

LineFactory = Callable[[int, LineDirection, bool], GpioLine]


class FezHat:
    """
    interface to the FEZ HAT

    Construction either succeeds completely or releases everything it
    acquired and raises. Use deinit() (or a with statement) to release
    the board.

    Boards on the same bus share the PWM controller's frequency and
    frequency claims. Creating a second board fails while a calibrated
    servo of the first board requires a frequency other than 1500Hz.
    """

    def __init__(self, i2c_bus: busio.I2C | None = None, pin_config: PinConfig = fezhat_default_pins, line_factory: LineFactory = open_line, shared_bus: SharedI2cBus = shared_i2c_bus):
        """
        initialize the board

        If no I²C bus is provided the process-wide shared bus is used.
        A provided bus remains owned by the caller.
        """
        self._shared_bus = shared_bus
        self._owns_bus = i2c_bus is None
        self._i2c_bus = None
        self._lines: list[GpioLine] = []
        self._drivers: list[PCA9685 | ADS7830 | MMA8453] = []
        self._released = False
        try:
            self._setup(i2c_bus=i2c_bus, pin_config=pin_config, line_factory=line_factory)
        except Exception:
            LH.error("Unable to initialize the FEZ HAT. Releasing acquired resources.")
            self._release_resources()
            raise
        LH.info("FEZ HAT initialized.")

    def _setup(self, i2c_bus: busio.I2C | None, pin_config: PinConfig, line_factory: LineFactory):
        if i2c_bus is None:
            i2c_bus = self._shared_bus.acquire()
        self._i2c_bus = i2c_bus

        def open_managed_line(pin_number: int, direction: LineDirection, value: bool = False) -> GpioLine:
            line = line_factory(pin_number, direction, value)
            self._lines.append(line)
            return line

        # -- chip drivers --
        self._accelerometer = MMA8453(i2c_bus=i2c_bus, i2c_adr=MMA8453_ADDRESS)
        self._drivers.append(self._accelerometer)
        self._analog = ADS7830(i2c_bus=i2c_bus, i2c_adr=ADS7830_ADDRESS)
        self._drivers.append(self._analog)
        # keep outputs disabled (OE is active-low) until the chip is configured
        output_enable = open_managed_line(pin_config.pwm_output_enable, LineDirection.OUTPUT, True)
        self._pwm = PCA9685(i2c_bus=i2c_bus, i2c_adr=PCA9685_ADDRESS, output_enable=output_enable, frequency=DEFAULT_PWM_FREQUENCY)
        self._drivers.append(self._pwm)
        self._pwm.set_output_enabled(True)

        # -- GPIO lines --
        self._dio16 = open_managed_line(pin_config.dio16, LineDirection.INPUT)
        self._dio26 = open_managed_line(pin_config.dio26, LineDirection.INPUT)
        self._dio24 = open_managed_line(pin_config.dio24, LineDirection.OUTPUT)
        self._dio18 = open_managed_line(pin_config.dio18, LineDirection.INPUT)
        self._dio22 = open_managed_line(pin_config.dio22, LineDirection.INPUT)
        self._digital_lines = {
            DigitalPin.DIO16: self._dio16,
            DigitalPin.DIO26: self._dio26,
        }
        self._motor_enable = open_managed_line(pin_config.motor_enable, LineDirection.OUTPUT)
        self._motor_enable.write(True)

        # -- actuators --
        self.motor_a = Motor(
            pwm=self._pwm,
            pwm_channel=MOTOR_A_CHANNEL,
            direction1=open_managed_line(pin_config.motor_a_direction[0], LineDirection.OUTPUT),
            direction2=open_managed_line(pin_config.motor_a_direction[1], LineDirection.OUTPUT),
        )
        self.motor_b = Motor(
            pwm=self._pwm,
            pwm_channel=MOTOR_B_CHANNEL,
            direction1=open_managed_line(pin_config.motor_b_direction[0], LineDirection.OUTPUT),
            direction2=open_managed_line(pin_config.motor_b_direction[1], LineDirection.OUTPUT),
        )
        self.d2 = RgbLed(self._pwm, *D2_CHANNELS)
        self.d3 = RgbLed(self._pwm, *D3_CHANNELS)
        self.s1 = Servo(self._pwm, S1_CHANNEL)
        self.s2 = Servo(self._pwm, S2_CHANNEL)

    # ---------------------------------------------------------------------
    # PWM
    # ---------------------------------------------------------------------

    def get_pwm_frequency(self) -> int:
        return self._pwm.get_frequency()

    def set_pwm_frequency(self, frequency: int):
        """
        change the frequency of ALL PWM channels (motors, servos, LEDs
        and header pins)

        Motors generally prefer a high frequency, servos require 50Hz.
        Raises a RuntimeError while a calibrated servo depends on a
        different frequency.
        """
        self._ensure_active()
        self._pwm.set_frequency(frequency)

    def set_pwm_duty_cycle(self, pin: PwmPin, value: float):
        """
        set the duty cycle (0.0 ≤ x ≤ 1.0) of a PWM pin on the header
        """
        self._ensure_active()
        if not isinstance(pin, PwmPin):
            raise ValueError(f"unsupported PWM pin '{pin}'")
        self._pwm.set_duty_cycle(pin.value, value)

    # ---------------------------------------------------------------------
    # digital and analog pins
    # ---------------------------------------------------------------------

    def write_digital(self, pin: DigitalPin, state: bool):
        """
        drive a digital pin on the header

        Side effect: an input pin is switched to output first.
        """
        self._ensure_active()
        line = self._get_digital_line(pin)
        if line.get_direction() != LineDirection.OUTPUT:
            LH.debug("Switching %s to output.", pin.name)
            line.set_direction(LineDirection.OUTPUT, value=state)
        line.write(state)

    def read_digital(self, pin: DigitalPin) -> bool:
        """
        read a digital pin on the header

        Side effect: an output pin is switched to input first.
        """
        self._ensure_active()
        line = self._get_digital_line(pin)
        if line.get_direction() != LineDirection.INPUT:
            LH.debug("Switching %s to input.", pin.name)
            line.set_direction(LineDirection.INPUT)
        return line.read()

    def read_analog(self, pin: AnalogPin) -> float:
        """
        read the voltage on an analog pin (0.0 = 0V, 1.0 = 3.3V)
        """
        self._ensure_active()
        if not isinstance(pin, AnalogPin):
            raise ValueError(f"unsupported analog pin '{pin}'")
        return self._analog.read(pin.value)

    def _get_digital_line(self, pin: DigitalPin) -> GpioLine:
        if not isinstance(pin, DigitalPin):
            raise ValueError(f"unsupported digital pin '{pin}'")
        return self._digital_lines[pin]

    # ---------------------------------------------------------------------
    # onboard sensors, buttons and LEDs
    # ---------------------------------------------------------------------

    def get_light_level(self) -> float:
        """
        get the light level (0.0 = dark, 1.0 = bright)
        """
        self._ensure_active()
        return self._analog.read(LIGHT_CHANNEL)

    def get_temperature(self) -> float:
        """
        get the board temperature in °C
        """
        self._ensure_active()
        return convert_voltage2temperature(self._analog.read(TEMPERATURE_CHANNEL))

    def get_acceleration(self) -> tuple[float, float, float]:
        """
        get the acceleration (in g) for the X, Y and Z axis
        """
        self._ensure_active()
        return self._accelerometer.get_acceleration()

    def is_dio18_pressed(self) -> bool:
        self._ensure_active()
        return not self._dio18.read()

    def is_dio22_pressed(self) -> bool:
        self._ensure_active()
        return not self._dio22.read()

    def is_dio24_on(self) -> bool:
        self._ensure_active()
        return self._dio24.read()

    def set_dio24(self, state: bool):
        self._ensure_active()
        self._dio24.write(state)

    # ---------------------------------------------------------------------

    def deinit(self):
        """
        release the chip drivers, the GPIO lines and the I²C bus

        releasing the board more than once has no effect
        """
        if not self._released:
            LH.info("Releasing FEZ HAT.")
            self._release_resources()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.deinit()

    def is_released(self) -> bool:
        return self._released

    def _release_resources(self):
        self._released = True
        try:
            for driver in self._drivers:
                driver.deinit()
            self._drivers.clear()
            self._release_lines()
        finally:
            i2c_bus = self._i2c_bus
            self._i2c_bus = None
            if self._owns_bus and i2c_bus is not None:
                self._shared_bus.release(i2c_bus)

    def _release_lines(self):
        """
        release all GPIO lines, a line which fails to release does not
        keep the remaining lines from being released

        the first failure is raised after all lines were processed
        """
        lines = self._lines
        self._lines = []
        failure = None
        for line in lines:
            try:
                line.release()
            except Exception as e:
                LH.error("Unable to release GPIO line %s: %s", line.get_name(), e)
                if failure is None:
                    failure = e
        if failure is not None:
            raise failure

    def _ensure_active(self):
        if self._released:
            raise RuntimeError("FEZ HAT has been released")
