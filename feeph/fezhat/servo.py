#!/usr/bin/env python3
"""
hobby servos attached to a PWM channel

A servo expects a pulse every 20ms (50Hz). The pulse width determines
the servo's position. Since the PWM frequency is shared by all channels
calibrating a servo claims 50Hz on the PWM controller. Other actuators
will continue to work at this frequency, changing it to something else
is rejected until the servo's limits are reset.
"""

import logging

from attrs import define, frozen

from feeph.fezhat.conversions import convert_pulsewidth2ticks
from feeph.fezhat.pca9685 import PCA9685, TICKS_MAX

LH = logging.getLogger('feeph.fezhat')


SERVO_FREQUENCY = 50  # Hz


@define(eq=True)
class ServoLimits:
    """
    calibration profile of a servo

    pulse widths are in µs, angles in whatever unit the caller prefers
    """
    minimum_pulse_width: int
    maximum_pulse_width: int
    minimum_angle: float
    maximum_angle: float


@frozen
class ServoCalibration:
    minimum_ticks: int
    maximum_ticks: int
    minimum_angle: float
    maximum_angle: float
    scale: float
    offset: float
    frequency: int  # the frequency the ticks were computed for


class Servo:

    def __init__(self, pwm: PCA9685, channel: int):
        self._pwm = pwm
        self._channel = channel
        self._name = f"servo on channel {channel}"
        self._calibration: ServoCalibration | None = None
        self._position: float | None = None

    def is_calibrated(self) -> bool:
        return self._calibration is not None

    def get_calibration(self) -> ServoCalibration | None:
        return self._calibration

    def set_limits(self, minimum_pulse_width: int, maximum_pulse_width: int, minimum_angle: float, maximum_angle: float):
        """
        calibrate the servo

        'minimum_pulse_width' is the pulse width (in µs) which moves the
        servo to 'minimum_angle', 'maximum_pulse_width' moves it to
        'maximum_angle'

        Side effect: sets the PWM controller's frequency to 50Hz. This
        affects all other channels as well.
        """
        if minimum_pulse_width < 0:
            raise ValueError("minimum pulse width can't be negative")
        if maximum_pulse_width < 0:
            raise ValueError("maximum pulse width can't be negative")
        if minimum_angle < 0:
            raise ValueError("minimum angle can't be negative")
        if maximum_angle < 0:
            raise ValueError("maximum angle can't be negative")
        if minimum_pulse_width >= maximum_pulse_width:
            raise ValueError("minimum pulse width must be smaller than maximum pulse width")
        if minimum_angle >= maximum_angle:
            raise ValueError("minimum angle must be smaller than maximum angle")
        if convert_pulsewidth2ticks(maximum_pulse_width, frequency=SERVO_FREQUENCY) > TICKS_MAX:
            raise ValueError(f"maximum pulse width {maximum_pulse_width}µs exceeds the PWM period at {SERVO_FREQUENCY}Hz")
        self._pwm.claim_frequency(owner=self._name, frequency=SERVO_FREQUENCY)
        frequency = self._pwm.get_frequency()
        minimum_ticks = convert_pulsewidth2ticks(minimum_pulse_width, frequency=frequency)
        maximum_ticks = convert_pulsewidth2ticks(maximum_pulse_width, frequency=frequency)
        scale = (maximum_ticks - minimum_ticks) / (maximum_angle - minimum_angle)
        offset = minimum_ticks - scale * minimum_angle
        LH.debug("%s: %i-%iµs -> %i-%i ticks (scale: %f, offset: %f)", self._name, minimum_pulse_width, maximum_pulse_width, minimum_ticks, maximum_ticks, scale, offset)
        self._calibration = ServoCalibration(
            minimum_ticks=minimum_ticks,
            maximum_ticks=maximum_ticks,
            minimum_angle=minimum_angle,
            maximum_angle=maximum_angle,
            scale=scale,
            offset=offset,
            frequency=frequency,
        )
        self._position = None

    def apply_limits(self, limits: ServoLimits):
        self.set_limits(
            minimum_pulse_width=limits.minimum_pulse_width,
            maximum_pulse_width=limits.maximum_pulse_width,
            minimum_angle=limits.minimum_angle,
            maximum_angle=limits.maximum_angle,
        )

    def reset_limits(self):
        """
        forget the calibration and release the servo's claim on the
        PWM frequency
        """
        self._pwm.release_frequency(owner=self._name)
        self._calibration = None
        self._position = None

    def get_position(self) -> float | None:
        """
        get the most recently set position ('None' if there is none)
        """
        if self._calibration is None:
            raise RuntimeError(f"{self._name} is not calibrated, call set_limits() first")
        return self._position

    def set_position(self, angle: float):
        calibration = self._calibration
        if calibration is None:
            raise RuntimeError(f"{self._name} is not calibrated, call set_limits() first")
        if not calibration.minimum_angle <= angle <= calibration.maximum_angle:
            raise ValueError(f"provided angle {angle} is out of range ({calibration.minimum_angle} ≤ x ≤ {calibration.maximum_angle})")
        if self._pwm.get_frequency() != calibration.frequency:
            raise RuntimeError(f"{self._name} was calibrated for {calibration.frequency}Hz but the PWM frequency is {self._pwm.get_frequency()}Hz")
        ticks = round(calibration.scale * angle + calibration.offset)
        self._pwm.set_channel(self._channel, 0x0000, ticks)
        self._position = angle


def export_servo_limits(limits: ServoLimits) -> dict[str, int | float]:
    return {
        'minimum_pulse_width': limits.minimum_pulse_width,
        'maximum_pulse_width': limits.maximum_pulse_width,
        'minimum_angle': limits.minimum_angle,
        'maximum_angle': limits.maximum_angle,
    }


def import_servo_limits(data: dict[str, int | float]) -> ServoLimits:
    try:
        return ServoLimits(
            minimum_pulse_width=int(data['minimum_pulse_width']),
            maximum_pulse_width=int(data['maximum_pulse_width']),
            minimum_angle=float(data['minimum_angle']),
            maximum_angle=float(data['maximum_angle']),
        )
    except KeyError as e:
        raise ValueError(f"servo limits are missing {e}") from e


# typical hobby servo (e.g. SG90)
generic_servo = ServoLimits(minimum_pulse_width=500, maximum_pulse_width=2400, minimum_angle=0, maximum_angle=180)
