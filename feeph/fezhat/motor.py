#!/usr/bin/env python3

import logging

from feeph.fezhat.gpio import GpioLine
from feeph.fezhat.pca9685 import PCA9685

LH = logging.getLogger('feeph.fezhat')


class Motor:
    """
    a DC motor attached to an H-bridge

    The PWM channel controls the speed, the two direction lines select
    the direction. The direction lines are always complementary.
    """

    def __init__(self, pwm: PCA9685, pwm_channel: int, direction1: GpioLine, direction2: GpioLine):
        self._pwm = pwm
        self._pwm_channel = pwm_channel
        self._direction1 = direction1
        self._direction2 = direction2
        self._speed = 0.0
        # start in a defined state (same direction as set_speed(0))
        self._direction1.write(False)
        self._direction2.write(True)
        self._forward = False

    def get_speed(self) -> float:
        return self._speed

    def set_speed(self, value: float):
        """
        set the motor's speed (-1.0 ≤ x ≤ 1.0)

        the sign selects the direction, the magnitude the duty cycle
        """
        if not -1.0 <= value <= 1.0:
            raise ValueError(f"provided speed {value} is out of range (-1.0 ≤ x ≤ 1.0)")
        # stop driving the motor while the direction lines change
        self._pwm.set_duty_cycle(self._pwm_channel, 0.0)
        forward = value > 0
        if forward != self._forward:
            # deassert before assert: both lines must never be active at the same time
            LH.debug("Motor on channel %i: changing direction (forward: %s)", self._pwm_channel, forward)
            if forward:
                self._direction2.write(False)
                self._direction1.write(True)
            else:
                self._direction1.write(False)
                self._direction2.write(True)
            self._forward = forward
        self._pwm.set_duty_cycle(self._pwm_channel, abs(value))
        self._speed = value

    def stop(self):
        """
        stop driving the motor (the direction lines are left as they are)
        """
        self._pwm.set_duty_cycle(self._pwm_channel, 0.0)
        self._speed = 0.0
