#!/usr/bin/env python3

import logging

from feeph.fezhat.color import BLACK, Color
from feeph.fezhat.pca9685 import PCA9685

LH = logging.getLogger('feeph.fezhat')


class RgbLed:
    """
    an RGB LED driven by three PWM channels
    """

    def __init__(self, pwm: PCA9685, red_channel: int, green_channel: int, blue_channel: int):
        self._pwm = pwm
        self._red_channel = red_channel
        self._green_channel = green_channel
        self._blue_channel = blue_channel
        self._color = BLACK

    def get_color(self) -> Color:
        return self._color

    def set_color(self, color: Color):
        if not isinstance(color, Color):
            raise ValueError("provided value is not a color")
        self._pwm.set_duty_cycle(self._red_channel, color.red / 255.0)
        self._pwm.set_duty_cycle(self._green_channel, color.green / 255.0)
        self._pwm.set_duty_cycle(self._blue_channel, color.blue / 255.0)
        self._color = color

    def turn_off(self):
        """
        turn off all three channels

        the stored color is reset as well, get_color() returns BLACK afterwards
        """
        self._pwm.set_duty_cycle(self._red_channel, 0.0)
        self._pwm.set_duty_cycle(self._green_channel, 0.0)
        self._pwm.set_duty_cycle(self._blue_channel, 0.0)
        self._color = BLACK
