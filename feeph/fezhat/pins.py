#!/usr/bin/env python3
"""
FEZ HAT wiring
"""

from enum import Enum

from feeph.fezhat import ads7830, mma8453, pca9685

# I²C addresses (fixed by the board's strapping)
PCA9685_ADDRESS = pca9685.get_address(True, True, True, True, True, True)  # 0x7F
ADS7830_ADDRESS = ads7830.get_address(False, False)                         # 0x48
MMA8453_ADDRESS = mma8453.get_address(False)                                # 0x1C

DEFAULT_PWM_FREQUENCY = 1500  # Hz

# PWM channels
MOTOR_A_CHANNEL = 14
MOTOR_B_CHANNEL = 13
D2_CHANNELS = (1, 0, 2)   # red, green, blue
D3_CHANNELS = (4, 3, 15)  # red, green, blue
S1_CHANNEL = 9
S2_CHANNEL = 10

# ADC channels
TEMPERATURE_CHANNEL = 4
LIGHT_CHANNEL = 5


class PwmPin(Enum):
    """
    PWM channels exposed on the header
    """
    PWM5  = 5
    PWM6  = 6
    PWM7  = 7
    PWM11 = 11
    PWM12 = 12


class DigitalPin(Enum):
    """
    GPIO lines exposed on the header (BCM numbering)
    """
    DIO16 = 16
    DIO26 = 26


class AnalogPin(Enum):
    """
    ADC channels exposed on the header
    """
    AIN1 = 1
    AIN2 = 2
    AIN3 = 3
    AIN6 = 6
    AIN7 = 7


class PinConfig:

    def __init__(self, pwm_output_enable: int, motor_enable: int, motor_a_direction: tuple[int, int], motor_b_direction: tuple[int, int], dio16: int, dio26: int, dio24: int, dio18: int, dio22: int):
        """
        map the board's logical lines to GPIO lines (BCM numbering)

        These settings depend on the host's GPIO header.
        """
        self.pwm_output_enable = pwm_output_enable  # active-low
        self.motor_enable      = motor_enable
        self.motor_a_direction = motor_a_direction
        self.motor_b_direction = motor_b_direction
        self.dio16 = dio16  # header
        self.dio26 = dio26  # header
        self.dio24 = dio24  # red LED
        self.dio18 = dio18  # button, active-low
        self.dio22 = dio22  # button, active-low


# Raspberry Pi 40-pin header
fezhat_default_pins = PinConfig(
    pwm_output_enable=13,
    motor_enable=12,
    motor_a_direction=(27, 23),
    motor_b_direction=(6, 5),
    dio16=16,
    dio26=26,
    dio24=24,
    dio18=18,
    dio22=22,
)
