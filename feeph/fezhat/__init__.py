#!/usr/bin/env python3
"""
a driver for the GHI FEZ HAT expansion board

The board combines a PWM controller (PCA9685), an analog-to-digital
converter (ADS7830) and an accelerometer (MMA8453) with a handful of GPIO
lines. The main design goal is to expose the board's motors, servos, LEDs
and sensors without requiring any knowledge about the underlying chips.
"""

# typical usage scenarios
# =======================

# read the onboard sensors
# -------------------------------------------------------------------------
# from feeph.fezhat import FezHat
#
# with FezHat() as hat:
#     print("light level:", hat.get_light_level())
#     print("temperature:", hat.get_temperature())
#     print("acceleration:", hat.get_acceleration())
#     print("DIO18 pressed:", hat.is_dio18_pressed())
# -------------------------------------------------------------------------

# drive the actuators
# -> servos require 50Hz, calibrating a servo changes the frequency of
#    all PWM channels
# -------------------------------------------------------------------------
# from feeph.fezhat import FezHat, generic_servo
# from feeph.fezhat.color import CYAN
#
# hat = FezHat()
# hat.motor_a.set_speed(-0.5)
# hat.d2.set_color(CYAN)
# hat.s1.apply_limits(generic_servo)
# hat.s1.set_position(90)
# hat.deinit()
# -------------------------------------------------------------------------

# use the chips on their own
# -------------------------------------------------------------------------
# import board
# import busio
#
# from feeph.fezhat import ADS7830
#
# i2c_bus = busio.I2C(scl=board.SCL, sda=board.SDA)
# adc = ADS7830(i2c_bus=i2c_bus, i2c_adr=0x48)
# print("channel 3:", adc.read(3))
# -------------------------------------------------------------------------

# the following imports are provided for user convenience
# flake8: noqa: F401
from feeph.fezhat.ads7830 import ADS7830
from feeph.fezhat.bus import SharedI2cBus, shared_i2c_bus
from feeph.fezhat.color import Color
from feeph.fezhat.gpio import GpioLine, LineDirection
from feeph.fezhat.hat import FezHat
from feeph.fezhat.mma8453 import MMA8453
from feeph.fezhat.motor import Motor
from feeph.fezhat.pca9685 import PCA9685
from feeph.fezhat.pins import AnalogPin, DigitalPin, PinConfig, PwmPin, fezhat_default_pins
from feeph.fezhat.rgb_led import RgbLed
from feeph.fezhat.servo import Servo, ServoLimits, export_servo_limits, generic_servo, import_servo_limits
