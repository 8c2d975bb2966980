#!/usr/bin/env python3
# pylint: disable=missing-class-docstring,missing-function-docstring,missing-module-docstring

import unittest

from fezhat_simulation import SimulatedI2C

import feeph.fezhat.servo as sut  # system under test
from feeph.fezhat.pca9685 import PCA9685


class TestServo(unittest.TestCase):

    def setUp(self):
        self.i2c_bus = SimulatedI2C(state={0x40: {}})
        self.pwm = PCA9685(i2c_bus=self.i2c_bus, i2c_adr=0x40, frequency=1500)
        self.servo = sut.Servo(self.pwm, 9)

    # ---------------------------------------------------------------------
    # calibration
    # ---------------------------------------------------------------------

    def test_uncalibrated(self):
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertFalse(self.servo.is_calibrated())
        self.assertRaises(RuntimeError, self.servo.set_position, 90)
        self.assertRaises(RuntimeError, self.servo.get_position)

    def test_set_limits(self):
        # -----------------------------------------------------------------
        self.servo.set_limits(500, 2400, 0, 180)
        # -----------------------------------------------------------------
        self.assertTrue(self.servo.is_calibrated())
        calibration = self.servo.get_calibration()
        self.assertEqual(calibration.minimum_ticks, 102)
        self.assertEqual(calibration.maximum_ticks, 491)
        self.assertEqual(calibration.frequency, 50)
        self.assertEqual(self.pwm.get_frequency(), 50, "calibration must switch to 50Hz")
        self.assertEqual(self.pwm.get_prescale(), 121)
        self.assertIsNone(self.servo.get_position())

    def test_set_limits_invalid(self):
        values = [
            (-1, 2400, 0, 180),
            (500, -1, 0, 180),
            (500, 2400, -1, 180),
            (500, 2400, 0, -1),
            (2400, 500, 0, 180),
            (500, 500, 0, 180),
            (500, 2400, 180, 0),
            (500, 2400, 90, 90),
        ]
        for limits in values:
            self.assertRaises(ValueError, self.servo.set_limits, *limits)
        self.assertFalse(self.servo.is_calibrated())
        self.assertEqual(self.pwm.get_frequency(), 1500, "frequency must remain unchanged")

    def test_set_limits_pulse_exceeds_period(self):
        # 20000µs is a full period at 50Hz (4096 ticks)
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(ValueError, self.servo.set_limits, 500, 25000, 0, 180)
        self.assertRaises(ValueError, self.servo.set_limits, 500, 20000, 0, 180)
        self.assertFalse(self.servo.is_calibrated())
        self.assertEqual(self.pwm.get_frequency(), 1500, "frequency must remain unchanged")

    def test_set_limits_longest_pulse(self):
        self.servo.set_limits(500, 19995, 0, 180)  # 4094 ticks
        # -----------------------------------------------------------------
        self.servo.set_position(180)
        # -----------------------------------------------------------------
        self.assertEqual(self.pwm.get_channel(9), (0, 4094))

    def test_apply_limits(self):
        # -----------------------------------------------------------------
        self.servo.apply_limits(sut.generic_servo)
        # -----------------------------------------------------------------
        calibration = self.servo.get_calibration()
        self.assertEqual((calibration.minimum_angle, calibration.maximum_angle), (0, 180))
        self.assertEqual((calibration.minimum_ticks, calibration.maximum_ticks), (102, 491))

    # ---------------------------------------------------------------------
    # positioning
    # ---------------------------------------------------------------------

    def test_set_position(self):
        self.servo.set_limits(500, 2400, 0, 180)
        values = {
            0:   102,
            45:  round(102 + 389 * 45 / 180),
            90:  round(102 + 389 * 90 / 180),
            180: 491,
        }
        for angle, ticks in values.items():
            self.servo.set_position(angle)
            computed = self.pwm.get_channel(9)
            expected = (0, ticks)
            self.assertEqual(computed, expected, f"unexpected ticks for {angle}°")
            self.assertEqual(self.servo.get_position(), angle)

    def test_set_position_offset(self):
        # the lower limit must map to the minimum pulse width
        self.servo.set_limits(500, 2400, 30, 150)
        # -----------------------------------------------------------------
        self.servo.set_position(30)
        # -----------------------------------------------------------------
        self.assertEqual(self.pwm.get_channel(9), (0, 102))
        # -----------------------------------------------------------------
        self.servo.set_position(150)
        # -----------------------------------------------------------------
        self.assertEqual(self.pwm.get_channel(9), (0, 491))

    def test_set_position_out_of_range(self):
        self.servo.set_limits(500, 2400, 0, 180)
        self.servo.set_position(90)
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(ValueError, self.servo.set_position, -1)
        self.assertRaises(ValueError, self.servo.set_position, 181)
        self.assertEqual(self.servo.get_position(), 90)

    def test_frequency_change_is_rejected(self):
        self.servo.set_limits(500, 2400, 0, 180)
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(RuntimeError, self.pwm.set_frequency, 1500)
        self.assertEqual(self.pwm.get_frequency(), 50)

    def test_stale_calibration(self):
        self.servo.set_limits(500, 2400, 0, 180)
        self.pwm.release_frequency(owner="servo on channel 9")
        self.pwm.set_frequency(60)
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(RuntimeError, self.servo.set_position, 90)

    def test_reset_limits(self):
        self.servo.set_limits(500, 2400, 0, 180)
        # -----------------------------------------------------------------
        self.servo.reset_limits()
        # -----------------------------------------------------------------
        self.assertFalse(self.servo.is_calibrated())
        self.assertEqual(self.pwm.get_frequency_claims(), {})
        self.pwm.set_frequency(1500)
        self.assertEqual(self.pwm.get_frequency(), 1500)

    def test_two_servos(self):
        other = sut.Servo(self.pwm, 10)
        self.servo.set_limits(500, 2400, 0, 180)
        # -----------------------------------------------------------------
        other.apply_limits(sut.generic_servo)
        # -----------------------------------------------------------------
        self.assertEqual(len(self.pwm.get_frequency_claims()), 2)
        self.servo.reset_limits()
        self.assertRaises(RuntimeError, self.pwm.set_frequency, 1500)


class TestServoLimits(unittest.TestCase):

    def test_export(self):
        limits = sut.ServoLimits(minimum_pulse_width=600, maximum_pulse_width=2300, minimum_angle=10, maximum_angle=170)
        # -----------------------------------------------------------------
        computed = sut.export_servo_limits(limits)
        # -----------------------------------------------------------------
        expected = {
            'minimum_pulse_width': 600,
            'maximum_pulse_width': 2300,
            'minimum_angle': 10,
            'maximum_angle': 170,
        }
        self.assertEqual(computed, expected)

    def test_import(self):
        data = {
            'minimum_pulse_width': 600,
            'maximum_pulse_width': 2300,
            'minimum_angle': 10,
            'maximum_angle': 170,
        }
        # -----------------------------------------------------------------
        computed = sut.import_servo_limits(data)
        # -----------------------------------------------------------------
        expected = sut.ServoLimits(minimum_pulse_width=600, maximum_pulse_width=2300, minimum_angle=10.0, maximum_angle=170.0)
        self.assertEqual(computed, expected)

    def test_import_incomplete(self):
        data = {
            'minimum_pulse_width': 600,
            'maximum_pulse_width': 2300,
        }
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(ValueError, sut.import_servo_limits, data)
