#!/usr/bin/env python3
# pylint: disable=missing-class-docstring,missing-function-docstring,missing-module-docstring

import unittest

from feeph.i2c import EmulatedI2C
from fezhat_simulation import SimulatedI2C

import feeph.fezhat.ads7830 as sut  # system under test


class TestAds7830(unittest.TestCase):

    def setUp(self):
        self.i2c_adr = 0x48
        registers = {
            0x84: 0x00,  # channel 0
            0xC4: 0x40,  # channel 1
            0x94: 0x80,  # channel 2
            0xD4: 0xFF,  # channel 3
            0xA4: 0x33,  # channel 4
            0xE4: 0x66,  # channel 5
            0xB4: 0x99,  # channel 6
            0xF4: 0xCC,  # channel 7
        }
        self.i2c_bus = EmulatedI2C(state={self.i2c_adr: registers})
        self.adc = sut.ADS7830(i2c_bus=self.i2c_bus, i2c_adr=self.i2c_adr)

    def test_get_address(self):
        values = {
            (False, False): 0x48,
            (True,  False): 0x49,
            (False, True):  0x4A,
            (True,  True):  0x4B,
        }
        for pins, address in values.items():
            computed = sut.get_address(*pins)
            expected = address
            self.assertEqual(computed, expected)

    def test_convert_channel2command(self):
        values = [0x84, 0xC4, 0x94, 0xD4, 0xA4, 0xE4, 0xB4, 0xF4]
        for channel, command in enumerate(values):
            computed = sut.convert_channel2command(channel)
            expected = command
            self.assertEqual(computed, expected, f"unexpected command for channel {channel}")

    def test_convert_channel2command_invalid(self):
        for channel in [-1, 8, 255]:
            self.assertRaises(ValueError, sut.convert_channel2command, channel)

    def test_read_raw(self):
        values = [0x00, 0x40, 0x80, 0xFF, 0x33, 0x66, 0x99, 0xCC]
        for channel, value in enumerate(values):
            computed = self.adc.read_raw(channel)
            expected = value
            self.assertEqual(computed, expected, f"unexpected value for channel {channel}")

    def test_read(self):
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertEqual(self.adc.read(0), 0.0)
        self.assertEqual(self.adc.read(3), 1.0)
        self.assertAlmostEqual(self.adc.read(2), 128 / 255)

    def test_read_invalid_channel(self):
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(ValueError, self.adc.read, -1)
        self.assertRaises(ValueError, self.adc.read, 8)

    def test_read_after_release(self):
        self.adc.deinit()
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertTrue(self.adc.is_released())
        self.assertRaises(RuntimeError, self.adc.read, 0)

    def test_read_single_failure(self):
        i2c_bus = SimulatedI2C(state={self.i2c_adr: {0x84: 0x80}})
        adc = sut.ADS7830(i2c_bus=i2c_bus, i2c_adr=self.i2c_adr)
        attempts = []

        # fail the first read only
        def read_fault_injector(address: int, register: int) -> bool:
            attempts.append(register)
            return len(attempts) == 1
        i2c_bus.read_fault_injector = read_fault_injector
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(RuntimeError, adc.read_raw, 0)
        self.assertEqual(len(attempts), 1, "a failed read must not be repeated")
        self.assertEqual(adc.read_raw(0), 0x80)
