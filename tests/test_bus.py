#!/usr/bin/env python3
# pylint: disable=missing-class-docstring,missing-function-docstring,missing-module-docstring

import unittest

from fezhat_simulation import create_fezhat_bus

import feeph.fezhat.bus as sut  # system under test


class CountingFactory:

    def __init__(self):
        self.buses = []

    def __call__(self):
        i2c_bus = create_fezhat_bus()
        i2c_bus.deinit_count = 0

        def deinit():
            i2c_bus.deinit_count += 1
        i2c_bus.deinit = deinit
        self.buses.append(i2c_bus)
        return i2c_bus


class TestSharedI2cBus(unittest.TestCase):

    def setUp(self):
        self.factory = CountingFactory()
        self.shared_bus = sut.SharedI2cBus(factory=self.factory)

    def test_acquire(self):
        # -----------------------------------------------------------------
        bus1 = self.shared_bus.acquire()
        bus2 = self.shared_bus.acquire()
        # -----------------------------------------------------------------
        self.assertIs(bus1, bus2)
        self.assertEqual(len(self.factory.buses), 1, "bus must only be opened once")
        self.assertEqual(self.shared_bus.get_reference_count(), 2)
        self.assertTrue(self.shared_bus.is_open())

    def test_release(self):
        bus1 = self.shared_bus.acquire()
        bus2 = self.shared_bus.acquire()
        # -----------------------------------------------------------------
        self.shared_bus.release(bus1)
        # -----------------------------------------------------------------
        self.assertTrue(self.shared_bus.is_open())
        self.assertEqual(bus2.deinit_count, 0)
        # -----------------------------------------------------------------
        self.shared_bus.release(bus2)
        # -----------------------------------------------------------------
        self.assertFalse(self.shared_bus.is_open())
        self.assertEqual(self.shared_bus.get_reference_count(), 0)
        self.assertEqual(bus2.deinit_count, 1)

    def test_reopen(self):
        bus1 = self.shared_bus.acquire()
        self.shared_bus.release(bus1)
        # -----------------------------------------------------------------
        bus2 = self.shared_bus.acquire()
        # -----------------------------------------------------------------
        self.assertIsNot(bus1, bus2)
        self.assertEqual(len(self.factory.buses), 2)

    def test_release_unknown_bus(self):
        self.shared_bus.acquire()
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(RuntimeError, self.shared_bus.release, create_fezhat_bus())
        self.assertEqual(self.shared_bus.get_reference_count(), 1)

    def test_release_unopened_bus(self):
        # -----------------------------------------------------------------
        # -----------------------------------------------------------------
        self.assertRaises(RuntimeError, self.shared_bus.release, create_fezhat_bus())
