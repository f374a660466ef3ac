import asyncio
import unittest
from functools import wraps

import smartcast
from tests.const import (
    CLOSED_PORT,
    DEVICE_MODEL,
    DEVICE_NAME,
    DEVICE_UUID,
    LOCALHOST,
    SIM_PORT,
)
from tests.simulated_device import SimulatedDevice


def async_test(f):
    """
    Decorator to create asyncio context for asyncio methods or functions.
    """
    @wraps(f)
    def g(*args, **kwargs):
        args[0].loop.run_until_complete(f(*args, **kwargs))
    return g


class AsyncTestCase(unittest.TestCase):
    """
    Gives each test class its own event loop.
    """

    @classmethod
    def setUpClass(cls):
        cls.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(cls.loop)

    @classmethod
    def tearDownClass(cls):
        cls.loop.close()
        asyncio.set_event_loop(None)


class SimulatedDeviceTestCase(AsyncTestCase):
    """
    Starts a fresh SimulatedDevice for every test and connects a Device to it.
    The first candidate port is closed, so every connection goes through the
    port probe.
    """

    simulator_kwargs = {}
    device_kwargs = {}
    connect = True

    def setUp(self):
        self.sim = self.make_simulator()
        self.device = None
        self.loop.run_until_complete(self.sim.start(LOCALHOST, SIM_PORT))
        self.addCleanup(self.cleanup)
        if self.connect:
            self.device = self.make_device()
            self.loop.run_until_complete(self.device.async_init())

    def cleanup(self):
        async def run():
            if self.device is not None:
                await self.device.close()
            await self.sim.stop()
        self.loop.run_until_complete(run())

    def make_simulator(self):
        return SimulatedDevice(**self.simulator_kwargs)

    def make_device(self, **kwargs):
        options = dict(ports=(CLOSED_PORT, SIM_PORT), scheme="http")
        options.update(self.device_kwargs)
        options.update(kwargs)
        return smartcast.Device(
            DEVICE_NAME, "VIZIO", DEVICE_MODEL, LOCALHOST, DEVICE_UUID, **options
        )
