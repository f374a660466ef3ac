# Copyright (c) 2012-2016, Ferry Boender <ferry.boender@gmail.com>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.


"""
This module provides a client for SmartCast displays and sound bars, which
are controlled over an HTTPS/JSON API. It implements device discovery
(SSDP plus the device description document), the pairing exchange, the
virtual remote and a navigator for the device's self-describing settings
tree.

The usual flow for working with a device is:

- Discover devices using SSDP.

  An M-SEARCH for the DIAL service type is multicast on every interface.
  Each answer points at a description document carrying the device's name,
  model and UUID. discover() returns those descriptions; discover_devices()
  also connects to each one. If you already know the address, use
  Device.from_ip() instead.

- Connect.

  Connecting finds which port the API listens on and reads the device's
  settings root, which prefixes every settings endpoint.

- Pair.

  Most calls need an auth token. begin_pair() makes the device show a PIN,
  finish_pair() sends it back and returns the token. Store the token and
  hand it to set_auth_token() (or the auth_token argument) next time.

- Control the device and walk its settings.

  settings() returns the top level of the settings tree. Menus are expanded
  on demand and leaves can be written; writes are checked against the
  setting's type, slider bounds and list elements before anything is sent.

Example:

------------------------------------------------------------------------------
import asyncio
import smartcast

async def main():
    for device in await smartcast.discover_devices(auth_token="Zmc3...."):
        print("%s (%s): %s" % (device.name, device.model, await device.current_input()))
        for setting in await device.settings():
            print("   %s %s" % (setting.name, setting.kind.name))
        await device.close()

asyncio.run(main())
------------------------------------------------------------------------------
"""
from smartcast import const, errors, remote, settings, ssdp, util  # noqa: F401
from .apps import App, AppCatalog, Payload
from .device import Device, discover_devices
from .errors import (
    APIError,
    DeviceNotFound,
    InvalidElement,
    NoReachablePort,
    OutOfBounds,
    ReadOnlySetting,
    SettingTypeError,
    SmartCastError,
    TransportError,
    UnexpectedResponse,
    UnrecognizedAPIError,
    ValidationError,
)
from .info import DeviceInfo, Input, SliderInfo
from .pairing import PairingData
from .remote import KEYDOWN, KEYPRESS, KEYUP, Button
from .settings import Setting, SettingKind
from .ssdp import Description, discover

__all__ = [
    "Device", "discover", "discover_devices", "Description", "DeviceInfo", "Input",
    "SliderInfo", "PairingData", "App", "AppCatalog", "Payload", "Button", "KEYDOWN",
    "KEYUP", "KEYPRESS", "Setting", "SettingKind", "SmartCastError", "TransportError",
    "NoReachablePort", "APIError", "UnrecognizedAPIError", "UnexpectedResponse",
    "DeviceNotFound", "ValidationError", "ReadOnlySetting", "SettingTypeError",
    "OutOfBounds", "InvalidElement",
]
