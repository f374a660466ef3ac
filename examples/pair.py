#!/usr/bin/env python
#
# Pair with a device, then print its inputs and its settings tree.
#

import asyncio
import sys

import smartcast


async def dump(setting, indent=1):
    for child in await setting.expand():
        print("%s%s (%s): %r" % ("   " * indent, child.name, child.kind.name, child.value()))
        if child.kind is smartcast.SettingKind.MENU:
            await dump(child, indent + 1)


async def main(ip):
    device = await smartcast.Device.from_ip(ip)
    try:
        pairing = await device.begin_pair("smartcast example", "smartcast-example-1")
        pin = input("PIN shown on %s: " % device.name)
        token = await device.finish_pair(pairing, pin)
        # Keep this and pass it as auth_token= next time.
        print("Auth token: %s" % token)

        for device_input in await device.list_inputs():
            print(device_input.name, "-", device_input.friendly_name)
        print("Current input:", (await device.current_input()).name)

        await dump(device.root_setting())
    finally:
        await device.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1]))
