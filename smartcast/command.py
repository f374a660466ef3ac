"""
Commands understood by the device's HTTP/JSON API.

Each command knows its HTTP method, how to build its path once the device's
settings root is known, and how to serialize its JSON body. Commands are
plain values: build one per call and hand it to Device.send_command().
"""
import re

from .const import DYNAMIC, MENU_BASE, STATIC


GET = "GET"
PUT = "PUT"

CANCEL_PIN = "1111"


def sanitize_pin(pin):
    """
    Keep only the digits of a user-entered PIN.
    """
    return re.sub(r"\D", "", str(pin))


def menu_path(base, settings_root, path=""):
    """
    /menu_native/{static|dynamic}/{settings_root}[/{path}]
    """
    if base not in (STATIC, DYNAMIC):
        raise ValueError("Unknown menu base %r" % (base,))
    endpoint = "%s/%s/%s" % (MENU_BASE, base, settings_root)
    if path:
        endpoint += "/" + path.strip("/")
    return endpoint


class Command(object):
    request_type = GET
    path = None

    def endpoint(self, settings_root=None):
        return self.path

    def body(self):
        return None

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.body() or "")


class MenuCommand(Command):
    """
    A command whose path lives under the device's settings root.
    """

    base = DYNAMIC

    def endpoint(self, settings_root=None):
        if not settings_root:
            raise ValueError("%s needs the device's settings root" % self.__class__.__name__)
        return menu_path(self.base, settings_root, self.path)


class StartPairing(Command):
    request_type = PUT
    path = "/pairing/start"

    def __init__(self, client_name, client_id):
        self.client_name = client_name
        self.client_id = client_id

    def body(self):
        return dict(DEVICE_NAME=self.client_name, DEVICE_ID=self.client_id)


class FinishPairing(Command):
    request_type = PUT
    path = "/pairing/pair"

    def __init__(self, client_id, pairing_token, challenge, pin):
        self.client_id = client_id
        self.pairing_token = pairing_token
        self.challenge = challenge
        self.pin = sanitize_pin(pin)

    def body(self):
        return dict(
            DEVICE_ID=self.client_id,
            CHALLENGE_TYPE=self.challenge,
            RESPONSE_VALUE=self.pin,
            PAIRING_REQ_TOKEN=self.pairing_token,
        )


class CancelPairing(FinishPairing):
    path = "/pairing/cancel"

    def __init__(self, client_id, pairing_token, challenge):
        super(CancelPairing, self).__init__(
            client_id, pairing_token, challenge, CANCEL_PIN
        )


class GetPowerState(Command):
    path = "/state/device/power_mode"


class GetDeviceInfo(Command):
    path = "/state/device/deviceinfo"


class RemoteButtonPress(Command):
    request_type = PUT
    path = "/key_command/"

    def __init__(self, keylist):
        self.keylist = list(keylist)

    def body(self):
        return dict(KEYLIST=self.keylist)


class GetCurrentInput(MenuCommand):
    path = "devices/current_input"


class GetInputList(MenuCommand):
    path = "devices/name_input"


class ChangeInput(MenuCommand):
    request_type = PUT
    path = "devices/current_input"

    def __init__(self, name, hashval):
        self.name = name
        self.hashval = hashval

    def body(self):
        return dict(REQUEST="MODIFY", VALUE=self.name, HASHVAL=self.hashval)


class GetCurrentApp(Command):
    path = "/app/current"


class LaunchApp(Command):
    request_type = PUT
    path = "/app/launch"

    def __init__(self, payload):
        self.payload = payload

    def body(self):
        return dict(VALUE=self.payload)


class ReadSettings(MenuCommand):
    def __init__(self, base, path):
        self.base = base
        self.path = path

    def __repr__(self):
        return "<ReadSettings %s %r>" % (self.base, self.path)


class WriteSettings(MenuCommand):
    request_type = PUT

    def __init__(self, path, hashval, value):
        self.path = path
        self.hashval = hashval
        self.value = value

    def body(self):
        return dict(REQUEST="MODIFY", VALUE=self.value, HASHVAL=self.hashval)
