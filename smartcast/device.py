import asyncio

import aiohttp

from .apps import AppCatalog, Payload
from .command import (
    PUT,
    ChangeInput,
    GetCurrentApp,
    GetCurrentInput,
    GetDeviceInfo,
    GetInputList,
    GetPowerState,
    LaunchApp,
    RemoteButtonPress,
)
from .const import (
    API_SCHEME,
    DESCRIPTION_PATH,
    DESCRIPTION_PORT,
    DISCOVER_TIMEOUT,
    HTTP_TIMEOUT,
    PORT_OPTIONS,
)
from .errors import (
    APIError,
    DeviceNotFound,
    NoReachablePort,
    SmartCastError,
    TransportError,
)
from .pairing import PairingMixin
from .remote import KEYDOWN, KEYPRESS, KEYUP, Button, key_event
from .response import process
from .settings import Setting
from .ssdp import async_describe, async_discover
from .util import _getLogger


class Device(PairingMixin):
    """
    A SmartCast device reachable over its HTTP/JSON API.

    Identity normally comes from discovery. The device isn't usable until
    async_init() has found its API port and settings root:

    >>> device = Device('Living Room', 'VIZIO', 'P65-F1', '192.168.0.14', '0e2b...')
    >>> await device.async_init()
    >>> await device.is_powered_on()
    True

    Pass `session` to share an aiohttp.ClientSession between devices. If none
    is given the device creates one and close() closes it.
    """

    def __init__(
        self,
        name,
        manufacturer,
        model,
        ip,
        uuid,
        session=None,
        ports=PORT_OPTIONS,
        scheme=API_SCHEME,
        auth_token=None,
        app_catalog=None,
        timeout=HTTP_TIMEOUT,
    ):
        self.name = name
        self.manufacturer = manufacturer
        self.model = model
        self.ip = ip
        self.uuid = uuid
        self.ports = tuple(ports)
        self.scheme = scheme
        self.timeout = timeout
        self.app_catalog = app_catalog or AppCatalog()
        self.info = None

        self.session = session
        self._owns_session = session is None
        self._port = None
        self._settings_root = None
        self._auth_token = auth_token
        self._token_lock = asyncio.Lock()
        self._log = _getLogger("Device")

    def __repr__(self):
        return "<Device '%s' %s:%s>" % (self.name, self.ip, self._port)

    @property
    def port(self):
        return self._port

    @property
    def settings_root(self):
        return self._settings_root

    @property
    def auth_token(self):
        return self._auth_token

    async def async_init(self):
        """
        Find the API port and read the settings root. Ports are tried in
        order; the first one that answers a device-info query is kept.
        """
        if self.session is None:
            self.session = aiohttp.ClientSession()
        response = await self._probe_ports()
        self.info = response.device_info()
        self._settings_root = self.info.settings_root
        self._log.debug(
            "%s: API on port %s, settings root %r",
            self.name,
            self._port,
            self._settings_root,
        )
        return self

    async def _probe_ports(self):
        exc = None
        for port in self.ports:
            self._port = port
            try:
                return await self.send_command(GetDeviceInfo())
            except TransportError as e:
                self._log.debug("%s: no API on port %s: %s", self.name, port, e)
                exc = e
        self._port = None
        raise NoReachablePort(self.ip, self.ports, exc)

    async def close(self):
        if self._owns_session and self.session is not None:
            await self.session.close()
        self.session = None

    def _url(self, command):
        return "%s://%s:%s%s" % (
            self.scheme,
            self.ip,
            self._port,
            command.endpoint(self._settings_root),
        )

    async def send_command(self, command):
        """
        Send a command and decode the reply. Returns a Response, or raises
        TransportError, an APIError subclass or UnexpectedResponse.
        """
        url = self._url(command)
        headers = {"Content-Type": "application/json"}
        token = self._auth_token
        if token:
            headers["AUTH"] = token
        body = command.body() if command.request_type == PUT else None

        self._log.debug(">> %s %s %s", command.request_type, url, body or "")
        try:
            async with self.session.request(
                command.request_type,
                url,
                headers=headers,
                json=body,
                ssl=False,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(
                "%s %s failed: %s" % (command.request_type, url, exc), exc
            )
        self._log.debug("<< %s %s", resp.status, text)
        return process(text)

    async def set_auth_token(self, token):
        """
        Use `token` for subsequent calls. The token is checked straight away
        with an authenticated query; if that fails the previous token is put
        back and the error is raised.
        """
        async with self._token_lock:
            previous = self._auth_token
            self._auth_token = token
        try:
            await self.current_input()
        except (SmartCastError, asyncio.CancelledError):
            async with self._token_lock:
                if self._auth_token == token:
                    self._auth_token = previous
            raise

    async def device_info(self):
        return (await self.send_command(GetDeviceInfo())).device_info()

    async def is_powered_on(self):
        return (await self.send_command(GetPowerState())).power_state()

    async def current_input(self):
        return (await self.send_command(GetCurrentInput())).current_input()

    async def list_inputs(self):
        return (await self.send_command(GetInputList())).input_list()

    async def change_input(self, name):
        """
        Switch to the input called `name`. The current input is read first
        for its hashval; if it changes before the write lands, the device's
        rejection is raised unchanged.
        """
        current = await self.current_input()
        await self.send_command(ChangeInput(name, current.hashval))

    async def button_event(self, action, button):
        """
        Send a KEYDOWN, KEYUP or KEYPRESS for `button` (a Button or its
        name). Directional buttons that some firmware maps to other codes
        are retried once with the alternate code.
        """
        if not isinstance(button, Button):
            button = Button[str(button).upper()]
        try:
            await self.send_command(RemoteButtonPress([key_event(action, button)]))
        except APIError as exc:
            if button.alternate_code is None:
                raise
            self._log.debug(
                "%s: %s rejected (%s), retrying with code %s",
                self.name,
                button.name,
                exc,
                button.alternate_code,
            )
            await self.send_command(
                RemoteButtonPress([key_event(action, button, button.alternate_code)])
            )

    async def key_press(self, button):
        await self.button_event(KEYPRESS, button)

    async def key_down(self, button):
        await self.button_event(KEYDOWN, button)

    async def key_up(self, button):
        await self.button_event(KEYUP, button)

    def root_setting(self):
        return Setting.root(self)

    async def settings(self):
        """
        The top level of the settings tree.
        """
        return await self.root_setting().expand()

    async def current_app(self):
        """
        The running app, or None when nothing is running or the app isn't in
        the public catalog.
        """
        value = (await self.send_command(GetCurrentApp())).current_app()
        if value is None:
            return None
        payload = Payload.from_value(value)
        app = await self.app_catalog.find_by_payload(self.session, payload)
        if app is None:
            self._log.debug("%s: no catalog entry for %r", self.name, payload)
        return app

    async def list_apps(self):
        return await self.app_catalog.list_apps(self.session)

    async def launch_app(self, app):
        """
        Launch an App from list_apps(), or a raw Payload.
        """
        payload = app if isinstance(app, Payload) else app.payload
        if payload is None:
            raise ValueError("%r has no launch payload" % (app,))
        await self.send_command(LaunchApp(payload.to_value()))

    @classmethod
    async def from_description(cls, description, **kwargs):
        """
        Connect to a device found by discovery or a description lookup.
        """
        device = cls(
            description.friendly_name,
            description.manufacturer,
            description.model_name,
            description.ip,
            description.uuid,
            **kwargs
        )
        try:
            await device.async_init()
        except BaseException:
            await device.close()
            raise
        return device

    @classmethod
    async def from_ip(cls, ip, description_port=DESCRIPTION_PORT, **kwargs):
        """
        Connect to the device at `ip`, reading its identity from the
        description document it serves.
        """
        location = "http://%s:%s%s" % (ip, description_port, DESCRIPTION_PATH)
        async with _lookup_session(kwargs.get("session")) as session:
            description = await async_describe(location, session)
        return await cls.from_description(description, **kwargs)

    @classmethod
    async def from_uuid(cls, uuid, timeout=DISCOVER_TIMEOUT, **kwargs):
        """
        Discover the network and connect to the device with the given UUID.
        Raises DeviceNotFound if nothing answers with it.
        """
        async with _lookup_session(kwargs.get("session")) as session:
            descriptions = await async_discover(timeout, session)
        for description in descriptions:
            if description.uuid == uuid:
                return await cls.from_description(description, **kwargs)
        raise DeviceNotFound("No device with UUID %r found" % uuid)


class _lookup_session(object):
    """
    Use the caller's session if there is one, otherwise a throwaway one that
    is closed on exit.
    """

    def __init__(self, session):
        self.session = session
        self._owned = None

    async def __aenter__(self):
        if self.session is not None:
            return self.session
        self._owned = aiohttp.ClientSession()
        return self._owned

    async def __aexit__(self, *exc_info):
        if self._owned is not None:
            await self._owned.close()


async def discover_devices(timeout=DISCOVER_TIMEOUT, **kwargs):
    """
    Discover SmartCast devices on the network and connect to each of them.
    Returns a list of initialised Device instances. Devices that can't be
    connected to are logged and left out.
    """
    async with _lookup_session(kwargs.get("session")) as session:
        descriptions = await async_discover(timeout, session)
    devices = []
    for description in descriptions:
        try:
            devices.append(await Device.from_description(description, **kwargs))
        except SmartCastError as exc:
            _getLogger("discover").error("Error '%s' for %s", exc, description)
    return devices
