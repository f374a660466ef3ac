import asyncio
import json

import aiohttp

from .const import APP_NAME_URL, APP_PAYLOAD_URL, HTTP_TIMEOUT
from .errors import TransportError, UnexpectedResponse
from .util import _getLogger


class Payload(object):
    """
    What the device reports for, and expects to launch, an app.
    """

    def __init__(self, name_space, app_id, message=None):
        self.name_space = name_space
        self.app_id = app_id
        self.message = message or ""

    def __repr__(self):
        return "<Payload %s:%s>" % (self.name_space, self.app_id)

    def __eq__(self, other):
        if not isinstance(other, Payload):
            return NotImplemented
        return (self.name_space, self.app_id, self.message) == (
            other.name_space,
            other.app_id,
            other.message,
        )

    def __hash__(self):
        return hash((self.name_space, self.app_id, self.message))

    @classmethod
    def from_value(cls, value):
        # The catalog sometimes embeds the payload as a JSON string.
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                raise UnexpectedResponse("App payload is not valid JSON: %r" % value)
        if not isinstance(value, dict):
            raise UnexpectedResponse("App payload is not an object: %r" % (value,))
        try:
            name_space = int(value["NAME_SPACE"])
            app_id = str(value["APP_ID"])
        except (KeyError, TypeError, ValueError):
            raise UnexpectedResponse("Malformed app payload: %r" % (value,))
        return cls(name_space, app_id, value.get("MESSAGE"))

    def to_value(self):
        return dict(NAME_SPACE=self.name_space, APP_ID=self.app_id, MESSAGE=self.message)


class App(object):
    def __init__(self, id, name, description="", image_url="", payload=None):
        self.id = id
        self.name = name
        self.description = description
        self.image_url = image_url
        self.payload = payload

    def __repr__(self):
        return "<App '%s'>" % (self.name)


class AppCatalog(object):
    """
    The public list of apps and their launch payloads. Both documents are
    fetched on first use and cached until update() is called again.
    """

    def __init__(self, payload_url=APP_PAYLOAD_URL, name_url=APP_NAME_URL):
        self.payload_url = payload_url
        self.name_url = name_url
        self.apps = {}
        self._log = _getLogger("AppCatalog")

    async def _fetch(self, session, url):
        self._log.debug("Reading %s", url)
        try:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=HTTP_TIMEOUT)
            ) as resp:
                resp.raise_for_status()
                text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError("Unable to fetch %s: %s" % (url, exc), exc)
        try:
            return json.loads(text)
        except ValueError:
            raise UnexpectedResponse("App catalog at %s is not valid JSON" % url)

    async def update(self, session):
        payloads = {}
        for entry in await self._fetch(session, self.payload_url):
            try:
                info = entry["chipsets"]["*"][0]
                payloads[str(entry["id"])] = Payload.from_value(info["app_type_payload"])
            except (KeyError, IndexError, TypeError, UnexpectedResponse):
                self._log.debug("Skipping malformed app payload entry %r", entry)

        apps = {}
        for entry in await self._fetch(session, self.name_url):
            try:
                app_id = str(entry["id"])
                info = entry.get("mobileAppInfo") or {}
                apps[app_id] = App(
                    app_id,
                    entry["name"],
                    description=info.get("description", ""),
                    image_url=info.get("app_icon_image_url", ""),
                    payload=payloads.get(app_id),
                )
            except (KeyError, TypeError, AttributeError):
                self._log.debug("Skipping malformed app entry %r", entry)
        self.apps = apps

    async def list_apps(self, session):
        if not self.apps:
            await self.update(session)
        return list(self.apps.values())

    async def find_by_payload(self, session, payload):
        for app in await self.list_apps(session):
            if app.payload == payload:
                return app
        return None
