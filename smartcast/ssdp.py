import asyncio
import re
import select
import socket
from datetime import datetime, timedelta
from functools import partial

import aiohttp
import ifaddr
import requests
from lxml import etree

from .const import (
    DISCOVER_TIMEOUT,
    HTTP_TIMEOUT,
    SSDP_MX,
    SSDP_ST,
    SSDP_TARGET,
    VENDOR,
)
from .errors import DeviceNotFound, SmartCastError, TransportError, UnexpectedResponse
from .util import _getLogger, host_from_location, strip_uuid


class Entry(object):
    def __init__(self, location):
        self.location = location

    def __repr__(self):
        return "<Entry %s>" % self.location

    def __eq__(self, other):
        return isinstance(other, Entry) and self.location == other.location

    def __hash__(self):
        return hash(self.location)


class Description(object):
    """
    The identity a device advertises in its description document.
    """

    def __init__(self, friendly_name, manufacturer, model_name, uuid, ip, location=None):
        self.friendly_name = friendly_name
        self.manufacturer = manufacturer
        self.model_name = model_name
        self.uuid = uuid
        self.ip = ip
        self.location = location

    def __repr__(self):
        return "<Description '%s' %s uuid=%s>" % (self.friendly_name, self.ip, self.uuid)


def ssdp_request(ssdp_st=SSDP_ST, ssdp_mx=SSDP_MX):
    """Return request bytes for given st and mx."""
    return "\r\n".join(
        [
            "M-SEARCH * HTTP/1.1",
            "ST: {}".format(ssdp_st),
            "MX: {:d}".format(ssdp_mx),
            'MAN: "ssdp:discover"',
            "HOST: {}:{}".format(*SSDP_TARGET),
            "",
            "",
        ]
    ).encode("utf-8")


def scan(timeout=DISCOVER_TIMEOUT, st=SSDP_ST):
    """
    Multicast an M-SEARCH from every IPv4 interface and collect the LOCATION
    of everything that answers within `timeout` seconds.
    """
    log = _getLogger("SSDP")
    entries = set()
    sockets = []
    request = ssdp_request(st)
    stop_wait = datetime.now() + timedelta(seconds=timeout)

    for addr in get_addresses_ipv4():
        sock = None
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, SSDP_MX)
            sock.bind((addr, 0))
            sockets.append(sock)
        except socket.error as exc:
            log.debug("Unable to bind to %s: %s", addr, exc)
            if sock is not None:
                sock.close()

    for sock in list(sockets):
        try:
            sock.sendto(request, SSDP_TARGET)
            sock.setblocking(False)
        except socket.error as exc:
            log.debug("Unable to send M-SEARCH from %s: %s", sock.getsockname(), exc)
            sockets.remove(sock)
            sock.close()
    try:
        while sockets:
            seconds_left = (stop_wait - datetime.now()).total_seconds()
            if seconds_left <= 0:
                break

            ready = select.select(sockets, [], [], seconds_left)[0]

            for sock in ready:
                try:
                    data, address = sock.recvfrom(1024)
                    response = data.decode("utf-8")
                except UnicodeDecodeError:
                    log.debug("Ignoring invalid unicode response from %s", address)
                    continue
                except socket.error:
                    log.exception("Socket error while discovering SSDP devices")
                    sockets.remove(sock)
                    sock.close()
                    continue
                locations = re.findall(
                    r"LOCATION: *(?P<url>\S+)\s+", response, re.IGNORECASE
                )
                if locations:
                    entries.add(Entry(locations[0]))
    finally:
        for s in sockets:
            s.close()

    return entries


def get_addresses_ipv4():
    # Ignore localhost and IPv6 addresses
    return list(
        set(
            addr.ip
            for iface in ifaddr.get_adapters()
            for addr in iface.ips
            if addr.is_IPv4 and addr.ip != "127.0.0.1"
        )
    )


def parse_description(data, location):
    """
    Pull the device's identity out of its description XML. Raises
    DeviceNotFound if the device isn't made by the supported vendor.
    """
    try:
        root = etree.fromstring(data)
    except etree.XMLSyntaxError as exc:
        raise UnexpectedResponse("Invalid description at %s: %s" % (location, exc))
    findtext = partial(root.findtext, namespaces=root.nsmap, default="")

    manufacturer = findtext("device/manufacturer").strip()
    if manufacturer.lower() != VENDOR.lower():
        raise DeviceNotFound(
            "%s describes a %r device, not %s" % (location, manufacturer, VENDOR)
        )
    return Description(
        findtext("device/friendlyName").strip(),
        manufacturer,
        findtext("device/modelName").strip(),
        strip_uuid(findtext("device/UDN")),
        host_from_location(location),
        location,
    )


def describe(location):
    """
    Synchronously fetch and parse a description document.
    """
    _getLogger("SSDP").debug("Reading %s", location)
    try:
        resp = requests.get(location, timeout=HTTP_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise TransportError("Unable to fetch %s: %s" % (location, exc), exc)
    return parse_description(resp.content, location)


async def async_describe(location, session):
    """
    Asynchronously fetch and parse a description document.
    """
    _getLogger("SSDP").debug("Reading %s", location)
    try:
        async with session.get(
            location, timeout=aiohttp.ClientTimeout(total=HTTP_TIMEOUT)
        ) as resp:
            resp.raise_for_status()
            data = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise TransportError("Unable to fetch %s: %s" % (location, exc), exc)
    return parse_description(data, location)


def _log_failure(exc, entry):
    log = _getLogger("SSDP")
    if isinstance(exc, DeviceNotFound):
        log.debug("Skipping %s: %s", entry.location, exc)
    else:
        log.error("Error '%s' for %s", exc, entry)


def discover(timeout=DISCOVER_TIMEOUT):
    """
    Convenience method to discover SmartCast devices on the network. Returns
    a list of `Description` instances, without connecting to any of them.
    Other devices answering the search are left out; devices whose
    description can't be read are logged and left out.
    """
    descriptions = {}
    for entry in scan(timeout):
        try:
            description = describe(entry.location)
        except SmartCastError as exc:
            _log_failure(exc, entry)
            continue
        descriptions[description.uuid] = description
    return list(descriptions.values())


async def async_discover(timeout, session):
    """
    Asynchronous version of discover(). The multicast scan runs in the
    default executor.
    """
    loop = asyncio.get_event_loop()
    entries = await loop.run_in_executor(None, scan, timeout)
    descriptions = {}
    for entry in entries:
        try:
            description = await async_describe(entry.location, session)
        except SmartCastError as exc:
            _log_failure(exc, entry)
            continue
        descriptions[description.uuid] = description
    return list(descriptions.values())
