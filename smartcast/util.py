import logging
import re

from requests.compat import urlparse


def _getLogger(name):
    """
    Retrieve a logger instance. Checks if a handler is defined so we avoid the
    'No handlers could be found' message.
    """
    logger = logging.getLogger(name)
    # if not logging.root.handlers:
    #     logger.disabled = 1
    return logger


def host_from_location(location):
    """
    Return the host portion of a description URL, e.g.
    'http://192.168.0.14:8008/ssdp/device-desc.xml' -> '192.168.0.14'.
    """
    return urlparse(location).hostname


def strip_uuid(udn):
    """
    Remove the 'uuid:' style prefix from a UDN.
    """
    return re.sub(r"^\s*\w+\s*:\s*", "", udn.strip(), count=1)


def to_bool(value):
    """
    The vendor sends flags as "TRUE"/"FALSE" strings. Accept real booleans too.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError("%r is not a boolean" % value)
