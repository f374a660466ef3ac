import json

from .errors import UnexpectedResponse, api_error
from .info import DeviceInfo, Input, SliderInfo
from .util import _getLogger


_MISSING = object()


class Response(object):
    """
    A successful response envelope:

        {"STATUS": {"RESULT": "SUCCESS", "DETAIL": "..."}, "ITEM": {...}}
        {"STATUS": {"RESULT": "SUCCESS", "DETAIL": "..."}, "ITEMS": [...]}

    Every accessor assumes a particular shape and raises UnexpectedResponse
    when it isn't there.
    """

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return "<Response %r>" % (self.value,)

    def first_item(self, key=None):
        """
        Return the sole ITEM or, if there isn't one, the first element of
        ITEMS. If `key` is given, return that field of the item instead.
        """
        item = self.value.get("ITEM", _MISSING)
        if item is _MISSING:
            items = self.value.get("ITEMS")
            if not isinstance(items, list) or not items:
                raise UnexpectedResponse("Response contains neither ITEM nor ITEMS")
            item = items[0]
        if key is None:
            return item
        if not isinstance(item, dict) or key not in item:
            raise UnexpectedResponse("Response item has no %r field" % key)
        return item[key]

    def items(self):
        """
        Return the full ITEMS array.
        """
        items = self.value.get("ITEMS", _MISSING)
        if items is _MISSING:
            raise UnexpectedResponse("Response contains no ITEMS")
        if not isinstance(items, list):
            raise UnexpectedResponse("ITEMS is not an array: %r" % (items,))
        return items

    def pairing(self):
        """
        Return (pairing_req_token, challenge_type) from a pairing/start response.
        """
        return (
            _expect(self.first_item("PAIRING_REQ_TOKEN"), int, "PAIRING_REQ_TOKEN"),
            _expect(self.first_item("CHALLENGE_TYPE"), int, "CHALLENGE_TYPE"),
        )

    def auth_token(self):
        return _expect(self.first_item("AUTH_TOKEN"), str, "AUTH_TOKEN")

    def power_state(self):
        return _expect(self.first_item("VALUE"), int, "VALUE") == 1

    def device_info(self):
        return DeviceInfo.from_value(self.first_item("VALUE"))

    def current_input(self):
        item = self.first_item()
        name = _expect(_field(item, "VALUE"), str, "VALUE")
        return Input(
            name,
            name,
            _expect(_field(item, "HASHVAL"), int, "HASHVAL"),
            cname=item.get("CNAME"),
        )

    def input_list(self):
        return [Input.from_item(item) for item in self.items()]

    def current_app(self):
        """
        Return the raw app payload dict, or None when no app is running.
        """
        try:
            payload = self.first_item("VALUE")
        except UnexpectedResponse:
            return None
        if payload is None:
            return None
        return _expect(payload, dict, "VALUE")

    def settings(self):
        return [_expect(item, dict, "ITEMS[]") for item in self.items()]

    def slider_info(self):
        return SliderInfo.from_item(self.first_item())

    def elements(self):
        elements = _expect(self.first_item("ELEMENTS"), list, "ELEMENTS")
        return [_expect(e, str, "ELEMENTS[]") for e in elements]


def _field(item, key):
    if not isinstance(item, dict) or key not in item:
        raise UnexpectedResponse("Response item has no %r field" % key)
    return item[key]


def _expect(value, types, name):
    """
    Check that `value` has the given type. Booleans are not accepted as ints.
    """
    if isinstance(value, bool) and types is not bool or not isinstance(value, types):
        raise UnexpectedResponse("%s: expected %s, got %r" % (name, types, value))
    return value


def process(text):
    """
    Decode a raw response body. Returns a Response on success, raises the
    matching APIError when the device rejected the request, and
    UnexpectedResponse when the body isn't a well-formed envelope.
    """
    try:
        value = json.loads(text)
    except ValueError as exc:
        raise UnexpectedResponse("Response is not valid JSON: %s" % exc)

    if not isinstance(value, dict):
        raise UnexpectedResponse("Response is not a JSON object: %r" % (value,))
    status = value.get("STATUS")
    if not isinstance(status, dict):
        raise UnexpectedResponse("Response has no STATUS object")

    result = status.get("RESULT")
    if not isinstance(result, str):
        raise UnexpectedResponse("Response STATUS has no RESULT string")
    if result.lower() == "success":
        return Response(value)

    detail = status.get("DETAIL")
    _getLogger("Response").debug("Device returned %r (%r)", result, detail)
    raise api_error(result, detail)
