from collections import namedtuple

from .errors import UnexpectedResponse
from .util import to_bool


class DeviceInfo(object):
    """
    Various information about the device, as returned by
    /state/device/deviceinfo.
    """

    def __init__(
        self,
        cast_name,
        inputs,
        model_name,
        settings_root,
        serial_number=None,
        fw_version=None,
        chipset=None,
    ):
        self.cast_name = cast_name
        self.inputs = inputs
        self.model_name = model_name
        self.settings_root = settings_root
        self.serial_number = serial_number
        self.fw_version = fw_version
        self.chipset = chipset

    def __repr__(self):
        return "<DeviceInfo '%s' model=%r settings_root=%r>" % (
            self.cast_name,
            self.model_name,
            self.settings_root,
        )

    @classmethod
    def from_value(cls, value):
        if not isinstance(value, dict):
            raise UnexpectedResponse("Device info is not an object: %r" % (value,))
        settings_root = value.get("SETTINGS_ROOT")
        if not isinstance(settings_root, str) or not settings_root:
            raise UnexpectedResponse("Device info has no SETTINGS_ROOT")
        system_info = value.get("SYSTEM_INFO") or {}
        if not isinstance(system_info, dict):
            raise UnexpectedResponse("SYSTEM_INFO is not an object")
        return cls(
            value.get("CAST_NAME"),
            list(value.get("INPUTS") or []),
            value.get("MODEL_NAME"),
            settings_root,
            serial_number=system_info.get("SERIAL_NUMBER"),
            fw_version=system_info.get("VERSION"),
            chipset=system_info.get("CHIPSET"),
        )


class Input(object):
    """
    An input on the device. `name` is what change_input() expects,
    `friendly_name` is what the user labelled it.
    """

    def __init__(self, name, friendly_name, hashval, cname=None, read_only=False):
        self.name = name
        self.friendly_name = friendly_name
        self.hashval = hashval
        self.cname = cname
        self.read_only = read_only

    def __repr__(self):
        return "<Input '%s' (%s)>" % (self.name, self.friendly_name)

    @classmethod
    def from_item(cls, item):
        try:
            name = item["NAME"]
            value = item["VALUE"]
            hashval = item["HASHVAL"]
        except (KeyError, TypeError):
            raise UnexpectedResponse("Malformed input item: %r" % (item,))

        # Older firmware sends the friendly name directly, newer wraps it.
        if isinstance(value, dict):
            value = value.get("NAME")
        if not isinstance(name, str) or not isinstance(value, str):
            raise UnexpectedResponse("Malformed input item: %r" % (item,))
        if isinstance(hashval, bool) or not isinstance(hashval, int):
            raise UnexpectedResponse("Input HASHVAL is not an integer: %r" % (hashval,))

        try:
            read_only = to_bool(item.get("READONLY", False))
        except ValueError as exc:
            raise UnexpectedResponse(str(exc))
        return cls(name, value, hashval, cname=item.get("CNAME"), read_only=read_only)


_SliderInfo = namedtuple(
    "SliderInfo", ["dec_marker", "inc_marker", "increment", "min", "max", "center"]
)


class SliderInfo(_SliderInfo):
    """
    Bounds and labels of a settings slider.
    """

    __slots__ = ()

    _fields_map = (
        ("dec_marker", "DECMARKER", str),
        ("inc_marker", "INCMARKER", str),
        ("increment", "INCREMENT", int),
        ("min", "MINIMUM", int),
        ("max", "MAXIMUM", int),
        ("center", "CENTER", int),
    )

    @classmethod
    def from_item(cls, item):
        if not isinstance(item, dict):
            raise UnexpectedResponse("Slider info is not an object: %r" % (item,))
        kwargs = {}
        for attr, key, type_ in cls._fields_map:
            value = item.get(key)
            if isinstance(value, bool) or not isinstance(value, type_):
                raise UnexpectedResponse(
                    "Slider info field %s: expected %s, got %r" % (key, type_, value)
                )
            kwargs[attr] = value
        return cls(**kwargs)
