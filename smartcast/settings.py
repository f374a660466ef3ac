"""
The device's settings tree.

No device publishes a fixed schema, so the tree is discovered at runtime.
Each Setting is a node carrying its accumulated path (relative to the
device's settings root) and a reference to the Device used to query it.
Menus are expanded on demand; leaves fetch slider bounds and list elements
from the device's static or dynamic endpoints when asked.

Usage:

    for setting in await device.settings():
        if setting.kind is SettingKind.MENU:
            children = await setting.expand()
        elif setting.kind is SettingKind.SLIDER:
            info = await setting.slider_info()
            await setting.update(info.max)
"""
from enum import Enum

from .command import ReadSettings, WriteSettings
from .const import DYNAMIC, STATIC
from .errors import (
    InvalidElement,
    OutOfBounds,
    ReadOnlySetting,
    SettingTypeError,
    SmartCastError,
    UnexpectedResponse,
    UriNotFound,
)
from .util import _getLogger, to_bool


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class SettingKind(Enum):
    MENU = "T_MENU_V1"
    VALUE = "T_VALUE_V1"
    SLIDER = "T_VALUE_ABS_V1"
    LIST = "T_LIST_V1"
    XLIST = "T_LIST_X_V1"
    OTHER = None

    @classmethod
    def from_type(cls, type_name):
        try:
            return cls(str(type_name).upper())
        except ValueError:
            return cls.OTHER


LEAF_KINDS = (SettingKind.VALUE, SettingKind.SLIDER, SettingKind.LIST, SettingKind.XLIST)
LIST_KINDS = (SettingKind.LIST, SettingKind.XLIST)

# Responses that mean "this endpoint has nothing for this node".
_ABSENT = (UnexpectedResponse, UriNotFound)


def canonical_number(value):
    """
    Integers that fit in a signed 32 bit value stay integers, anything wider
    becomes a float so it can never pass as an in-range integer.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and not INT32_MIN <= value <= INT32_MAX:
        return float(value)
    return value


def value_kind(value):
    """
    The JSON type of a setting value: 'boolean', 'integer', 'float' or
    'string'. None for anything else.
    """
    value = canonical_number(value)
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    return None


def _compatible(current, new):
    current_kind = value_kind(current)
    new_kind = value_kind(new)
    if new_kind is None or current_kind is None:
        return False
    if current_kind == new_kind:
        return True
    # A float setting takes integers, not the other way round.
    return current_kind == "float" and new_kind == "integer"


class Setting(object):
    """
    A node of the settings tree. `path` is relative to the device's settings
    root; the root node itself has an empty path.
    """

    def __init__(
        self,
        device,
        cname,
        name,
        type_name,
        path=None,
        hashval=None,
        hidden=False,
        read_only=False,
        value=None,
        elements=None,
    ):
        self.device = device
        self.cname = cname
        self.name = name
        self.type_name = type_name
        self.kind = SettingKind.from_type(type_name)
        self.path = cname if path is None else path
        self.hashval = hashval
        self.hidden = hidden
        self.read_only = read_only
        self._value = value
        self._elements = elements
        self._log = _getLogger("Setting")

    def __repr__(self):
        return "<Setting '%s' %s path=%r value=%r>" % (
            self.name,
            self.kind.name,
            self.path,
            self._value,
        )

    @classmethod
    def root(cls, device):
        return cls(device, "", "Settings", SettingKind.MENU.value, path="")

    @classmethod
    def from_item(cls, device, item, parent_path=""):
        """
        Build a node from one element of a menu's ITEMS array and stitch the
        parent's path onto it.
        """
        try:
            cname = item["CNAME"]
            type_name = item["TYPE"]
        except (KeyError, TypeError):
            raise UnexpectedResponse("Malformed setting item: %r" % (item,))
        if not isinstance(cname, str) or not isinstance(type_name, str):
            raise UnexpectedResponse("Malformed setting item: %r" % (item,))

        hashval = item.get("HASHVAL")
        if hashval is not None and (isinstance(hashval, bool) or not isinstance(hashval, int)):
            raise UnexpectedResponse("Setting HASHVAL is not an integer: %r" % (hashval,))

        try:
            hidden = to_bool(item.get("HIDDEN", False))
            read_only = to_bool(item.get("READONLY", False))
        except ValueError as exc:
            raise UnexpectedResponse(str(exc))

        value = item.get("VALUE")
        if value is not None and value_kind(value) is None:
            # Structured values (e.g. inputs) have no scalar representation.
            value = None

        elements = item.get("ELEMENTS")
        if elements is not None:
            if not isinstance(elements, list) or not all(isinstance(e, str) for e in elements):
                raise UnexpectedResponse("Setting ELEMENTS is not a list of strings")

        path = "%s/%s" % (parent_path, cname) if parent_path else cname
        return cls(
            device,
            cname,
            item.get("NAME", cname),
            type_name,
            path=path,
            hashval=hashval,
            hidden=hidden,
            read_only=read_only,
            value=value,
            elements=elements,
        )

    def value(self, type_=None):
        """
        The cached current value. With `type_` (bool, int, float or str),
        return it only if it is of that type, otherwise None. Ints are
        accepted for float; bools are never accepted as numbers.
        """
        value = self._value
        if value is None or type_ is None:
            return value
        if type_ is bool:
            return value if isinstance(value, bool) else None
        if isinstance(value, bool):
            return None
        if type_ is int:
            return value if isinstance(value, int) else None
        if type_ is float:
            return float(value) if isinstance(value, (int, float)) else None
        if type_ is str:
            return value if isinstance(value, str) else None
        return None

    def is_boolean(self):
        return value_kind(self._value) == "boolean"

    def is_number(self):
        return value_kind(self._value) in ("integer", "float")

    def is_string(self):
        return value_kind(self._value) == "string"

    async def _read(self, base):
        return await self.device.send_command(ReadSettings(base, self.path))

    async def expand(self):
        """
        List the children of a menu. Any other kind of node expands to
        itself.

        Children reported as plain values are probed for slider bounds and
        reclassified as sliders when the probe succeeds. This costs up to two
        extra round trips per value child.
        """
        if self.kind is not SettingKind.MENU:
            return [self]

        response = await self._read(DYNAMIC)
        children = [
            Setting.from_item(self.device, item, self.path)
            for item in response.settings()
        ]
        for child in children:
            if child.kind is SettingKind.VALUE:
                slider = await child._fetch_slider_info()
                if slider is not None:
                    self._log.debug("Reclassifying %r as a slider", child.path)
                    child.kind = SettingKind.SLIDER
        return children

    async def _fetch_slider_info(self):
        try:
            return (await self._read(STATIC)).slider_info()
        except _ABSENT:
            pass
        try:
            return (await self._read(DYNAMIC)).slider_info()
        except _ABSENT:
            return None

    async def slider_info(self):
        """
        Slider bounds, from the static endpoint or, failing that, the
        dynamic one. Always fetched from the device. None if this isn't a
        slider.
        """
        if self.kind is not SettingKind.SLIDER:
            return None
        return await self._fetch_slider_info()

    async def elements(self):
        """
        Elements of a list, from the dynamic endpoint or, failing that, the
        static one, then whatever the menu listing carried. Empty if
        nothing has them, None if this isn't a list.
        """
        if self.kind not in LIST_KINDS:
            return None
        try:
            elements = (await self._read(DYNAMIC)).elements()
        except _ABSENT:
            try:
                elements = (await self._read(STATIC)).elements()
            except _ABSENT:
                elements = self._elements or []
        self._elements = elements
        return elements

    async def _validate(self, value):
        if (
            self.kind not in LEAF_KINDS
            or self.read_only
            or self._value is None
            or self.hashval is None
        ):
            raise ReadOnlySetting("%r is read-only or unwritable" % (self,))

        if not _compatible(self._value, value):
            raise SettingTypeError(self._value, value)
        value = canonical_number(value)
        if value_kind(self._value) == "float":
            value = float(value)

        if self.kind is SettingKind.SLIDER:
            slider = await self.slider_info()
            if slider is None:
                raise UnexpectedResponse("No slider bounds for %r" % (self,))
            if not slider.min <= value <= slider.max:
                raise OutOfBounds(value, slider.min, slider.max)

        elif self.kind in LIST_KINDS:
            elements = await self.elements()
            if value not in elements:
                raise InvalidElement(value, elements)

        return value

    async def update(self, value):
        """
        Write a new value. The value is checked against the node's kind,
        current type, slider bounds and list elements before anything is
        sent. Whatever the device answers is raised as-is.

        On success the node re-reads itself to pick up the new hashval. A
        failed re-read is logged and leaves the old hashval in place.
        """
        value = await self._validate(value)
        await self.device.send_command(WriteSettings(self.path, self.hashval, value))
        self._value = value
        self._log.debug("Wrote %r to %r", value, self.path)
        await self._refresh()

    write = update

    async def _refresh(self):
        try:
            item = (await self._read(DYNAMIC)).first_item()
        except SmartCastError as exc:
            # The write has already landed.
            self._log.debug("Unable to re-read %r after writing: %s", self.path, exc)
            return
        if not isinstance(item, dict):
            return
        hashval = item.get("HASHVAL")
        if isinstance(hashval, int) and not isinstance(hashval, bool):
            self.hashval = hashval
        value = item.get("VALUE")
        if value_kind(value) is not None:
            self._value = value
