import unittest

import mock

from smartcast import errors
from smartcast.settings import (
    Setting,
    SettingKind,
    canonical_number,
    value_kind,
)
from tests.const import PICTURE_MODES
from tests.helpers import SimulatedDeviceTestCase, async_test
from tests.simulated_device import (
    SimulatedDevice,
    default_tree,
    menu,
    setting,
)


class TestValues(unittest.TestCase):
    def test_canonical_number(self):
        self.assertEqual(canonical_number(5), 5)
        self.assertIsInstance(canonical_number(2 ** 31 - 1), int)
        self.assertIsInstance(canonical_number(-(2 ** 31)), int)
        self.assertIsInstance(canonical_number(2 ** 31), float)
        self.assertIsInstance(canonical_number(-(2 ** 31) - 1), float)
        self.assertIs(canonical_number(True), True)
        self.assertEqual(canonical_number("5"), "5")

    def test_value_kind(self):
        self.assertEqual(value_kind(True), "boolean")
        self.assertEqual(value_kind(3), "integer")
        self.assertEqual(value_kind(2 ** 40), "float")
        self.assertEqual(value_kind(0.5), "float")
        self.assertEqual(value_kind("x"), "string")
        self.assertIsNone(value_kind(None))
        self.assertIsNone(value_kind([1]))
        self.assertIsNone(value_kind(dict(NAME="x")))

    def test_kind_from_type(self):
        self.assertIs(SettingKind.from_type("T_MENU_V1"), SettingKind.MENU)
        self.assertIs(SettingKind.from_type("t_value_abs_v1"), SettingKind.SLIDER)
        self.assertIs(SettingKind.from_type("T_LIST_X_V1"), SettingKind.XLIST)
        self.assertIs(SettingKind.from_type("T_HEADER_V1"), SettingKind.OTHER)


class TestFromItem(unittest.TestCase):
    def test_path_is_stitched(self):
        node = Setting.from_item(
            None, dict(CNAME="tint", TYPE="T_VALUE_ABS_V1", NAME="Tint", VALUE=0, HASHVAL=3), "picture"
        )
        self.assertEqual(node.path, "picture/tint")
        self.assertEqual(node.name, "Tint")
        self.assertEqual(node.hashval, 3)
        self.assertIs(node.kind, SettingKind.SLIDER)

    def test_top_level_path(self):
        node = Setting.from_item(None, dict(CNAME="picture", TYPE="T_MENU_V1"))
        self.assertEqual(node.path, "picture")
        self.assertEqual(node.name, "picture")
        self.assertIsNone(node.value())

    def test_flags(self):
        node = Setting.from_item(
            None, dict(CNAME="a", TYPE="T_VALUE_V1", HIDDEN="TRUE", READONLY="false", VALUE=1)
        )
        self.assertTrue(node.hidden)
        self.assertFalse(node.read_only)

    def test_structured_value_is_dropped(self):
        node = Setting.from_item(None, dict(CNAME="a", TYPE="T_VALUE_V1", VALUE=dict(NAME="x")))
        self.assertIsNone(node.value())

    def test_malformed(self):
        for item in (
            dict(TYPE="T_VALUE_V1"),
            dict(CNAME="a"),
            dict(CNAME=1, TYPE="T_VALUE_V1"),
            dict(CNAME="a", TYPE="T_VALUE_V1", HASHVAL="12"),
            dict(CNAME="a", TYPE="T_VALUE_V1", HIDDEN="maybe"),
            dict(CNAME="a", TYPE="T_LIST_V1", ELEMENTS=[1, 2]),
            "a",
        ):
            self.assertRaises(errors.UnexpectedResponse, Setting.from_item, None, item)

    def test_typed_value(self):
        node = Setting(None, "a", "A", "T_VALUE_V1", value=3)
        self.assertEqual(node.value(), 3)
        self.assertEqual(node.value(int), 3)
        self.assertEqual(node.value(float), 3.0)
        self.assertIsNone(node.value(bool))
        self.assertIsNone(node.value(str))
        self.assertTrue(node.is_number())

        node = Setting(None, "a", "A", "T_VALUE_V1", value=True)
        self.assertIs(node.value(bool), True)
        self.assertIsNone(node.value(int))
        self.assertTrue(node.is_boolean())

        node = Setting(None, "a", "A", "T_VALUE_V1", value="On")
        self.assertEqual(node.value(str), "On")
        self.assertIsNone(node.value(float))
        self.assertTrue(node.is_string())

        node = Setting(None, "a", "A", "T_VALUE_V1", value=0.5)
        self.assertIsNone(node.value(int))
        self.assertEqual(node.value(float), 0.5)


class SettingsTestCase(SimulatedDeviceTestCase):
    async def top_level(self):
        return dict((s.cname, s) for s in await self.device.settings())

    def sim_node(self, *path):
        node = self.sim.tree
        for cname in path:
            node = node["children"][cname]
        return node


class TestDefaultTree(SettingsTestCase):
    @async_test
    async def test_three_top_level_settings(self):
        settings = await self.device.settings()
        self.assertEqual([s.cname for s in settings], ["tint", "game_low_latency", "picture_mode"])
        self.assertEqual(
            [s.kind for s in settings],
            [SettingKind.SLIDER, SettingKind.VALUE, SettingKind.XLIST],
        )
        self.assertEqual([s.path for s in settings], ["tint", "game_low_latency", "picture_mode"])

    @async_test
    async def test_root(self):
        root = self.device.root_setting()
        self.assertIs(root.kind, SettingKind.MENU)
        self.assertEqual(root.path, "")
        self.assertEqual(len(await root.expand()), 3)

    @async_test
    async def test_expand_leaf_is_identity(self):
        for node in await self.device.settings():
            self.assertEqual(await node.expand(), [node])

    @async_test
    async def test_slider_info(self):
        tint = (await self.top_level())["tint"]
        info = await tint.slider_info()
        self.assertEqual((info.min, info.max, info.increment, info.center), (-100, 100, 1, 0))
        self.assertEqual((info.dec_marker, info.inc_marker), ("Red", "Green"))

    @async_test
    async def test_slider_write_then_info(self):
        tint = (await self.top_level())["tint"]
        old_hashval = tint.hashval
        await tint.update(50)
        self.assertEqual(self.sim_node("tint")["VALUE"], 50)
        self.assertEqual(tint.value(), 50)
        self.assertNotEqual(tint.hashval, old_hashval)
        info = await tint.slider_info()
        self.assertEqual((info.min, info.max), (-100, 100))

    @async_test
    async def test_slider_writes_repeatedly(self):
        tint = (await self.top_level())["tint"]
        await tint.write(10)
        await tint.write(-10)
        self.assertEqual(self.sim_node("tint")["VALUE"], -10)

    @async_test
    async def test_slider_bounds_inclusive(self):
        tint = (await self.top_level())["tint"]
        await tint.update(-100)
        await tint.update(100)
        self.assertEqual(len(self.sim.puts()), 2)

    @async_test
    async def test_slider_out_of_bounds(self):
        tint = (await self.top_level())["tint"]
        for value in (-101, 101):
            with self.assertRaises(errors.OutOfBounds) as cm:
                await tint.update(value)
            self.assertEqual((cm.exception.minimum, cm.exception.maximum), (-100, 100))
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_slider_rejects_float(self):
        tint = (await self.top_level())["tint"]
        with self.assertRaises(errors.SettingTypeError):
            await tint.update(1.5)
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_slider_rejects_wide_integer(self):
        tint = (await self.top_level())["tint"]
        with self.assertRaises(errors.SettingTypeError):
            await tint.update(2 ** 32 + 50)
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_boolean_write(self):
        flag = (await self.top_level())["game_low_latency"]
        self.assertTrue(flag.is_boolean())
        await flag.update(True)
        self.assertIs(self.sim_node("game_low_latency")["VALUE"], True)
        self.assertIs(flag.value(bool), True)

    @async_test
    async def test_type_mismatch(self):
        settings = await self.top_level()
        for cname, value in (
            ("game_low_latency", "true"),
            ("game_low_latency", 1),
            ("tint", True),
            ("tint", "50"),
            ("picture_mode", 1),
            ("picture_mode", False),
        ):
            with self.assertRaises(errors.SettingTypeError) as cm:
                await settings[cname].update(value)
            self.assertEqual(cm.exception.new, value)
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_elements(self):
        mode = (await self.top_level())["picture_mode"]
        self.assertEqual(await mode.elements(), PICTURE_MODES)

    @async_test
    async def test_every_element_is_writable(self):
        mode = (await self.top_level())["picture_mode"]
        for element in await mode.elements():
            await mode.update(element)
            self.assertEqual(self.sim_node("picture_mode")["VALUE"], element)

    @async_test
    async def test_invalid_element(self):
        mode = (await self.top_level())["picture_mode"]
        with self.assertRaises(errors.InvalidElement) as cm:
            await mode.update("Disco")
        self.assertEqual(cm.exception.elements, PICTURE_MODES)
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_not_applicable(self):
        settings = await self.top_level()
        self.assertIsNone(await settings["game_low_latency"].slider_info())
        self.assertIsNone(await settings["picture_mode"].slider_info())
        self.assertIsNone(await settings["tint"].elements())

    @async_test
    async def test_root_is_unwritable(self):
        with self.assertRaises(errors.ReadOnlySetting):
            await self.device.root_setting().update(1)
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_stale_hashval_propagates(self):
        tint = (await self.top_level())["tint"]
        self.sim_node("tint")["HASHVAL"] += 7
        with self.assertRaises(errors.UnrecognizedAPIError):
            await tint.update(5)
        self.assertEqual(len(self.sim.puts()), 1)
        self.assertEqual(self.sim_node("tint")["VALUE"], 0)

    @async_test
    async def test_transport_error_propagates(self):
        await self.sim.stop()
        with self.assertRaises(errors.TransportError):
            await self.device.settings()


class TestDisguisedSlider(SettingsTestCase):
    def make_simulator(self):
        return SimulatedDevice(tree=default_tree(disguise_slider=True))

    @async_test
    async def test_reclassified(self):
        tint = (await self.top_level())["tint"]
        self.assertIs(tint.kind, SettingKind.SLIDER)
        self.assertEqual(tint.type_name, "T_VALUE_V1")
        info = await tint.slider_info()
        self.assertEqual((info.min, info.max), (-100, 100))

    @async_test
    async def test_bounds_enforced(self):
        tint = (await self.top_level())["tint"]
        with self.assertRaises(errors.OutOfBounds):
            await tint.update(101)
        await tint.update(100)
        self.assertEqual(len(self.sim.puts()), 1)

    @async_test
    async def test_bounds_read_on_every_write(self):
        tint = (await self.top_level())["tint"]
        self.sim_node("tint")["static"]["MAXIMUM"] = 50
        with self.assertRaises(errors.OutOfBounds) as cm:
            await tint.update(60)
        self.assertEqual(cm.exception.maximum, 50)
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_plain_value_stays_value(self):
        flag = (await self.top_level())["game_low_latency"]
        self.assertIs(flag.kind, SettingKind.VALUE)


class BusyAfterWriteDevice(SimulatedDevice):
    """
    Answers every settings read with BUSY once a write has landed.
    """

    async def menu(self, request):
        if request.method == "GET" and self.puts():
            return self.reply("BUSY")
        return await super(BusyAfterWriteDevice, self).menu(request)


class TestRereadAfterWrite(SettingsTestCase):
    def make_simulator(self):
        return BusyAfterWriteDevice()

    @async_test
    async def test_failed_reread_does_not_fail_write(self):
        flag = (await self.top_level())["game_low_latency"]
        old_hashval = flag.hashval
        await flag.update(True)
        self.assertEqual(len(self.sim.puts()), 1)
        self.assertIs(self.sim_node("game_low_latency")["VALUE"], True)
        self.assertIs(flag.value(), True)
        self.assertEqual(flag.hashval, old_hashval)

    @async_test
    async def test_transport_error_on_reread(self):
        flag = (await self.top_level())["game_low_latency"]
        with mock.patch.object(flag, "_read", side_effect=errors.TransportError("gone")):
            await flag.update(True)
        self.assertIs(self.sim_node("game_low_latency")["VALUE"], True)
        self.assertIs(flag.value(), True)


class TestNestedTree(SettingsTestCase):
    def make_simulator(self):
        tree = menu(
            "",
            menu(
                "picture",
                setting("brightness", "T_VALUE_ABS_V1", 50,
                        static=dict(DECMARKER="", INCMARKER="", INCREMENT=1,
                                    MINIMUM=0, MAXIMUM=100, CENTER=50)),
                setting("color_temp", "T_LIST_V1", "Normal",
                        static=dict(ELEMENTS=["Cool", "Normal", "Warm"])),
                setting("gamma", "T_VALUE_V1", 2.2),
                setting("no_elements", "T_LIST_V1", "A"),
                menu("advanced", setting("black_detail", "T_LIST_V1", "Off", ELEMENTS=["Off", "Low"])),
            ),
            setting("name", "T_VALUE_V1", "Living Room", READONLY="TRUE"),
            setting("label", "T_VALUE_V1", "Den"),
            setting("service", "T_VALUE_V1", None, HIDDEN="TRUE"),
            setting("header", "T_HEADER_V1", "System"),
        )
        return SimulatedDevice(tree=tree)

    async def picture(self):
        return dict((s.cname, s) for s in await (await self.top_level())["picture"].expand())

    @async_test
    async def test_nested_paths(self):
        picture = await self.picture()
        self.assertEqual(
            [s.path for s in picture.values()],
            ["picture/brightness", "picture/color_temp", "picture/gamma",
             "picture/no_elements", "picture/advanced"],
        )
        advanced = await picture["advanced"].expand()
        self.assertEqual([s.path for s in advanced], ["picture/advanced/black_detail"])
        await advanced[0].update("Low")
        self.assertEqual(self.sim_node("picture", "advanced", "black_detail")["VALUE"], "Low")

    @async_test
    async def test_expand_is_fresh(self):
        picture = await self.picture()
        self.sim_node("picture", "brightness")["VALUE"] = 75
        again = await self.picture()
        self.assertEqual(picture["brightness"].value(), 50)
        self.assertEqual(again["brightness"].value(), 75)
        self.assertIsNot(again["brightness"], picture["brightness"])

    @async_test
    async def test_nested_slider(self):
        brightness = (await self.picture())["brightness"]
        self.assertEqual((await brightness.slider_info()).max, 100)
        with self.assertRaises(errors.OutOfBounds):
            await brightness.update(-1)
        await brightness.update(0)
        self.assertEqual(self.sim_node("picture", "brightness")["VALUE"], 0)

    @async_test
    async def test_elements_from_static(self):
        color_temp = (await self.picture())["color_temp"]
        self.assertEqual(await color_temp.elements(), ["Cool", "Normal", "Warm"])
        await color_temp.update("Warm")
        with self.assertRaises(errors.InvalidElement):
            await color_temp.update("Hot")

    @async_test
    async def test_no_elements_anywhere(self):
        node = (await self.picture())["no_elements"]
        self.assertEqual(await node.elements(), [])
        with self.assertRaises(errors.InvalidElement):
            await node.update("A")

    @async_test
    async def test_float_accepts_integer(self):
        gamma = (await self.picture())["gamma"]
        self.assertEqual(gamma.value(float), 2.2)
        await gamma.update(2)
        self.assertEqual(self.sim_node("picture", "gamma")["VALUE"], 2)
        await gamma.update(2.4)

    @async_test
    async def test_menu_is_unwritable(self):
        picture = (await self.top_level())["picture"]
        self.assertIsNone(picture.value())
        with self.assertRaises(errors.ReadOnlySetting):
            await picture.update(1)

    @async_test
    async def test_read_only(self):
        name = (await self.top_level())["name"]
        self.assertTrue(name.read_only)
        with self.assertRaises(errors.ReadOnlySetting):
            await name.update("Kitchen")
        self.assertEqual(self.sim.puts(), [])

    @async_test
    async def test_string_value(self):
        label = (await self.top_level())["label"]
        self.assertTrue(label.is_string())
        await label.update("Office")
        self.assertEqual(label.value(str), "Office")

    @async_test
    async def test_no_value_is_unwritable(self):
        service = (await self.top_level())["service"]
        self.assertTrue(service.hidden)
        with self.assertRaises(errors.ReadOnlySetting):
            await service.update("x")

    @async_test
    async def test_other_kind(self):
        header = (await self.top_level())["header"]
        self.assertIs(header.kind, SettingKind.OTHER)
        self.assertEqual(header.type_name, "T_HEADER_V1")
        self.assertEqual(await header.expand(), [header])
        with self.assertRaises(errors.ReadOnlySetting):
            await header.update("x")
