# tests/test_materializer.py
import unittest

from panelkit.exceptions import WidgetCreationError
from panelkit.host import MemoryHost
from panelkit.markup import parse_markup
from panelkit.materializer import (
    AttributeSchema,
    FailurePolicy,
    Materializer,
    coerce_value,
    default_schema,
    to_bool,
)


class TestCoercion(unittest.TestCase):
    def test_numbers(self):
        self.assertEqual(coerce_value("5"), 5)
        self.assertEqual(coerce_value("-2"), -2)
        self.assertEqual(coerce_value(" 5 "), 5)
        self.assertEqual(coerce_value("1.5"), 1.5)
        self.assertEqual(coerce_value(".5"), 0.5)
        self.assertEqual(coerce_value("1e3"), 1000.0)
        self.assertIsInstance(coerce_value("5"), int)

    def test_leading_zeros_become_numbers(self):
        self.assertEqual(coerce_value("007"), 7)

    def test_booleans_and_strings(self):
        self.assertIs(coerce_value("true"), True)
        self.assertIs(coerce_value("false"), False)
        self.assertEqual(coerce_value("True"), "True")
        self.assertEqual(coerce_value("hello"), "hello")
        self.assertEqual(coerce_value(""), "")

    def test_to_bool(self):
        self.assertIs(to_bool("true"), True)
        self.assertIs(to_bool("false"), False)
        self.assertEqual(to_bool("1"), "1")


class TestAttributeSchema(unittest.TestCase):
    def test_types_inherit_panel_properties(self):
        schema = default_schema()
        self.assertIsNotNone(schema.setter_for("Label", "visible"))
        self.assertIsNotNone(schema.setter_for("Label", "text"))
        self.assertIsNone(schema.setter_for("Panel", "text"))
        self.assertIsNotNone(schema.setter_for("SomethingNew", "tooltip"))

    def test_attributes_of(self):
        self.assertEqual(
            default_schema().attributes_of("Label"),
            ["text", "html", "visible", "enabled", "tooltip", "hittest"],
        )

    def test_custom_base_and_setter(self):
        schema = default_schema()
        calls = []
        schema.declare("RichLabel", "glow", base="Label", markup=lambda p, v: calls.append((p, v)))
        self.assertIsNotNone(schema.setter_for("RichLabel", "text"))
        self.assertIsNotNone(schema.setter_for("RichLabel", "glow"))
        schema.setter_for("RichLabel", "markup")("panel", "x")
        self.assertEqual(calls, [("panel", "x")])

    def test_declare_is_chainable(self):
        schema = AttributeSchema().declare("Panel", "visible", base=None).declare("Knob", "angle")
        self.assertEqual(schema.attributes_of("Knob"), ["angle", "visible"])


class TestMaterializer(unittest.TestCase):
    def setUp(self):
        self.host = MemoryHost()
        self.root = self.host.create_root()
        self.materializer = Materializer(self.host)

    def build(self, markup, on_event=None):
        return self.materializer.materialize(self.root, parse_markup(markup), on_event)

    def test_tree_shape_and_order(self):
        panels = self.build('<Panel id="a"><Label id="a1"/><Label id="a2"/></Panel><Panel id="b"/>')
        self.assertEqual([p.id for p in panels], ["a", "b"])
        self.assertEqual(self.root.children(), panels)
        self.assertEqual([c.id for c in panels[0].children()], ["a1", "a2"])
        self.assertIs(panels[0].children()[0].get_parent(), panels[0])
        self.assertEqual(self.materializer.last_roots, panels)

    def test_classes(self):
        panel, = self.build('<Panel class="Window  Dark"/>')
        self.assertEqual(panel.classes, {"Window", "Dark"})

    def test_properties_are_coerced(self):
        slider, label = self.build('<Slider value="5" min="0" max="10"/><Label text="hi" visible="false"/>')
        self.assertEqual(slider.get_property("value"), 5)
        self.assertEqual(slider.get_property("max"), 10)
        self.assertEqual(label.get_property("text"), "hi")
        self.assertIs(label.get_property("visible"), False)

    def test_boolean_setters(self):
        panel, = self.build('<Panel acceptsfocus="true" draggable="false"/>')
        self.assertIs(panel.accepts_focus, True)
        self.assertIs(panel.draggable, False)

    def test_unknown_attributes_are_ignored(self):
        with self.assertLogs("panelkit.materializer", "DEBUG") as logs:
            panel, = self.build('<Panel foo="bar" text="nope"/>')
        self.assertFalse(panel.has_property("foo"))
        self.assertTrue(any("foo" in line for line in logs.output))

    def test_events_carry_the_token(self):
        received = []
        button, = self.build(
            '<TextButton onactivate="close" onmouseover="hover"/>',
            on_event=lambda token, *args: received.append((token, args)),
        )
        button.fire("onactivate")
        button.fire("onmouseover", 3, 4)
        self.assertEqual(received, [("close", ()), ("hover", (3, 4))])

    def test_events_unbound_without_handler(self):
        button, = self.build('<TextButton onactivate="close"/>')
        self.assertFalse(button.has_event("onactivate"))

    def test_text_child_sets_text(self):
        label, panel = self.build("<Label>Hello &amp; bye</Label><Panel>ignored</Panel>")
        self.assertEqual(label.get_property("text"), "Hello & bye")
        self.assertFalse(panel.has_property("text"))

    def test_staging_panel(self):
        self.build("<Panel/>")
        staging = self.materializer.staging
        self.assertEqual(staging.id, "PanelkitStaging")
        self.assertIs(staging.get_property("visible"), False)
        self.assertEqual(staging.children(), [])
        self.build("<Panel/>")
        self.assertIs(self.materializer.staging, staging)

    def test_empty_input(self):
        self.assertEqual(self.build(""), [])
        self.assertEqual(self.root.children(), [])


class TestFailurePolicy(unittest.TestCase):
    MARKUP = '<Panel id="a"><Label id="a1"/><Bogus/></Panel><Panel id="b"/>'

    def setUp(self):
        self.host = MemoryHost(known_types={"Panel", "Label"})
        self.root = self.host.create_root()
        self.existing = self.host.create_panel("Panel", self.root, "existing")

    def test_abort_raises_and_cleans_up(self):
        materializer = Materializer(self.host)
        with self.assertRaises(WidgetCreationError) as ctx:
            materializer.materialize(self.root, parse_markup(self.MARKUP))
        self.assertEqual(ctx.exception.type_name, "Bogus")
        self.assertEqual(self.root.children(), [self.existing])
        partial = [p for p in self.host.created if p.id == "a"]
        self.assertFalse(partial[0].is_valid())

    def test_skip_leaves_the_subtree_out(self):
        materializer = Materializer(self.host, on_failure=FailurePolicy.SKIP)
        with self.assertLogs("panelkit.materializer", "WARNING"):
            panels = materializer.materialize(self.root, parse_markup(self.MARKUP))
        self.assertEqual([p.id for p in panels], ["a", "b"])
        self.assertEqual([c.id for c in panels[0].children()], ["a1"])

    def test_policy_from_string(self):
        self.assertIs(Materializer(self.host, on_failure="skip").on_failure, FailurePolicy.SKIP)


class TestPropertyWrites(unittest.TestCase):
    def setUp(self):
        self.host = MemoryHost()
        self.root = self.host.create_root()
        self.schema = default_schema()

    def build(self, markup, on_failure=FailurePolicy.ABORT):
        materializer = Materializer(self.host, schema=self.schema, on_failure=on_failure)
        return materializer.materialize(self.root, parse_markup(markup))

    def test_declared_but_missing_property_is_ignored(self):
        self.schema.declare("Gauge", "level")
        for policy in (FailurePolicy.ABORT, FailurePolicy.SKIP):
            panels = self.build('<Panel id="ok"/><Gauge id="g" level="3"/>', policy)
            self.assertEqual([p.id for p in panels], ["ok", "g"])
            self.assertFalse(panels[1].has_property("level"))

    def test_failing_setter_skips_the_panel(self):
        self.schema.declare("Gauge", level=broken_setter)
        with self.assertLogs("panelkit.materializer", "WARNING"):
            panels = self.build('<Panel id="ok"/><Gauge id="g" level="3"/>', FailurePolicy.SKIP)
        self.assertEqual([p.id for p in panels], ["ok"])
        self.assertEqual([p.id for p in self.root.children()], ["ok"])

    def test_failing_setter_aborts_and_cleans_up(self):
        self.schema.declare("Gauge", level=broken_setter)
        with self.assertRaises(WidgetCreationError) as ctx:
            self.build('<Panel id="ok"/><Panel id="outer"><Gauge level="3"/></Panel>')
        self.assertEqual(ctx.exception.type_name, "Gauge")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)
        self.assertEqual(self.root.children(), [])

    def test_top_level_text_leaves_the_parent_alone(self):
        label = self.host.create_panel("Label", None, "target")
        label.set_property("text", "keep")
        panels = Materializer(self.host).materialize(label, parse_markup("oops<Panel/>"))
        self.assertEqual(len(panels), 1)
        self.assertEqual(label.get_property("text"), "keep")


def broken_setter(panel, value):
    raise ValueError("level out of range")


if __name__ == "__main__":
    unittest.main()
