# panelkit/materializer.py

"""
Tree materializer: markup nodes in, live host panels out.

For every element the materializer asks the host factory for a panel of the
element's type, applies the element's attributes and recurses into its
children. Attributes are dispatched in a fixed order, first match wins:

1. ``class``: whitespace separated class names, each added to the panel.
2. Boolean flags with a dedicated setter (``acceptsfocus``, ``draggable``).
3. Event names (``onactivate``, ``onmouseover``...): bound to the ``on_event``
   handler, which receives the attribute value as a correlation token
   followed by whatever arguments the host passes with the event.
4. Properties declared for the panel type in the ``AttributeSchema`` and
   exposed by the panel (``has_property``). A setter that raises is reported
   as ``WidgetCreationError`` and handled by the failure policy.

Anything else is ignored so markup written for newer hosts still loads.
"""

import enum
import logging
import re
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from .exceptions import WidgetCreationError
from .host import Panel, PanelFactory
from .markup import MarkupElement, MarkupNode, MarkupText
from .selector import is_live

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]
PropertySetter = Callable[[Panel, Any], None]

EVENT_NAMES = frozenset({
    "onactivate",
    "onmouseactivate",
    "oncontextmenu",
    "ondblclick",
    "onmouseover",
    "onmouseout",
    "onfocus",
    "onblur",
    "ondescendantfocus",
    "ondescendantblur",
    "oncancel",
    "onload",
    "onselect",
    "ondeselect",
    "ontextentrychange",
    "oninputsubmit",
    "onvaluechanged",
    "onscrolledtobottom",
})

BOOLEAN_SETTERS: Dict[str, Callable[[Panel, Any], None]] = {
    "acceptsfocus": lambda panel, value: panel.set_accepts_focus(value),
    "draggable": lambda panel, value: panel.set_draggable(value),
}

_NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def to_bool(value: str) -> Any:
    """``"true"`` -> True, ``"false"`` -> False, anything else unchanged."""
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def coerce_value(value: str) -> Any:
    """
    Number if the string reads as one, then the boolean rule, else the string.

    Numeric-looking strings always become numbers (``"007"`` -> ``7``); a
    property that needs the literal text has to be set from code.
    """
    text = value.strip()
    if _NUMBER.fullmatch(text):
        if re.fullmatch(r"[+-]?\d+", text):
            return int(text)
        return float(text)
    return to_bool(value)


def property_setter(name: str) -> PropertySetter:
    """
    A setter that writes host property ``name``. It is only used on panels
    whose ``has_property(name)`` is true.
    """

    def setter(panel: Panel, value: Any) -> None:
        panel.set_property(name, value)

    setter.__name__ = f"set_{name}"
    setter.host_property = name
    return setter


class AttributeSchema:
    """
    Which attributes each panel type accepts as properties.

    Types inherit the declarations of their base (``Panel`` by default); the
    ``Panel`` entry applies to every type.
    """

    def __init__(self):
        self._setters: Dict[str, Dict[str, PropertySetter]] = {}
        self._bases: Dict[str, Optional[str]] = {}

    def declare(self, type_name: str, *names: str, base: Optional[str] = "Panel",
                **setters: PropertySetter) -> "AttributeSchema":
        """Declare ``names`` (plain host properties) and custom ``setters`` for a type."""
        table = self._setters.setdefault(type_name, {})
        for name in names:
            table[name] = property_setter(name)
        table.update(setters)
        self._bases[type_name] = base if base != type_name else None
        return self

    def _lineage(self, type_name: str) -> Iterator[str]:
        seen = set()
        current: Optional[str] = type_name
        while current is not None and current not in seen:
            seen.add(current)
            yield current
            current = self._bases.get(current, "Panel" if current != "Panel" else None)

    def setter_for(self, type_name: str, attribute: str) -> Optional[PropertySetter]:
        for current in self._lineage(type_name):
            setter = self._setters.get(current, {}).get(attribute)
            if setter is not None:
                return setter
        return None

    def attributes_of(self, type_name: str) -> List[str]:
        names: List[str] = []
        for current in self._lineage(type_name):
            names.extend(n for n in self._setters.get(current, {}) if n not in names)
        return names


def default_schema() -> AttributeSchema:
    schema = AttributeSchema()
    schema.declare("Panel", "visible", "enabled", "tooltip", "hittest", base=None)
    schema.declare("Label", "text", "html")
    schema.declare("TextButton", "text")
    schema.declare("ToggleButton", "text", "selected")
    schema.declare("TextEntry", "text", "maxchars", "placeholder")
    schema.declare("Image", "src", "scaling")
    schema.declare("Slider", "value", "min", "max")
    return schema


class FailurePolicy(enum.Enum):
    """What to do when the host cannot create a panel."""

    ABORT = "abort"
    SKIP = "skip"


class Materializer:
    """
    Builds live panels from parsed markup.

    :param factory: Host factory used to create panels.
    :param schema: Property declarations per panel type.
    :param on_failure: ``FailurePolicy.ABORT`` raises ``WidgetCreationError``
        to the caller; ``FailurePolicy.SKIP`` logs and leaves the subtree out.
    :param staging: Panel new panels are created under before they are moved
        to their real parent. Created lazily when not given.
    :param staging_id: Id used for the lazily created staging panel.
    """

    def __init__(
        self,
        factory: PanelFactory,
        schema: Optional[AttributeSchema] = None,
        on_failure: FailurePolicy = FailurePolicy.ABORT,
        staging: Optional[Panel] = None,
        staging_id: str = "PanelkitStaging",
    ):
        self.factory = factory
        self.schema = schema or default_schema()
        self.on_failure = FailurePolicy(on_failure)
        self._staging = staging
        self.staging_id = staging_id
        self.last_roots: List[Panel] = []

    @property
    def staging(self) -> Panel:
        if not is_live(self._staging):
            self._staging = self.factory.create_panel("Panel", None, self.staging_id)
            self._staging.set_property("visible", False)
        return self._staging

    def materialize(
        self,
        parent: Panel,
        nodes: Sequence[MarkupNode],
        on_event: Optional[EventHandler] = None,
    ) -> List[Panel]:
        """
        Create panels for ``nodes`` under ``parent``.

        Top-level text nodes are ignored: ``parent`` belongs to the caller.

        :return: The created top-level panels, in input order.
        """
        before = list(parent.children())
        try:
            roots = self._build_children(parent, nodes, on_event, owned=False)
        except WidgetCreationError:
            # nothing half-built stays attached to the caller's parent
            for child in parent.children():
                if child not in before:
                    child.delete()
            raise
        self.last_roots = roots
        return roots

    def _build_children(self, parent: Panel, nodes: Iterable[MarkupNode],
                        on_event: Optional[EventHandler], owned: bool = True) -> List[Panel]:
        created = []
        for node in nodes:
            if isinstance(node, MarkupText):
                if owned:
                    self._apply_text(parent, node.text)
                else:
                    logger.debug("Ignoring top-level text %r", node.text)
                continue
            try:
                panel = self._build(parent, node, on_event)
            except WidgetCreationError as exc:
                if self.on_failure is FailurePolicy.ABORT:
                    raise
                logger.warning("Skipping <%s>: %s", node.name, exc)
                continue
            created.append(panel)
        return created

    def _build(self, parent: Panel, node: MarkupElement, on_event: Optional[EventHandler]) -> Panel:
        attributes = dict(node.attributes)
        panel_id = attributes.pop("id", "")

        panel = self._create(node.name, panel_id)
        panel.set_parent(parent)

        try:
            for name, value in attributes.items():
                self._apply_attribute(panel, name, value, on_event)
            self._build_children(panel, node.children, on_event)
        except WidgetCreationError:
            panel.delete()
            raise
        return panel

    def _create(self, type_name: str, panel_id: str) -> Panel:
        try:
            panel = self.factory.create_panel(type_name, self.staging, panel_id)
        except WidgetCreationError:
            raise
        except Exception as exc:
            raise WidgetCreationError(type_name, str(exc)) from exc
        if not is_live(panel):
            raise WidgetCreationError(type_name, "host returned no panel")
        return panel

    def _apply_attribute(self, panel: Panel, name: str, value: str,
                         on_event: Optional[EventHandler]) -> None:
        if name == "class":
            for class_name in value.split():
                panel.add_class(class_name)
            return

        if name in BOOLEAN_SETTERS:
            BOOLEAN_SETTERS[name](panel, to_bool(value))
            return

        if name in EVENT_NAMES:
            if on_event is not None:
                panel.set_panel_event(name, _bind_event(on_event, value))
            return

        if not self._set(panel, name, coerce_value(value)):
            logger.debug("Ignoring attribute %r on <%s>", name, panel.panel_type)

    def _apply_text(self, panel: Panel, text: str) -> None:
        self._set(panel, "text", text)

    def _set(self, panel: Panel, name: str, value: Any) -> bool:
        """Run the schema setter for ``name``. False when the panel has no such property."""
        setter = self.schema.setter_for(panel.panel_type, name)
        if setter is None:
            return False
        host_property = getattr(setter, "host_property", None)
        if host_property is not None and not panel.has_property(host_property):
            return False
        try:
            setter(panel, value)
        except Exception as exc:
            raise WidgetCreationError(panel.panel_type, f"cannot set {name}={value!r}: {exc}") from exc
        return True


def _bind_event(on_event: EventHandler, token: str) -> Callable[..., Any]:
    def handler(*native_args: Any) -> Any:
        return on_event(token, *native_args)

    return handler
