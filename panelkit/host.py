# panelkit/host.py

"""
The host toolkit contract.

panelkit never draws anything itself. It talks to a retained-mode toolkit
through two small interfaces:

* ``Panel``: a handle on one live widget (identity, classes, parent and
  children, style, named events, typed properties, validity).
* ``PanelFactory``: creates a panel of a named type under a parent.

``MemoryPanel`` / ``MemoryHost`` implement the contract without any GUI. They
back the test-suite and the command line tools. The PySide6 implementation
lives in ``panelkit.window.qt_host``.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Set


class Panel:
    """
    A handle on a widget owned by the host toolkit.

    Subclasses implement every method below. panelkit only creates panels
    through a factory, reads identity/classes/ancestry for selector matching,
    and writes properties, classes, styles and event bindings.
    """

    @property
    def id(self) -> str:
        raise NotImplementedError(f"{self.__class__.__name__} must implement id")

    @property
    def panel_type(self) -> str:
        raise NotImplementedError(f"{self.__class__.__name__} must implement panel_type")

    @property
    def style(self) -> "StyleSheetProxy":
        raise NotImplementedError(f"{self.__class__.__name__} must implement style")

    def is_valid(self) -> bool:
        raise NotImplementedError

    def add_class(self, name: str) -> None:
        raise NotImplementedError

    def remove_class(self, name: str) -> None:
        raise NotImplementedError

    def has_class(self, name: str) -> bool:
        raise NotImplementedError

    def set_has_class(self, name: str, present: bool) -> None:
        if present:
            self.add_class(name)
        else:
            self.remove_class(name)

    def get_parent(self) -> Optional["Panel"]:
        raise NotImplementedError

    def set_parent(self, parent: "Panel") -> None:
        raise NotImplementedError

    def children(self) -> List["Panel"]:
        raise NotImplementedError

    def set_panel_event(self, event_name: str, callback: Callable[..., Any]) -> None:
        raise NotImplementedError

    def has_property(self, name: str) -> bool:
        raise NotImplementedError

    def get_property(self, name: str) -> Any:
        raise NotImplementedError

    def set_property(self, name: str, value: Any) -> None:
        raise NotImplementedError

    def set_accepts_focus(self, value: Any) -> None:
        raise NotImplementedError

    def set_draggable(self, value: Any) -> None:
        raise NotImplementedError

    def delete(self) -> None:
        raise NotImplementedError

    def find_child_traverse(self, panel_id: str) -> Optional["Panel"]:
        """Depth-first search of the descendants for a panel with ``panel_id``."""
        for child in self.children():
            if child.id == panel_id:
                return child
            found = child.find_child_traverse(panel_id)
            if found is not None:
                return found
        return None

    def __repr__(self):
        return f"{self.__class__.__name__}(type={self.panel_type!r}, id={self.id!r})"


class PanelFactory:
    """Creates panels by type name."""

    def create_panel(self, type_name: str, parent: Optional[Panel], panel_id: str = "") -> Panel:
        raise NotImplementedError(f"{self.__class__.__name__} must implement create_panel()")


class StyleSheetProxy:
    """
    Mapping-like view of the inline style of a panel.

    Property names are used exactly as written in CSS text (``flow-children``,
    ``background-color``). Writes overwrite, they never accumulate.
    """

    def __init__(self, on_change: Optional[Callable[[Dict[str, str]], None]] = None):
        self._values: Dict[str, str] = {}
        self._on_change = on_change

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._values[name] = str(value)
        if self._on_change is not None:
            self._on_change(self._values)

    def __delitem__(self, name: str) -> None:
        del self._values[name]
        if self._on_change is not None:
            self._on_change(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def to_css(self) -> str:
        return " ".join(f"{k}: {v};" for k, v in self._values.items())

    def __repr__(self):
        return f"StyleSheetProxy({self._values!r})"


# --- Headless host -----------------------------------------------------------

# Writable properties every headless panel type carries.
_COMMON_PROPERTIES = {"visible": True, "enabled": True, "tooltip": "", "hittest": True}

MEMORY_TYPE_PROPERTIES: Dict[str, Dict[str, Any]] = {
    "Panel": {},
    "Label": {"text": "", "html": False},
    "Button": {},
    "TextButton": {"text": ""},
    "ToggleButton": {"text": "", "selected": False},
    "TextEntry": {"text": "", "maxchars": 0, "placeholder": ""},
    "Image": {"src": "", "scaling": "stretch"},
    "Slider": {"value": 0, "min": 0, "max": 1},
}


class MemoryPanel(Panel):
    """A panel that only lives in Python memory."""

    def __init__(self, panel_type: str, panel_id: str = "", parent: Optional["MemoryPanel"] = None):
        self._type = panel_type
        self._id = panel_id or ""
        self._parent: Optional[MemoryPanel] = None
        self._children: List[MemoryPanel] = []
        self._classes: Set[str] = set()
        self._style = StyleSheetProxy()
        self._events: Dict[str, Callable[..., Any]] = {}
        self._properties: Dict[str, Any] = dict(_COMMON_PROPERTIES)
        self._properties.update(MEMORY_TYPE_PROPERTIES.get(panel_type, {}))
        self.accepts_focus = False
        self.draggable = False
        self._valid = True
        if parent is not None:
            self.set_parent(parent)

    @property
    def id(self) -> str:
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        self._id = value

    @property
    def panel_type(self) -> str:
        return self._type

    @property
    def style(self) -> StyleSheetProxy:
        return self._style

    @property
    def classes(self) -> Set[str]:
        return set(self._classes)

    def is_valid(self) -> bool:
        return self._valid

    def add_class(self, name: str) -> None:
        self._classes.add(name)

    def remove_class(self, name: str) -> None:
        self._classes.discard(name)

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def get_parent(self) -> Optional["MemoryPanel"]:
        return self._parent

    def set_parent(self, parent: Optional["MemoryPanel"]) -> None:
        if self._parent is not None:
            self._parent._children.remove(self)
        self._parent = parent
        if parent is not None:
            parent._children.append(self)

    def children(self) -> List["MemoryPanel"]:
        return list(self._children)

    def set_panel_event(self, event_name: str, callback: Callable[..., Any]) -> None:
        self._events[event_name] = callback

    def has_event(self, event_name: str) -> bool:
        return event_name in self._events

    def fire(self, event_name: str, *args: Any) -> Any:
        """Simulate the host firing ``event_name`` on this panel."""
        callback = self._events.get(event_name)
        if callback is None:
            return None
        return callback(*args)

    def has_property(self, name: str) -> bool:
        return name in self._properties

    def get_property(self, name: str) -> Any:
        return self._properties.get(name)

    def set_property(self, name: str, value: Any) -> None:
        if name not in self._properties:
            raise AttributeError(f"{self._type} has no property '{name}'")
        self._properties[name] = value

    def set_accepts_focus(self, value: Any) -> None:
        self.accepts_focus = value

    def set_draggable(self, value: Any) -> None:
        self.draggable = value

    def delete(self) -> None:
        for child in list(self._children):
            child.delete()
        self.set_parent(None)
        self._valid = False


class MemoryHost(PanelFactory):
    """
    Factory for ``MemoryPanel`` objects.

    :param known_types: Panel types the host accepts. ``None`` accepts any name.
    """

    def __init__(self, known_types: Optional[Set[str]] = None):
        self.known_types = known_types
        self.created: List[MemoryPanel] = []

    def create_panel(self, type_name: str, parent: Optional[Panel], panel_id: str = "") -> MemoryPanel:
        if self.known_types is not None and type_name not in self.known_types:
            raise ValueError(f"Unknown panel type '{type_name}'")
        panel = MemoryPanel(type_name, panel_id, parent)
        self.created.append(panel)
        return panel

    def create_root(self, panel_id: str = "Root") -> MemoryPanel:
        return self.create_panel("Panel", None, panel_id)
