# panelkit/window/qt_host.py

"""
PySide6 implementation of the host contract.

Panels are plain QtWidgets:

* the panel id is the widget's ``objectName``;
* classes are kept on the wrapper and mirrored into a ``class`` dynamic
  property, so Qt stylesheets can use ``[class~="Selected"]`` as well;
* ``panel.style`` writes regenerate the widget's own stylesheet;
* named events are connected to the matching Qt signal (``onactivate`` ->
  ``clicked``, ``ontextentrychange`` -> ``textChanged``...).

Layout and rendering stay Qt's business.
"""

import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Type

import shiboken6
from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QCheckBox,
    QFrame,
    QLabel,
    QLineEdit,
    QPushButton,
    QSlider,
    QWidget,
)

from ..host import Panel, PanelFactory, StyleSheetProxy

logger = logging.getLogger(__name__)

# event attribute -> Qt signal name
EVENT_SIGNALS: Dict[str, str] = {
    "onactivate": "clicked",
    "onmouseactivate": "pressed",
    "ontextentrychange": "textChanged",
    "oninputsubmit": "returnPressed",
    "onvaluechanged": "valueChanged",
    "onselect": "toggled",
}


def _horizontal_slider(parent: Optional[QWidget] = None) -> QSlider:
    return QSlider(Qt.Orientation.Horizontal, parent)


WIDGET_TYPES: Dict[str, Callable[..., QWidget]] = {
    "Panel": QFrame,
    "Label": QLabel,
    "Image": QLabel,
    "Button": QPushButton,
    "TextButton": QPushButton,
    "ToggleButton": QCheckBox,
    "TextEntry": QLineEdit,
    "Slider": _horizontal_slider,
}


def _set_text(widget: QWidget, value: Any) -> None:
    if hasattr(widget, "setText"):
        widget.setText(str(value))


def _set_html(widget: QWidget, value: Any) -> None:
    if isinstance(widget, QLabel):
        widget.setTextFormat(Qt.TextFormat.RichText if value else Qt.TextFormat.PlainText)


def _set_src(widget: QWidget, value: Any) -> None:
    if isinstance(widget, QLabel):
        widget.setPixmap(QPixmap(str(value)))


def _set_hittest(widget: QWidget, value: Any) -> None:
    widget.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, not value)


PROPERTY_SETTERS: Dict[str, Callable[[QWidget, Any], None]] = {
    "text": _set_text,
    "html": _set_html,
    "src": _set_src,
    "hittest": _set_hittest,
    "enabled": lambda w, v: w.setEnabled(bool(v)),
    "tooltip": lambda w, v: w.setToolTip(str(v)),
    "placeholder": lambda w, v: w.setPlaceholderText(str(v)),
    "maxchars": lambda w, v: w.setMaxLength(int(v)),
    "selected": lambda w, v: w.setChecked(bool(v)),
    "value": lambda w, v: w.setValue(int(v)),
    "min": lambda w, v: w.setMinimum(int(v)),
    "max": lambda w, v: w.setMaximum(int(v)),
}

PROPERTY_GETTERS: Dict[str, Callable[[QWidget], Any]] = {
    "text": lambda w: w.text() if hasattr(w, "text") else None,
    "visible": lambda w: not w.isHidden(),
    "enabled": lambda w: w.isEnabled(),
    "tooltip": lambda w: w.toolTip(),
    "selected": lambda w: w.isChecked() if hasattr(w, "isChecked") else None,
    "value": lambda w: w.value() if hasattr(w, "value") else None,
}


class QtPanel(Panel):
    """Wrapper around one QWidget. Obtain instances through ``QtHost.wrap``."""

    def __init__(self, host: "QtHost", widget: QWidget, panel_type: str):
        self._host = host
        self.widget = widget
        self._type = panel_type
        self._classes: List[str] = []
        self._style = StyleSheetProxy(self._restyle)
        self._connections: Dict[str, tuple] = {}
        self._hidden = False
        self.accepts_focus = False
        self.draggable = False

    # identity

    @property
    def id(self) -> str:
        return self.widget.objectName() if self.is_valid() else ""

    @property
    def panel_type(self) -> str:
        return self._type

    @property
    def style(self) -> StyleSheetProxy:
        return self._style

    def is_valid(self) -> bool:
        return shiboken6.isValid(self.widget)

    # classes

    def add_class(self, name: str) -> None:
        if name not in self._classes:
            self._classes.append(name)
            self._sync_classes()

    def remove_class(self, name: str) -> None:
        if name in self._classes:
            self._classes.remove(name)
            self._sync_classes()

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def _sync_classes(self) -> None:
        self.widget.setProperty("class", " ".join(self._classes))
        style = self.widget.style()
        style.unpolish(self.widget)
        style.polish(self.widget)

    def _restyle(self, values: Dict[str, str]) -> None:
        if self.is_valid():
            self.widget.setStyleSheet(self._style.to_css())

    # hierarchy

    def get_parent(self) -> Optional["QtPanel"]:
        parent = self.widget.parentWidget()
        return self._host.wrap(parent) if parent is not None else None

    def set_parent(self, parent: Optional[Panel]) -> None:
        target = parent.widget if isinstance(parent, QtPanel) else None
        self.widget.setParent(target)
        if target is not None and not self._hidden:
            self.widget.show()

    def children(self) -> List["QtPanel"]:
        widgets = self.widget.findChildren(QWidget, "", Qt.FindChildOption.FindDirectChildrenOnly)
        return [self._host.wrap(w) for w in widgets]

    # events and properties

    def set_panel_event(self, event_name: str, callback: Callable[..., Any]) -> None:
        signal_name = EVENT_SIGNALS.get(event_name)
        signal = getattr(self.widget, signal_name, None) if signal_name else None
        if signal is None:
            logger.debug("%s has no signal for %s", self._type, event_name)
            return

        previous = self._connections.pop(event_name, None)
        if previous is not None:
            previous[0].disconnect(previous[1])

        def handler(*args: Any) -> None:
            callback(*args)

        signal.connect(handler)
        self._connections[event_name] = (signal, handler)

    def has_property(self, name: str) -> bool:
        if name in PROPERTY_GETTERS or name in PROPERTY_SETTERS or name == "visible":
            return True
        return self.widget.property(name) is not None

    def get_property(self, name: str) -> Any:
        getter = PROPERTY_GETTERS.get(name)
        if getter is not None:
            return getter(self.widget)
        return self.widget.property(name)

    def set_property(self, name: str, value: Any) -> None:
        if name == "visible":
            self._hidden = not value
            self.widget.setVisible(bool(value))
            return
        setter = PROPERTY_SETTERS.get(name)
        if setter is not None:
            setter(self.widget, value)
        else:
            self.widget.setProperty(name, value)

    def set_accepts_focus(self, value: Any) -> None:
        self.accepts_focus = bool(value)
        self.widget.setFocusPolicy(Qt.FocusPolicy.StrongFocus if value else Qt.FocusPolicy.NoFocus)

    def set_draggable(self, value: Any) -> None:
        self.draggable = bool(value)
        self.widget.setProperty("draggable", self.draggable)

    def delete(self) -> None:
        if not self.is_valid():
            return
        self._host.forget(self.widget)
        self.widget.setParent(None)
        shiboken6.delete(self.widget)


class QtHost(PanelFactory):
    """
    Creates ``QtPanel`` objects and keeps one wrapper per live widget.

    A ``QApplication`` is created on first use when the process has none.
    """

    def __init__(self, widget_types: Optional[Dict[str, Callable[..., QWidget]]] = None):
        self.app = QApplication.instance() or QApplication(sys.argv)
        self.widget_types: Dict[str, Callable[..., QWidget]] = dict(WIDGET_TYPES)
        if widget_types:
            self.widget_types.update(widget_types)
        self._panels: Dict[int, QtPanel] = {}

    def register_type(self, type_name: str, widget_class: Type[QWidget]) -> None:
        self.widget_types[type_name] = widget_class

    def create_panel(self, type_name: str, parent: Optional[Panel], panel_id: str = "") -> QtPanel:
        widget_class = self.widget_types.get(type_name)
        if widget_class is None:
            raise KeyError(f"No Qt widget registered for panel type '{type_name}'")

        parent_widget = parent.widget if isinstance(parent, QtPanel) else None
        widget = widget_class(parent_widget)
        widget.setObjectName(panel_id or "")
        widget.setProperty("panelType", type_name)
        return self.wrap(widget, type_name)

    def wrap(self, widget: QWidget, panel_type: Optional[str] = None) -> QtPanel:
        """The wrapper for ``widget``, created on first sight."""
        key = shiboken6.getCppPointer(widget)[0]
        panel = self._panels.get(key)
        if panel is None or not shiboken6.isValid(panel.widget):
            panel_type = panel_type or widget.property("panelType") or type(widget).__name__
            panel = QtPanel(self, widget, panel_type)
            self._panels[key] = panel
            widget.destroyed.connect(lambda *_: self._panels.pop(key, None))
        return panel

    def forget(self, widget: QWidget) -> None:
        self._panels.pop(shiboken6.getCppPointer(widget)[0], None)
