# panelkit/__init__.py

"""
panelkit: declarative panels on top of a retained-mode host toolkit.

Widget trees are written as markup, styling as CSS-subset rule blocks, and
independently loaded UI fragments share capabilities through a module
registry. The Qt host lives in ``panelkit.window`` and needs PySide6.
"""

# --- Engines ---
from .merge import merge, MISSING
from .selector import CompoundTerm, match_selector, parse_selector
from .style import apply_css, apply_style, compute_style, parse_css
from .markup import MarkupElement, MarkupNode, MarkupParser, MarkupText, decode_entities, parse_markup
from .materializer import (
    AttributeSchema,
    EVENT_NAMES,
    FailurePolicy,
    Materializer,
    coerce_value,
    default_schema,
    to_bool,
)
from .registry import ModuleRegistry, ModuleRequester, ModuleState

# --- Host contract ---
from .host import MemoryHost, MemoryPanel, Panel, PanelFactory, StyleSheetProxy

# --- Ambient ---
from .config import Config, get_config
from .exceptions import MarkupError, ModulePayloadError, PanelkitError, WidgetCreationError
from .log_config import setup_logging
from .multiline import MultilineLabel
from .runtime import Runtime
from .watcher import ManualScheduler, Scheduler, StateWatcher

__all__ = [
    # Engines
    'merge', 'MISSING',
    'CompoundTerm', 'match_selector', 'parse_selector',
    'apply_css', 'apply_style', 'compute_style', 'parse_css',
    'MarkupElement', 'MarkupNode', 'MarkupParser', 'MarkupText', 'decode_entities', 'parse_markup',
    'AttributeSchema', 'EVENT_NAMES', 'FailurePolicy', 'Materializer',
    'coerce_value', 'default_schema', 'to_bool',
    'ModuleRegistry', 'ModuleRequester', 'ModuleState',
    # Host
    'MemoryHost', 'MemoryPanel', 'Panel', 'PanelFactory', 'StyleSheetProxy',
    # Ambient
    'Config', 'get_config',
    'MarkupError', 'ModulePayloadError', 'PanelkitError', 'WidgetCreationError',
    'setup_logging',
    'MultilineLabel',
    'Runtime',
    'ManualScheduler', 'Scheduler', 'StateWatcher',
]

__version__ = "0.1.0"
