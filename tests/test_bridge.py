# tests/test_bridge.py
import json
import os
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    import PySide6  # noqa: F401
except ImportError:
    PySide6 = None

if PySide6 is not None:
    from panelkit.window import RemoteBridge, evaluate_module_source

from panelkit.exceptions import ModulePayloadError
from panelkit.registry import ModuleRegistry, ModuleState

GEOMETRY = """
__all__ = ["Vector", "ORIGIN"]

def Vector(x, y):
    return (x, y)

ORIGIN = Vector(0, 0)
_private = 1
"""


@unittest.skipIf(PySide6 is None, "PySide6 is not installed")
class TestEvaluateModuleSource(unittest.TestCase):
    def test_all_is_honoured(self):
        table = evaluate_module_source("basis/geometry", GEOMETRY)
        self.assertEqual(set(table), {"Vector", "ORIGIN"})
        self.assertEqual(table["Vector"](1, 2), (1, 2))

    def test_public_names_without_all(self):
        table = evaluate_module_source("m", "x = 1\n_y = 2\n")
        self.assertEqual(table, {"x": 1})

    def test_errors_become_payload_errors(self):
        with self.assertRaises(ModulePayloadError):
            evaluate_module_source("m", "def broken(:\n")
        with self.assertRaises(ModulePayloadError):
            evaluate_module_source("m", "raise RuntimeError('no')")


@unittest.skipIf(PySide6 is None, "PySide6 is not installed")
class TestRemoteBridge(unittest.TestCase):
    def setUp(self):
        self.registry = ModuleRegistry()
        self.bridge = RemoteBridge(self.registry, session_token="s1")
        self.requests = []
        self.bridge.moduleRequested.connect(lambda token, name: self.requests.append((token, name)))

    def test_bridge_becomes_the_requester(self):
        self.assertIs(self.registry.requester, self.bridge)
        self.registry.import_("basis/geometry")
        self.assertEqual(self.requests, [("s1", "basis/geometry")])

    def test_source_answer_releases_the_barrier(self):
        calls = []
        geometry = self.registry.import_("basis/geometry")
        self.registry.ready(lambda: calls.append(geometry["ORIGIN"]))
        self.bridge.onModuleSource("s1", "basis/geometry", GEOMETRY)
        self.assertEqual(calls, [(0, 0)])
        self.assertIs(self.registry.state("basis/geometry"), ModuleState.READY)

    def test_json_answer(self):
        table = self.registry.import_("app/strings")
        self.bridge.onModuleData("s1", "app/strings", json.dumps({"title": "Console"}))
        self.assertEqual(table, {"title": "Console"})
        self.assertTrue(self.registry.is_ready)

    def test_other_session_is_ignored(self):
        self.registry.import_("app/strings")
        self.bridge.onModuleData("s2", "app/strings", json.dumps({"title": "x"}))
        self.assertFalse(self.registry.is_ready)

    def test_bad_payloads_keep_the_module_pending(self):
        self.registry.import_("m")
        with self.assertLogs("panelkit.window.bridge", "ERROR"):
            self.bridge.onModuleData("s1", "m", "[1, 2]")
        with self.assertLogs("panelkit.window.bridge", "ERROR"):
            self.bridge.onModuleData("s1", "m", "{not json")
        with self.assertLogs("panelkit.window.bridge", "ERROR"):
            self.bridge.onModuleSource("s1", "m", "raise ValueError()")
        self.assertIs(self.registry.state("m"), ModuleState.PENDING_REMOTE)


if __name__ == "__main__":
    unittest.main()
