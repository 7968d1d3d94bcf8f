# tests/test_cli.py
import json
import logging
import os
import tempfile
import unittest

from typer.testing import CliRunner

from panelkit.config import Config
from panelkit_cli.main import app

LAYOUT = '<Panel id="Console" class="Window"><Label id="Title" class="Tab" text="x"/><Label class="Tab"/></Panel>'


class TestCli(unittest.TestCase):
    def setUp(self):
        Config.reset_instance()
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        Config.reset_instance()
        logger = logging.getLogger("panelkit")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        self.tmp.cleanup()

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
        return path

    def test_parse(self):
        path = self.write("layout.xml", LAYOUT)
        result = self.runner.invoke(app, ["parse", path])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.stdout)
        self.assertEqual(data[0]["name"], "Panel")
        self.assertEqual(data[0]["attributes"], {"id": "Console", "class": "Window"})
        self.assertEqual(len(data[0]["children"]), 2)

    def test_parse_error(self):
        path = self.write("broken.xml", "<Panel></Label>")
        result = self.runner.invoke(app, ["parse", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Markup error", result.output)

    def test_missing_file(self):
        result = self.runner.invoke(app, ["parse", os.path.join(self.tmp.name, "nope.xml")])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("File not found", result.output)

    def test_css(self):
        path = self.write("theme.css", "/* c */ .a { color: red; } .a { width: 1px; }")
        result = self.runner.invoke(app, ["css", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.stdout), {".a": {"color": "red", "width": "1px"}})

    def test_match(self):
        path = self.write("layout.xml", LAYOUT)
        result = self.runner.invoke(app, ["match", path, ".Window .Tab"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Label#Title.Tab", result.output)
        self.assertEqual(result.output.count("Label"), 2)

    def test_no_match(self):
        path = self.write("layout.xml", LAYOUT)
        result = self.runner.invoke(app, ["match", path, "#Nothing"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("(no match)", result.output)

    def test_config_option(self):
        config_path = self.write("custom.yaml", "materializer:\n  on_failure: skip\n")
        layout = self.write("layout.xml", '<Panel class="a"/>')
        result = self.runner.invoke(app, ["--config", config_path, "match", layout, ".a"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(Config().get_nested("materializer.on_failure"), "skip")


if __name__ == "__main__":
    unittest.main()
