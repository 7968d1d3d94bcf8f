import json
import sys
from pathlib import Path
from typing import Iterator, List, Optional

import typer

from panelkit import (
    MarkupError,
    MemoryHost,
    Panel,
    Runtime,
    WidgetCreationError,
    match_selector,
    parse_css,
    parse_markup,
    setup_logging,
)
from panelkit.config import Config
from panelkit.markup import node_to_dict


# Create the main Typer application object
app = typer.Typer(
    name="panelkit",
    help="Developer tools for panelkit markup and stylesheets.",
    add_completion=False
)


def _read(path: Path) -> str:
    if not path.exists():
        print(f"❌ Error: File not found at '{path}'")
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _walk(panel: Panel) -> Iterator[Panel]:
    for child in panel.children():
        yield child
        yield from _walk(child)


def _describe(panel: Panel) -> str:
    text = panel.panel_type
    if panel.id:
        text += f"#{panel.id}"
    classes = sorted(getattr(panel, "classes", ()))
    if classes:
        text += "".join(f".{c}" for c in classes)
    return text


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Log at DEBUG level."),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML configuration file."),
):
    """
    Inspect markup and CSS the way the panelkit runtime sees them.
    """
    if config_file is not None:
        Config.reset_instance()
        Config(str(config_file))
    setup_logging(debug=debug, config=Config())


@app.command()
def parse(
    file_path: Path = typer.Argument(..., help="Markup file to parse."),
    raw_text: bool = typer.Option(False, "--raw-text", help="Keep whitespace-only text runs."),
):
    """
    Parses a markup file and prints the node forest as JSON.
    """
    try:
        nodes = parse_markup(_read(file_path), raw_text=raw_text)
    except MarkupError as e:
        print(f"❌ Markup error: {e}")
        raise typer.Exit(code=1)
    print(json.dumps([node_to_dict(node) for node in nodes], indent=2))


@app.command()
def css(
    file_path: Path = typer.Argument(..., help="Stylesheet to parse."),
):
    """
    Parses a stylesheet and prints its rule set as JSON.
    """
    print(json.dumps(parse_css(_read(file_path)), indent=2))


@app.command()
def match(
    file_path: Path = typer.Argument(..., help="Markup file to build."),
    selector: str = typer.Argument(..., help="Selector to test, e.g. '#Header .Tab'."),
):
    """
    Builds the markup headlessly and lists the panels a selector matches.
    """
    host = MemoryHost()
    runtime = Runtime(host)
    root = host.create_root()
    try:
        runtime.create_panels(root, _read(file_path))
    except (MarkupError, WidgetCreationError) as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    matches: List[str] = [_describe(panel) for panel in _walk(root) if match_selector(panel, selector)]
    for line in matches:
        print(line)
    if not matches:
        print("(no match)")


@app.command()
def preview(
    file_path: Path = typer.Argument(..., help="Markup file to show."),
    css_file: Optional[Path] = typer.Option(None, "--css", help="Stylesheet applied after building."),
    title: str = typer.Option("panelkit preview", help="Window title."),
):
    """
    Opens a Qt window showing the markup (requires PySide6).
    """
    from panelkit.window import QtHost

    host = QtHost()
    runtime = Runtime(host)
    window = host.create_panel("Panel", None, "PreviewRoot")
    window.widget.setWindowTitle(title)
    window.widget.resize(800, 600)

    def on_event(token, *args):
        print(f"⚡ event {token!r} {args}")

    try:
        runtime.create_panels(window, _read(file_path), on_event=on_event)
    except (MarkupError, WidgetCreationError) as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)
    if css_file is not None:
        runtime.apply_css(window, _read(css_file))

    window.widget.show()
    sys.exit(host.app.exec())


if __name__ == "__main__":
    app()
