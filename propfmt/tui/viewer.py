"""propfmt TUI Viewer - Main Textual app with 3-panel layout."""

from __future__ import annotations

import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Input

from propfmt.document import LineKind, Properties
from propfmt.reader import PropReader
from propfmt.tui.widgets import KeyList, SummaryPanel, ValuePanel


def summarize(props: Properties) -> dict[str, int]:
    """Counts shown in the summary panel."""
    kinds = [line.kind for line in props.lines]
    return {
        "keys": len(props),
        "lines": len(kinds),
        "comments": kinds.count(LineKind.COMMENT),
        "blank lines": kinds.count(LineKind.EMPTY),
        "blocks opened": kinds.count(LineKind.BLOCK_START),
        "blocks closed": kinds.count(LineKind.BLOCK_END),
    }


class PropsViewerApp(App):
    """TUI viewer for .properties files. 3-panel layout with keyboard navigation."""

    TITLE = "propfmt Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    #search-bar {
        dock: bottom;
        display: none;
        height: 3;
        padding: 0 1;
    }
    #search-bar.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("slash", "toggle_search", "Search", show=True),
        Binding("escape", "close_search", "Close search", show=False),
        Binding("j", "next_key", "Next", show=True),
        Binding("k", "prev_key", "Prev", show=True),
        Binding("s", "toggle_source", "Source", show=True),
    ]

    def __init__(self, path: str | Path, **kwargs) -> None:
        super().__init__(**kwargs)
        self._path = Path(path)
        self._props: Properties | None = None
        self._all_keys: list[str] = []
        self._showing_source = False

    def compose(self) -> ComposeResult:
        self._props = PropReader.read(self._path)
        self._all_keys = self._props.keys()

        self.title = f"propfmt Viewer - {self._path.name}"

        yield Header()

        with Horizontal(id="main-area"):
            yield SummaryPanel(
                file_name=self._path.name,
                stats=summarize(self._props),
                id="summary",
            )
            yield KeyList(keys=list(self._all_keys), id="keys")
            yield ValuePanel(id="value")

        yield Input(placeholder="Search keys... (Enter also searches values)", id="search-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Auto-select first key on mount."""
        if self._all_keys:
            self._show_key(self._all_keys[0])
            self.query_one("#keys", KeyList).focus()

    def _show_key(self, key: str) -> None:
        if self._props is None:
            return
        self._showing_source = False
        panel = self.query_one("#value", ValuePanel)
        panel.show_value(key, self._props.get(key))

    def on_key_list_key_selected(self, event: KeyList.KeySelected) -> None:
        self._show_key(event.key)

    def action_next_key(self) -> None:
        self.query_one("#keys", KeyList).action_cursor_down()

    def action_prev_key(self) -> None:
        self.query_one("#keys", KeyList).action_cursor_up()

    def action_toggle_source(self) -> None:
        """Switch between the current value and the full rendered file."""
        if self._props is None:
            return
        panel = self.query_one("#value", ValuePanel)
        if self._showing_source:
            key_list = self.query_one("#keys", KeyList)
            keys = key_list.key_names
            idx = key_list.index or 0
            if keys and idx < len(keys):
                self._show_key(keys[idx])
            return
        panel.show_source(self._path.name, self._props.text())
        self._showing_source = True

    def action_toggle_search(self) -> None:
        """Show/hide the search bar."""
        search = self.query_one("#search-bar", Input)
        search.toggle_class("visible")
        if search.has_class("visible"):
            search.focus()
        else:
            search.value = ""
            self._restore_keys()
            self.query_one("#keys", KeyList).focus()

    def action_close_search(self) -> None:
        search = self.query_one("#search-bar", Input)
        search.remove_class("visible")
        search.value = ""
        self._restore_keys()
        self.query_one("#keys", KeyList).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter keys as the user types."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query:
            self._restore_keys()
            return
        self._update_key_list([k for k in self._all_keys if query in k.lower()])

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """On Enter, match values as well as keys."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query or self._props is None:
            return
        matches = [
            key for key in self._all_keys
            if query in key.lower() or query in self._props.get(key).lower()
        ]
        self._update_key_list(matches)

    def _update_key_list(self, keys: list[str]) -> None:
        """Replace the key list with filtered keys."""
        old = self.query_one("#keys", KeyList)
        new_list = KeyList(keys=keys, id="keys")
        old.remove()
        self.query_one("#main-area", Horizontal).mount(new_list, before="#value")
        if keys:
            self._show_key(keys[0])

    def _restore_keys(self) -> None:
        self._update_key_list(list(self._all_keys))


def run_viewer(path: str | Path) -> None:
    """Launch the propfmt TUI viewer."""
    path = Path(path)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        PropReader.read(path)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = PropsViewerApp(path)
    app.run()
