"""propfmt TUI Widgets - Custom panels for the properties viewer."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Label, ListItem, ListView, Static


class SummaryPanel(Static):
    """Sidebar panel showing file statistics."""

    DEFAULT_CSS = """
    SummaryPanel {
        width: 28;
        border: solid $accent;
        padding: 1;
        overflow-y: auto;
    }
    SummaryPanel .summary-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    SummaryPanel .summary-key {
        color: $text-muted;
    }
    SummaryPanel .summary-val {
        color: $text;
    }
    SummaryPanel .summary-warn {
        color: $error;
        text-style: bold;
    }
    """

    def __init__(self, file_name: str, stats: dict[str, int], **kwargs) -> None:
        super().__init__(**kwargs)
        self._file_name = file_name
        self._stats = stats

    def compose(self) -> ComposeResult:
        name = self._file_name
        yield Label(name if len(name) <= 24 else name[:21] + "...", classes="summary-title")

        for key, val in self._stats.items():
            yield Label(f"{key}:", classes="summary-key")
            yield Label(f"  {val}", classes="summary-val")

        if self._stats.get("blocks opened") != self._stats.get("blocks closed"):
            yield Label("")  # spacer
            yield Label("Unbalanced blocks", classes="summary-warn")


class KeyList(ListView):
    """List of property keys. Supports keyboard navigation."""

    DEFAULT_CSS = """
    KeyList {
        width: 36;
        border: solid $accent;
    }
    KeyList > ListItem {
        padding: 0 1;
    }
    KeyList > ListItem.--highlight {
        background: $accent;
    }
    """

    class KeySelected(Message):
        """Fired when a key is highlighted or selected."""

        def __init__(self, key: str, index: int) -> None:
            self.key = key
            self.index = index
            super().__init__()

    def __init__(self, keys: list[str], **kwargs) -> None:
        self._keys = keys
        super().__init__(**kwargs)

    @property
    def key_names(self) -> list[str]:
        return self._keys

    def compose(self) -> ComposeResult:
        for key in self._keys:
            yield ListItem(Label(key))

    def _post_current(self) -> None:
        idx = self.index or 0
        if 0 <= idx < len(self._keys):
            self.post_message(self.KeySelected(self._keys[idx], idx))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        self._post_current()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._post_current()


class ValuePanel(Static):
    """Shows the value of the current key, or the whole rendered source."""

    DEFAULT_CSS = """
    ValuePanel {
        border: solid $accent;
        padding: 1;
        overflow: auto;
    }
    ValuePanel .value-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    ValuePanel .value-body {
        color: $text;
    }
    """

    current_key = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._title_widget: Label | None = None
        self._body_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._title_widget = Label("Select a key", classes="value-title")
        self._body_widget = Static("", classes="value-body")
        yield self._title_widget
        yield self._body_widget

    def show_value(self, key: str, value: str) -> None:
        self.current_key = key
        if self._title_widget:
            self._title_widget.update(f"--- {key} ---")
        if self._body_widget:
            # Empty values exist (bare keys, block prefixes); say so explicitly
            self._body_widget.update(value if value else "(empty)")
        self.scroll_home()

    def show_source(self, name: str, text: str) -> None:
        """Display the rendered file with properties syntax highlighting."""
        from rich.syntax import Syntax

        self.current_key = ""
        if self._title_widget:
            self._title_widget.update(f"--- {name} ---")
        if self._body_widget:
            self._body_widget.update(
                Syntax(text, "properties", theme="monokai", line_numbers=True)
            )
        self.scroll_home()
