"""Small text-entry and confirmation modal screens."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

_DIALOG_CSS = """
    {name} {{
        align: center middle;
        background: $background 60%;
    }}

    #{prefix}-dialog {{
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }}

    #{prefix}-title {{
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }}

    #{prefix}-prompt {{
        color: white;
        margin-bottom: 1;
    }}

    #{prefix}-value {{
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }}

    #{prefix}-error {{
        color: #ffb3b3;
        margin-bottom: 1;
    }}

    #{prefix}-help {{
        color: #dddddd;
    }}
"""


class PromptModal(ModalScreen[str | None]):
    """Prompt for one line of text; dismisses with the text or None when cancelled."""

    CSS = _DIALOG_CSS.format(name="PromptModal", prefix="prompt")

    def __init__(
        self,
        title: str,
        prompt: str = "",
        value: str = "",
        digits_only: bool = False,
        required: bool = False,
        max_length: int = 80,
    ) -> None:
        super().__init__()
        self.title_text = title
        self.prompt_text = prompt
        self.value = value
        self.digits_only = digits_only
        self.required = required
        self.max_length = max_length
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="prompt-dialog"):
            yield Static(self.title_text, id="prompt-title")
            yield Static(self.prompt_text, id="prompt-prompt")
            yield Static(id="prompt-value")
            yield Static(id="prompt-error")
            yield Static("Enter confirm. Backspace delete. Esc cancel.", id="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if self.digits_only and not event.character.isdigit():
                event.stop()
                return
            if len(self.value) < self.max_length:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        value = self.value.strip()
        if self.required and not value:
            self.error = "A value is required."
            self._refresh_content()
            return
        self.dismiss(value)

    def _refresh_content(self) -> None:
        self.query_one("#prompt-value", Static).update(f"{self.value}|")
        self.query_one("#prompt-error", Static).update(self.error or "")


class ConfirmModal(ModalScreen[bool]):
    """Yes/no confirmation for destructive actions."""

    CSS = _DIALOG_CSS.format(name="ConfirmModal", prefix="confirm")

    BINDINGS = [
        ("y", "answer(True)", "Yes"),
        ("enter", "answer(True)", "Yes"),
        ("n", "answer(False)", "No"),
        ("escape", "answer(False)", "No"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static("Please confirm", id="confirm-title")
            yield Static(self.message, id="confirm-prompt")
            yield Static("Y / Enter confirm. N / Esc cancel.", id="confirm-help")

    def action_answer(self, confirmed: bool) -> None:
        self.dismiss(confirmed)
