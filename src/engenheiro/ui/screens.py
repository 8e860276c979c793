"""Modal screens for the TUI.

This module hides the design decisions about:
- Dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs
- How alerts, confirmations and file selection are presented

To change how dialogs look, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

DIALOG_CSS = """
{screen} {{
    align: center middle;
    background: $background 70%;
}}

{screen} .dialog {{
    width: 64;
    height: auto;
    max-height: 20;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}}

{screen} .dialog-title {{
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
    border-bottom: solid $border;
    margin-bottom: 1;
}}

{screen} .dialog-body {{
    width: 100%;
    height: auto;
    padding: 1 2;
    background: $panel;
    border: round $border;
    margin-bottom: 1;
}}

{screen} .dialog-buttons {{
    width: 100%;
    height: 3;
    align: center middle;
}}

{screen} .dialog-buttons Button {{
    margin: 0 1;
    min-width: 10;
}}
"""


class AlertScreen(ModalScreen[None]):
    """Blocking alert with a single OK button."""

    CSS = DIALOG_CSS.format(screen="AlertScreen")

    BINDINGS = [
        Binding("escape", "dismiss_alert", "OK", show=False),
        Binding("enter", "dismiss_alert", "OK", show=False),
    ]

    def __init__(self, title: str, message: str) -> None:
        super().__init__()
        self._title = title
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static(self._title, classes="dialog-title", markup=False)
            yield Static(self._message, classes="dialog-body", markup=False)
            with Horizontal(classes="dialog-buttons"):
                yield Button("OK", id="btn-ok", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_dismiss_alert(self) -> None:
        self.dismiss(None)


class ConfirmationScreen(ModalScreen[bool]):
    """Yes/no confirmation dialog."""

    CSS = DIALOG_CSS.format(screen="ConfirmationScreen")

    BINDINGS = [
        Binding("s", "answer(True)", "Sim", show=False),
        Binding("n", "answer(False)", "Não", show=False),
        Binding("escape", "answer(False)", "Cancelar", show=False),
    ]

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self._prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Confirmação", classes="dialog-title")
            yield Static(self._prompt, classes="dialog-body", markup=False)
            with Horizontal(classes="dialog-buttons"):
                yield Button("Sim", id="btn-yes", variant="success")
                yield Button("Não", id="btn-no", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-yes")

    def action_answer(self, value: bool) -> None:
        self.dismiss(value)


class AttachFileScreen(ModalScreen[str | None]):
    """Asks for the path of a file to attach.

    Dismisses with the entered path, or None when cancelled.
    """

    CSS = DIALOG_CSS.format(screen="AttachFileScreen")

    BINDINGS = [
        Binding("escape", "cancel", "Cancelar", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Anexar Arquivo", classes="dialog-title")
            yield Static(
                "Imagem, PDF ou texto simples (.png, .jpg, .pdf, .txt)",
                classes="dialog-body",
            )
            yield Input(placeholder="caminho/do/arquivo.pdf", id="attach-path")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Anexar", id="btn-attach", variant="primary")
                yield Button("Cancelar", id="btn-cancel")

    def on_mount(self) -> None:
        self.query_one("#attach-path", Input).focus()

    def _finish(self) -> None:
        path = self.query_one("#attach-path", Input).value.strip()
        self.dismiss(path or None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._finish()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-attach":
            self._finish()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
