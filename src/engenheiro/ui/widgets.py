"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Report card rendering and in-place placeholder updates
- Filter bar and pending attachment chips
- Input history management
- Dimensional data table with link cells
- Log rendering and level filtering
"""

from collections.abc import Iterable
from datetime import datetime

import pyperclip
from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, DataTable, RichLog, Static, TextArea

from ..conversation import Attachment, Message
from ..llm import GenerationMode
from ..report import (
    FILTER_LABELS,
    ActiveFilters,
    FilterKey,
    VisualData,
    parse_markdown_table,
    parse_report,
    render_plain_sections,
)
from .config import (
    BOT_LABEL,
    COMPONENT_COLORS,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIME_FORMAT,
    MODE_LABELS,
    THINKING_TEXT,
    USER_LABEL,
    LogLevel,
)
from .formatting import emphasis_text, section_panel


def copy_text(widget, text: str, label: str) -> None:
    """Copy to the system clipboard, falling back to the terminal (OSC 52)."""
    try:
        pyperclip.copy(text)
        widget.app.notify(f"{label} copiado", timeout=2)
    except pyperclip.PyperclipException:
        widget.app.copy_to_clipboard(text)
        widget.app.notify(f"{label} copiado (terminal)", timeout=2)


class MessageView(Vertical):
    """One conversation entry.

    Bot replies are shown as report cards filtered by the active filters;
    an unresolved reply shows the thinking placeholder until it is
    re-rendered. Clicking copies the visible text.
    """

    def __init__(self, message: Message, filters: ActiveFilters, *args, **kwargs) -> None:
        role_class = "user-message" if message.is_user else "bot-message"
        super().__init__(*args, classes=f"chat-message {role_class}", **kwargs)
        self._message = message
        self._filters = filters

    @property
    def message(self) -> Message:
        return self._message

    def _header(self) -> Static:
        label = USER_LABEL if self._message.is_user else BOT_LABEL
        icon = ">" if self._message.is_user else "<"
        time = datetime.fromtimestamp(self._message.timestamp / 1000).strftime(MESSAGE_TIME_FORMAT)
        return Static(f"{icon} {label} [{time}]", classes="message-header", markup=False)

    def _build(self) -> list[Static]:
        parts = [self._header()]

        if self._message.is_user:
            for attachment in self._message.attachments:
                parts.append(Static(
                    f"📎 {attachment.name or attachment.mime_type}",
                    classes="message-attachment",
                    markup=False,
                ))
            if self._message.text:
                parts.append(Static(Text(self._message.text), classes="message-content"))
            return parts

        if self._message.is_thinking:
            parts.append(Static(THINKING_TEXT, classes="message-thinking", markup=False))
            return parts

        for section in parse_report(self._message.text, self._filters).sections:
            parts.append(Static(section_panel(section), classes=f"report-card -{section.variant.value}"))
        return parts

    def compose(self):
        yield from self._build()

    async def rerender(self, filters: ActiveFilters | None = None) -> None:
        """Rebuild the content after the message or the filters changed."""
        if filters is not None:
            self._filters = filters
        await self.remove_children()
        await self.mount_all(self._build())

    def plain_text(self) -> str:
        if self._message.is_user or self._message.is_thinking:
            return self._message.text
        return render_plain_sections(parse_report(self._message.text, self._filters).sections)

    def on_click(self, event: Click) -> None:
        """Copy the visible message text when clicked."""
        event.stop()
        text = self.plain_text()
        if text.strip():
            copy_text(self, text, "Mensagem")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation log."""

    BORDER_TITLE = "Consulta Técnica"
    BORDER_SUBTITLE = "Histórico"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, MessageView] = {}

    def _update_subtitle(self) -> None:
        self.border_subtitle = f"{len(self._views)} mensagens"

    async def add_message(self, message: Message, filters: ActiveFilters) -> None:
        """Append a message to the log."""
        view = MessageView(message, filters)
        self._views[message.id] = view
        await self.mount(view)
        self._update_subtitle()
        self.scroll_end(animate=False)

    async def update_message(self, message: Message) -> None:
        """Redraw a message that changed in place (resolved placeholder)."""
        view = self._views.get(message.id)
        if view is not None:
            await view.rerender()
            self.scroll_end(animate=False)

    async def apply_filters(self, filters: ActiveFilters) -> None:
        """Redraw every bot reply with new filters."""
        for view in self._views.values():
            if not view.message.is_user:
                await view.rerender(filters)

    async def clear_history(self) -> None:
        self._views.clear()
        await self.remove_children()
        self.border_subtitle = "Histórico"


class FilterBar(Horizontal):
    """One toggle button per report section type."""

    class Toggled(TextualMessage):
        """Posted when a filter button is pressed."""

        def __init__(self, key: FilterKey) -> None:
            super().__init__()
            self.key = key

    def compose(self):
        for key, label in FILTER_LABELS.items():
            yield Button(label, id=f"filter-{key.value}", classes="filter-btn -active")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("filter-"):
            event.stop()
            self.post_message(self.Toggled(FilterKey(button_id.removeprefix("filter-"))))

    def set_active(self, filters: Iterable[FilterKey]) -> None:
        """Reflect the active filters on the buttons."""
        active = set(filters)
        for key in FILTER_LABELS:
            button = self.query_one(f"#filter-{key.value}", Button)
            button.set_class(key in active, "-active")


class AttachmentBar(Horizontal):
    """Chips for the attachments waiting to be sent; click one to remove it."""

    class Removed(TextualMessage):
        """Posted when an attachment chip is pressed."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def on_mount(self) -> None:
        self.display = False

    async def set_attachments(self, attachments: Iterable[Attachment]) -> None:
        await self.remove_children()
        chips = [
            Button(f"📎 {attachment.name or attachment.mime_type} ✕", name=str(index), classes="attachment-chip")
            for index, attachment in enumerate(attachments)
        ]
        self.display = bool(chips)
        if chips:
            await self.mount_all(chips)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.name is not None:
            event.stop()
            self.post_message(self.Removed(int(event.button.name)))


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea, attach and send buttons.

    Submitted carries the raw text (possibly empty, for attachment-only
    messages). The text stays in place until the app calls ``accept()``.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class AttachRequested(TextualMessage):
        """Message sent when the attach button is pressed."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Anexar", id="attach-btn").with_tooltip("Anexar arquivo (Ctrl+O)")
        yield Button("Enviar", id="send-btn", variant="primary").with_tooltip(
            "Enviar consulta (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()
        elif event.button.id == "attach-btn":
            event.stop()
            self.post_message(self.AttachRequested())

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: terminals do not pass modifiers with Enter, so Ctrl+J submits.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        self.post_message(self.Submitted(text_area.text.strip()))

    def accept(self) -> None:
        """Record the submitted text in history and clear the input."""
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value and (not self._history or self._history[-1] != value):
            self._history.append(value)
        self._history_index = -1
        text_area.text = ""

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()

    def append_text(self, text: str) -> None:
        """Append dictated text to the input, separated by a space."""
        text_area = self.query_one("#chat-input", TextArea)
        current = text_area.text.rstrip()
        text_area.text = f"{current} {text}" if current else text
        text_area.move_cursor(text_area.document.end)


class StatusBar(Static):
    """One-line summary of model, generation mode, voice and request state."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._model = ""
        self._mode = GenerationMode.PLAIN
        self._voice_active = False
        self._loading = False

    def on_mount(self) -> None:
        self._update_display()

    def update_status(
        self,
        model: str | None = None,
        mode: GenerationMode | None = None,
        voice_active: bool | None = None,
        loading: bool | None = None,
    ) -> None:
        """Update any subset of the displayed fields."""
        if model is not None:
            self._model = model
        if mode is not None:
            self._mode = mode
        if voice_active is not None:
            self._voice_active = voice_active
        if loading is not None:
            self._loading = loading
        self._update_display()

    def _update_display(self) -> None:
        voice = "[bold green]● ativa[/]" if self._voice_active else "[dim]○ inativa[/]"
        state = "[bold yellow]processando...[/]" if self._loading else "[green]pronto[/]"
        parts = [
            f"[bold cyan]Modelo:[/] {self._model or '-'}",
            f"[bold magenta]Modo:[/] {MODE_LABELS[self._mode]}",
            f"[bold blue]Voz:[/] {voice}",
            f"[bold]Status:[/] {state}",
        ]
        self.update("  ".join(parts))


class VisualPanel(Vertical):
    """Dimensional data from the latest visual block.

    Link cells (``[label](url)``) open in the browser when selected.
    """

    BORDER_TITLE = "Especificação Técnica"
    BORDER_SUBTITLE = "Dados normativos ABNT/ISO"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._links: dict[tuple[int, int], str] = {}

    def compose(self):
        yield Static(
            "[b]Painel de Dados[/b]\n[dim]As tabelas dimensionais aparecerão aqui.[/dim]",
            id="visual-empty",
        )
        yield DataTable(id="visual-table", zebra_stripes=True, cursor_type="cell")
        yield Static("", id="visual-note")

    def on_mount(self) -> None:
        self.query_one("#visual-table", DataTable).display = False
        self.query_one("#visual-note", Static).display = False

    def show_visual(self, visual: VisualData | None) -> None:
        """Show the table of a visual block, or the empty state."""
        empty = self.query_one("#visual-empty", Static)
        table = self.query_one("#visual-table", DataTable)
        note = self.query_one("#visual-note", Static)

        table.clear(columns=True)
        self._links.clear()

        if visual is None or not visual.table:
            empty.display = True
            table.display = False
            note.display = False
            return

        empty.display = False
        data = parse_markdown_table(visual.table)
        if data is None:
            table.display = False
            note.update("[i dim]Tabela inválida[/]")
            note.display = True
            return

        for header in data.headers:
            table.add_column(header.upper())
        for row_index, row in enumerate(data.rows):
            cells = []
            for column_index, cell in enumerate(row):
                if cell.url:
                    self._links[(row_index, column_index)] = cell.url
                    cells.append(Text(cell.text, style="underline #60a5fa"))
                else:
                    cells.append(emphasis_text(cell.text))
            table.add_row(*cells)
        table.display = True

        if visual.svg:
            note.update("[dim]Croqui SVG recebido. Exporte o relatório (Ctrl+S) para salvá-lo.[/]")
            note.display = True
        else:
            note.display = False

    def on_data_table_cell_selected(self, event: DataTable.CellSelected) -> None:
        url = self._links.get((event.coordinate.row, event.coordinate.column))
        if url:
            event.stop()
            self.app.open_url(url)


class VoicePanel(Static):
    """Live transcript of the voice session. Hidden while voice is off."""

    BORDER_TITLE = "Voz"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._transcript = ""

    def on_mount(self) -> None:
        self.display = False

    def start(self) -> None:
        self._transcript = ""
        self.update("[dim]Ouvindo...[/]")
        self.border_subtitle = "ativa"
        self.display = True

    def append(self, text: str) -> None:
        """Add transcript text verbatim."""
        self._transcript += text
        self.update(Text(self._transcript))

    def take(self) -> str:
        """Return the transcript not yet taken and start a fresh one."""
        text, self._transcript = self._transcript.strip(), ""
        if self.display:
            self.update("[dim]Ouvindo...[/]")
        return text

    def stop(self) -> None:
        self.border_subtitle = "encerrada"
        self.display = False


class DebugPanel(RichLog):
    """Log panel for component messages with level filtering.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        line = Text.from_markup(
            f"[dim]{timestamp}[/] "
            f"[{level_colors.get(level, 'white')}]{LogLevel.name(level):<5}[/] "
            f"[{COMPONENT_COLORS.get(component, 'white')}]\\[{component}][/] "
        )
        # Messages may contain brackets from model output; never parse them as markup
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def route(self, level: str, component: str, message: str) -> None:
        """Debug callback target: ``callback(level, component, message)``."""
        self.log(component, message, LogLevel.from_string(level))

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
