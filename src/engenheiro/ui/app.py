"""Main Textual TUI application.

Orchestrates the UI components: chat turns through ChatSession, the report
filters, attachments, report export and the optional voice session.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..audio import AudioError, LiveTransport, StreamingAudioClient, create_voice_client
from ..conversation import ChatSession, InputValidationError, Message, load_attachment
from ..llm import GenerationClient, GenerationMode
from ..report import parse_report, render_markdown_report, render_plain_sections, report_reference
from .config import EXPORT_FILENAME_TEMPLATE, MODE_LABELS, LogLevel
from .screens import AlertScreen, AttachFileScreen, ConfirmationScreen
from .styles import APP_CSS
from .themes import INDUSTRIAL_SLATE
from .widgets import (
    AttachmentBar,
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    FilterBar,
    StatusBar,
    VisualPanel,
    VoicePanel,
    copy_text,
)

TransportFactory = Callable[[], LiveTransport]
VoiceClientFactory = Callable[..., StreamingAudioClient]


class EngenheiroApp(App):
    """Textual TUI for technical consultations."""

    CSS = APP_CSS
    TITLE = "Engenheiro.AI"
    SUB_TITLE = "Especialista Industrial"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Sair"),
        Binding("ctrl+o", "attach_file", "Anexar"),
        Binding("ctrl+t", "toggle_thinking", "Raciocínio"),
        Binding("ctrl+g", "toggle_search", "Pesquisa"),
        Binding("f2", "toggle_voice", "Voz"),
        Binding("f3", "insert_transcript", "Ditado"),
        Binding("ctrl+s", "export_report", "Exportar"),
        Binding("ctrl+r", "copy_last_report", "Copiar"),
        Binding("ctrl+k", "clear_chat", "Limpar"),
        Binding("ctrl+b", "toggle_maximize_chat", "Max Chat"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        client: GenerationClient,
        transport_factory: TransportFactory | None = None,
        voice_client_factory: VoiceClientFactory = create_voice_client,
        log_level: str | None = None,
        export_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._session = ChatSession(client)
        self._transport_factory = transport_factory
        self._voice_client_factory = voice_client_factory
        self._voice: StreamingAudioClient | None = None
        self._log_level = log_level
        self._export_dir = export_dir or Path.cwd()

    @property
    def session(self) -> ChatSession:
        return self._session

    @property
    def voice_active(self) -> bool:
        return self._voice is not None and self._voice.is_active

    def _model_name(self) -> str:
        return getattr(self._client, "model", "unknown")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Vertical(id="main-panel"):
            yield FilterBar(id="filter-bar")
            yield ChatHistoryWidget(id="chat-history")

        with Vertical(id="right-panel"):
            yield VisualPanel(id="visual-panel")
            yield VoicePanel(id="voice-panel")
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield StatusBar(id="status")
            yield AttachmentBar(id="attachment-bar")
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    async def on_mount(self) -> None:
        self.register_theme(INDUSTRIAL_SLATE)
        self.theme = "industrial-slate"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._session.set_debug_callback(log_panel.route)
        if hasattr(self._client, "set_debug_callback"):
            self._client.set_debug_callback(log_panel.route)

        self._refresh_status()
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        for message in self._session.store:
            await chat.add_message(message, self._session.filters)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def _log(self, level: str, message: str) -> None:
        self.query_one("#debug-panel", DebugPanel).route(level, "TUI", message)

    def _refresh_status(self) -> None:
        self.query_one("#status", StatusBar).update_status(
            model=self._model_name(),
            mode=self._session.mode,
            voice_active=self.voice_active,
            loading=self._session.is_loading,
        )

    def _alert(self, title: str, message: str) -> None:
        self.push_screen(AlertScreen(title, message))

    # Chat turns

    async def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Validate and record a submission, then request the reply."""
        try:
            user_message, placeholder = self._session.begin(event.value)
        except InputValidationError as e:
            self.notify(e.message, severity="warning", timeout=3)
            return

        self.query_one("#chat-input-bar", ChatInputBar).accept()
        await self.query_one("#attachment-bar", AttachmentBar).set_attachments([])

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        await chat.add_message(user_message, self._session.filters)
        await chat.add_message(placeholder, self._session.filters)
        self._refresh_status()
        self._log("info", f"Submitted ({len(user_message.text)} chars, {len(user_message.attachments)} attachment(s))")

        self._generate(user_message, placeholder)

    @work(exclusive=True)
    async def _generate(self, user_message: Message, placeholder: Message) -> None:
        """Wait for the reply in a background worker and update the placeholder."""
        reply = await self._session.complete(user_message, placeholder)

        await self.query_one("#chat-history", ChatHistoryWidget).update_message(reply)
        self.query_one("#visual-panel", VisualPanel).show_visual(self._session.visual)
        self._refresh_status()

    # Filters and attachments

    async def on_filter_bar_toggled(self, event: FilterBar.Toggled) -> None:
        filters = self._session.filters
        if len(filters) == 1 and event.key in filters:
            self.notify("Pelo menos uma seção deve permanecer visível", timeout=2)
            return
        filters.toggle(event.key)
        self.query_one("#filter-bar", FilterBar).set_active(filters)
        await self.query_one("#chat-history", ChatHistoryWidget).apply_filters(filters)

    async def on_attachment_bar_removed(self, event: AttachmentBar.Removed) -> None:
        store = self._session.store
        if 0 <= event.index < len(store.pending_attachments):
            store.remove_attachment(event.index)
        await self.query_one("#attachment-bar", AttachmentBar).set_attachments(store.pending_attachments)

    def on_chat_input_bar_attach_requested(self, event: ChatInputBar.AttachRequested) -> None:
        self.action_attach_file()

    def action_attach_file(self) -> None:
        """Ask for a file path and add it to the pending attachments."""
        async def _attach(path: str | None) -> None:
            if not path:
                return
            try:
                attachment = load_attachment(path)
            except InputValidationError as e:
                self._alert("Anexo recusado", e.message)
                return
            store = self._session.store
            store.add_attachment(attachment)
            await self.query_one("#attachment-bar", AttachmentBar).set_attachments(store.pending_attachments)
            self._log("info", f"Attached {attachment.name} ({attachment.mime_type})")

        self.push_screen(AttachFileScreen(), _attach)

    # Generation mode

    def _toggle_mode(self, mode: GenerationMode) -> None:
        current = self._session.toggle_mode(mode)
        self._refresh_status()
        state = "ativado" if current is mode else "desativado"
        self.notify(f"{MODE_LABELS[mode]} {state}", timeout=2)

    def action_toggle_thinking(self) -> None:
        self._toggle_mode(GenerationMode.THINKING)

    def action_toggle_search(self) -> None:
        self._toggle_mode(GenerationMode.SEARCH)

    # Voice

    def _on_transcript(self, text: str) -> None:
        self.query_one("#voice-panel", VoicePanel).append(text)

    def _on_voice_closed(self, error: Exception | None) -> None:
        self.query_one("#voice-panel", VoicePanel).stop()
        self._refresh_status()
        if error is not None:
            self._alert("Sessão de voz encerrada", str(error))

    async def action_toggle_voice(self) -> None:
        """Start the voice session, or stop it if it is running."""
        if self.voice_active:
            await self._voice.disconnect()
            return

        if self._transport_factory is None:
            self.notify("Voz não configurada", severity="warning", timeout=3)
            return

        try:
            transport = self._transport_factory()
            self._voice = self._voice_client_factory(
                transport,
                on_transcript=self._on_transcript,
                on_close=self._on_voice_closed,
            )
            self._voice.set_debug_callback(self.query_one("#debug-panel", DebugPanel).route)
            await self._voice.connect()
        except AudioError as e:
            self._log("error", f"Voice connect failed: {e.message}")
            self._alert("Erro de áudio", e.message)
            self._refresh_status()
            return

        self.query_one("#voice-panel", VoicePanel).start()
        self._refresh_status()

    def action_insert_transcript(self) -> None:
        """Move the voice transcript into the chat input."""
        text = self.query_one("#voice-panel", VoicePanel).take()
        if not text:
            self.notify("Nenhuma transcrição de voz", severity="warning", timeout=2)
            return
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.append_text(text)
        input_bar.focus_input()

    # Report actions

    def _last_report(self):
        message = self._session.store.last_bot_message()
        if message is None:
            return None, None
        return message, parse_report(message.text, self._session.filters)

    def action_export_report(self) -> None:
        """Write the latest reply as a markdown report file."""
        message, report = self._last_report()
        if message is None:
            self.notify("Nenhum relatório para exportar", severity="warning")
            return

        content = render_markdown_report(message.id, report.sections, visual=self._session.visual)
        path = self._export_dir / EXPORT_FILENAME_TEMPLATE.format(reference=report_reference(message.id))
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            self._log("error", f"Export failed: {e}")
            self.notify(f"Falha ao exportar: {e.strerror or e}", severity="error", timeout=5)
            return
        self.notify(f"Relatório salvo em {path.name}", timeout=3)

    def action_copy_last_report(self) -> None:
        """Copy the visible sections of the latest reply."""
        message, report = self._last_report()
        if message is None:
            self.notify("Nenhum relatório para copiar", severity="warning")
            return
        copy_text(self, render_plain_sections(report.sections), "Relatório")

    def action_clear_chat(self) -> None:
        """Start a new conversation after confirmation."""
        async def _clear(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self._session.clear()
            chat = self.query_one("#chat-history", ChatHistoryWidget)
            await chat.clear_history()
            for message in self._session.store:
                await chat.add_message(message, self._session.filters)
            await self.query_one("#attachment-bar", AttachmentBar).set_attachments([])
            self.query_one("#visual-panel", VisualPanel).show_visual(None)
            self.notify("Conversa reiniciada", timeout=2)

        if self._session.is_loading:
            self.notify("Aguarde a resposta em andamento.", severity="warning")
            return
        self.push_screen(ConfirmationScreen("Apagar a conversa atual?"), _clear)

    # Layout

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log {'visível' if is_visible else 'oculto'}", timeout=2)

    def action_toggle_maximize_chat(self) -> None:
        main = self.query_one("#main-panel")
        right = self.query_one("#right-panel")
        if main.has_class("-maximized"):
            main.remove_class("-maximized")
            right.display = True
        else:
            main.add_class("-maximized")
            right.display = False

    async def on_unmount(self) -> None:
        """Stop the voice session when the app exits."""
        if self._voice is not None:
            await self._voice.disconnect()


async def run_textual_tui(
    client: GenerationClient,
    transport_factory: TransportFactory | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        client: Generation client for chat turns
        transport_factory: Creates the live transport when voice is turned on
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = EngenheiroApp(
        client=client,
        transport_factory=transport_factory,
        log_level=log_level,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        if app._voice is not None:
            await app._voice.disconnect()
