"""Unit tests for the conversation module."""
import pytest

from engenheiro.conversation import (
    ChatSession,
    ConversationStore,
    EmptySubmissionError,
    GenerationMode,
    InputValidationError,
    Sender,
    SubmissionInProgressError,
    UnsupportedAttachmentError,
    attachment_from_bytes,
    is_supported_mime_type,
    load_attachment,
    toggle_mode,
)
from engenheiro.report import WELCOME_REPORT, FilterKey, split_sections

from conftest import FakeGenerationClient


def visual_reply(table_value: str) -> str:
    return (
        "[[[VISUAL_PANEL_START]]]\n"
        "| Característica | Valor Nominal |\n|---|---|\n"
        f"| Furo | {table_value} |\n"
        "[[[VISUAL_PANEL_END]]]"
        "[[[TEXT_ANALYSIS_START]]]## 5. Conclusão Profissional\nOk[[[TEXT_ANALYSIS_END]]]"
    )


class TestAttachments:
    """Tests for attachment validation and loading."""

    @pytest.mark.parametrize("mime_type", ["image/png", "image/jpeg", "application/pdf", "text/plain"])
    def test_supported_types(self, mime_type):
        assert is_supported_mime_type(mime_type)

    @pytest.mark.parametrize("mime_type", ["application/zip", "video/mp4", "text/html", "", None])
    def test_unsupported_types(self, mime_type):
        assert not is_supported_mime_type(mime_type)

    def test_from_bytes_encodes_base64(self):
        attachment = attachment_from_bytes(b"WPS-001", "text/plain", name="wps.txt")

        assert attachment.data == "V1BTLTAwMQ=="
        assert attachment.to_bytes() == b"WPS-001"
        assert attachment.size == 7

    def test_from_bytes_rejects_type(self):
        with pytest.raises(UnsupportedAttachmentError, match="Formato não suportado"):
            attachment_from_bytes(b"PK", "application/zip")

    def test_load_attachment(self, tmp_path):
        path = tmp_path / "desenho.pdf"
        path.write_bytes(b"%PDF-1.4")

        attachment = load_attachment(path)

        assert attachment.mime_type == "application/pdf"
        assert attachment.name == "desenho.pdf"
        assert attachment.to_bytes() == b"%PDF-1.4"

    def test_load_unsupported_file(self, tmp_path):
        path = tmp_path / "pecas.zip"
        path.write_bytes(b"PK")

        with pytest.raises(UnsupportedAttachmentError) as exc_info:
            load_attachment(path)
        assert exc_info.value.mime_type == "application/zip"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(InputValidationError):
            load_attachment(tmp_path / "inexistente.png")


class TestToggleMode:
    """Tests for generation mode switching."""

    def test_enable(self):
        assert toggle_mode(GenerationMode.PLAIN, GenerationMode.THINKING) is GenerationMode.THINKING

    def test_same_mode_turns_off(self):
        assert toggle_mode(GenerationMode.SEARCH, GenerationMode.SEARCH) is GenerationMode.PLAIN

    def test_modes_are_exclusive(self):
        assert toggle_mode(GenerationMode.THINKING, GenerationMode.SEARCH) is GenerationMode.SEARCH


class TestConversationStore:
    """Tests for the in-memory message log."""

    def test_seeded_with_welcome(self):
        store = ConversationStore()

        assert len(store) == 1
        assert store.messages[0].sender is Sender.BOT
        assert store.messages[0].text == WELCOME_REPORT
        assert len(split_sections(store.messages[0].text)) == 5

    def test_empty_log(self):
        assert len(ConversationStore(welcome_text=None)) == 0

    def test_placeholder_resolved_in_place(self):
        store = ConversationStore(welcome_text=None)
        placeholder = store.add_thinking_placeholder()

        resolved = store.resolve(placeholder.id, "## 5. Conclusão Profissional\nOk")

        assert resolved is placeholder
        assert not placeholder.is_thinking
        assert store.get(placeholder.id).text.endswith("Ok")

    def test_resolve_unknown_id(self):
        with pytest.raises(KeyError):
            ConversationStore().resolve("missing", "x")

    def test_pending_attachments(self):
        store = ConversationStore()
        first = attachment_from_bytes(b"a", "text/plain", name="a.txt")
        second = attachment_from_bytes(b"b", "image/png", name="b.png")
        store.add_attachment(first)
        store.add_attachment(second)

        assert store.remove_attachment(0) == first
        assert store.take_attachments() == [second]
        assert store.pending_attachments == ()

    def test_last_bot_message_skips_placeholder(self):
        store = ConversationStore()
        welcome = store.messages[0]
        store.add_user_message("Pergunta")
        store.add_thinking_placeholder()

        assert store.last_bot_message() is welcome

    def test_clear_reseeds(self):
        store = ConversationStore()
        store.add_user_message("Pergunta")
        store.add_attachment(attachment_from_bytes(b"a", "text/plain"))

        store.clear()

        assert len(store) == 1
        assert store.messages[0].text == WELCOME_REPORT
        assert store.pending_attachments == ()


class TestChatSession:
    """Tests for the chat turn lifecycle."""

    @pytest.mark.asyncio
    async def test_successful_turn(self, fake_client):
        session = ChatSession(fake_client)

        reply = await session.send("Qual o ajuste para rolamento?")

        assert not reply.is_thinking
        assert reply.text == fake_client.reply
        assert not session.is_loading
        assert [m.sender for m in session.store] == [Sender.BOT, Sender.USER, Sender.BOT]
        assert fake_client.calls == [("Qual o ajuste para rolamento?", [], GenerationMode.PLAIN)]

    @pytest.mark.asyncio
    async def test_failed_turn_resolves_placeholder(self, failing_client):
        """Test that a failing request leaves an error report, not a stuck placeholder."""
        session = ChatSession(failing_client)

        reply = await session.send("Consulta")

        assert reply.is_thinking is False
        assert reply.text.strip()
        assert "Quota exceeded" in reply.text
        assert not session.is_loading
        assert len(split_sections(reply.text)) == 5

    @pytest.mark.asyncio
    async def test_unexpected_client_error_resolves_placeholder(self):
        """Test that an error outside GenerationError still resolves the placeholder."""
        session = ChatSession(FakeGenerationClient(error=RuntimeError("socket closed")))

        user_message, placeholder = session.begin("Consulta")
        reply = await session.complete(user_message, placeholder)

        assert reply.id == placeholder.id
        assert reply.is_thinking is False
        assert "socket closed" in reply.text
        assert not session.is_loading
        assert len(split_sections(reply.text)) == 5

    def test_empty_submission_rejected(self, fake_client):
        session = ChatSession(fake_client)

        with pytest.raises(EmptySubmissionError):
            session.begin("   ")
        assert len(session.store) == 1
        assert not session.is_loading

    @pytest.mark.asyncio
    async def test_attachment_only_submission(self, fake_client):
        session = ChatSession(fake_client)
        attachment = attachment_from_bytes(b"img", "image/png", name="peca.png")
        session.store.add_attachment(attachment)

        await session.send("")

        assert fake_client.calls[0][1] == [attachment]
        assert session.store.pending_attachments == ()
        assert session.store.messages[1].attachments == [attachment]

    def test_second_submission_while_loading(self, fake_client):
        session = ChatSession(fake_client)
        session.begin("Primeira")

        with pytest.raises(SubmissionInProgressError):
            session.begin("Segunda")
        assert session.is_loading

    @pytest.mark.asyncio
    async def test_placeholder_shown_until_reply(self, fake_client):
        session = ChatSession(fake_client)

        user_message, placeholder = session.begin("Consulta")

        assert placeholder.is_thinking
        assert session.is_loading
        assert user_message.text == "Consulta"

        await session.complete(user_message, placeholder)
        assert not placeholder.is_thinking

    @pytest.mark.asyncio
    async def test_mode_is_passed_to_client(self, fake_client):
        session = ChatSession(fake_client)
        session.toggle_mode(GenerationMode.SEARCH)

        await session.send("Norma atual de solda?")

        assert fake_client.calls[0][2] is GenerationMode.SEARCH
        assert session.toggle_mode(GenerationMode.SEARCH) is GenerationMode.PLAIN

    @pytest.mark.asyncio
    async def test_visual_data_is_sticky(self):
        """Test that visual data survives replies without a visual block."""
        client = FakeGenerationClient(reply=visual_reply("20 mm"))
        session = ChatSession(client)

        await session.send("Furo")
        assert "20 mm" in session.visual.table

        client.reply = "## 5. Conclusão Profissional\nSem tabela"
        await session.send("Outra")
        assert "20 mm" in session.visual.table

        client.reply = visual_reply("30 mm")
        await session.send("Novo furo")
        assert "30 mm" in session.visual.table

    @pytest.mark.asyncio
    async def test_clear_resets_visual(self):
        session = ChatSession(FakeGenerationClient(reply=visual_reply("20 mm")))
        await session.send("Furo")

        session.clear()

        assert session.visual is None
        assert len(session.store) == 1

    def test_filters_start_all_active(self, fake_client):
        assert set(ChatSession(fake_client).filters) == set(FilterKey)

    def test_debug_callback(self, fake_client):
        events = []
        session = ChatSession(fake_client)
        session.set_debug_callback(lambda level, component, message: events.append((level, component)))

        session.toggle_mode(GenerationMode.THINKING)

        assert events == [("info", "Chat")]
