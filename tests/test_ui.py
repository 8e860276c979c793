"""Headless tests for the Textual TUI."""
import pytest
from textual.widgets import TextArea

from engenheiro.audio import LiveEvent, StreamingAudioClient
from engenheiro.llm import GenerationMode
from engenheiro.report import FilterKey
from engenheiro.ui import ChatHistoryWidget, ChatInputBar, EngenheiroApp, FilterBar

from conftest import FakeGenerationClient, FakeLiveTransport, FakeMicrophone, FakeSpeaker


def make_app(client, tmp_path, transport=None):
    def voice_client_factory(live_transport, **callbacks):
        return StreamingAudioClient(live_transport, FakeMicrophone(), FakeSpeaker(), **callbacks)

    return EngenheiroApp(
        client=client,
        transport_factory=(lambda: transport) if transport is not None else None,
        voice_client_factory=voice_client_factory,
        export_dir=tmp_path,
    )


class TestEngenheiroApp:
    """Tests for the main application flow."""

    @pytest.mark.asyncio
    async def test_welcome_message_on_mount(self, tmp_path):
        app = make_app(FakeGenerationClient(), tmp_path)

        async with app.run_test() as pilot:
            await pilot.pause()
            chat = app.query_one("#chat-history", ChatHistoryWidget)
            assert len(chat.children) == 1

    @pytest.mark.asyncio
    async def test_submit_resolves_reply(self, tmp_path, sample_report_text):
        client = FakeGenerationClient(reply=sample_report_text)
        app = make_app(client, tmp_path)

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("Ajuste H7?")
            )
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            messages = app.session.store.messages
            assert len(messages) == 3
            assert messages[-1].text == sample_report_text
            assert not messages[-1].is_thinking
            assert not app.session.is_loading
            assert app.session.visual is not None
            assert client.calls[0][0] == "Ajuste H7?"

    @pytest.mark.asyncio
    async def test_empty_submit_is_rejected(self, tmp_path):
        client = FakeGenerationClient()
        app = make_app(client, tmp_path)

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(ChatInputBar.Submitted(""))
            await pilot.pause()

            assert len(app.session.store) == 1
            assert client.calls == []

    @pytest.mark.asyncio
    async def test_filter_toggle(self, tmp_path):
        app = make_app(FakeGenerationClient(), tmp_path)

        async with app.run_test() as pilot:
            app.query_one("#filter-bar", FilterBar).post_message(FilterBar.Toggled(FilterKey.RISCOS))
            await pilot.pause()

            assert FilterKey.RISCOS not in app.session.filters
            assert len(app.session.filters) == 4

    @pytest.mark.asyncio
    async def test_last_filter_stays_active(self, tmp_path):
        app = make_app(FakeGenerationClient(), tmp_path)

        async with app.run_test() as pilot:
            bar = app.query_one("#filter-bar", FilterBar)
            for key in list(FilterKey):
                bar.post_message(FilterBar.Toggled(key))
                await pilot.pause()

            assert list(app.session.filters) == [FilterKey.CONCLUSAO]

    @pytest.mark.asyncio
    async def test_mode_toggle_updates_session(self, tmp_path):
        app = make_app(FakeGenerationClient(), tmp_path)

        async with app.run_test() as pilot:
            app.action_toggle_thinking()
            await pilot.pause()
            assert app.session.mode is GenerationMode.THINKING

            app.action_toggle_search()
            await pilot.pause()
            assert app.session.mode is GenerationMode.SEARCH

            app.action_toggle_search()
            await pilot.pause()
            assert app.session.mode is GenerationMode.PLAIN

    @pytest.mark.asyncio
    async def test_export_writes_report(self, tmp_path):
        app = make_app(FakeGenerationClient(), tmp_path)

        async with app.run_test() as pilot:
            app.action_export_report()
            await pilot.pause()

        files = list(tmp_path.glob("relatorio-*.md"))
        assert len(files) == 1
        content = files[0].read_text(encoding="utf-8")
        assert content.startswith("# Relatório Técnico")
        assert "## Conclusão Profissional" in content

    @pytest.mark.asyncio
    async def test_voice_toggle(self, tmp_path):
        transport = FakeLiveTransport()
        app = make_app(FakeGenerationClient(), tmp_path, transport=transport)

        async with app.run_test() as pilot:
            await app.action_toggle_voice()
            assert app.voice_active
            assert len(transport.sessions) == 1

            await app.action_toggle_voice()
            await pilot.pause()
            assert not app.voice_active
            assert transport.sessions[0].close_count == 1

    @pytest.mark.asyncio
    async def test_transcript_is_appended_to_input(self, tmp_path):
        transport = FakeLiveTransport()
        app = make_app(FakeGenerationClient(), tmp_path, transport=transport)

        async with app.run_test() as pilot:
            await app.action_toggle_voice()
            transport.sessions[0].push(LiveEvent(transcript="Qual o ajuste "))
            transport.sessions[0].push(LiveEvent(transcript="para o furo?"))
            await pilot.pause()
            await pilot.pause()
            text_area = app.query_one("#chat-input", TextArea)
            text_area.text = "Eixo 20 mm."

            app.action_insert_transcript()
            await pilot.pause()

            assert text_area.text == "Eixo 20 mm. Qual o ajuste para o furo?"

            app.action_insert_transcript()
            await pilot.pause()
            assert text_area.text == "Eixo 20 mm. Qual o ajuste para o furo?"

            await app.action_toggle_voice()

    @pytest.mark.asyncio
    async def test_voice_failure_shows_alert(self, tmp_path):
        app = make_app(FakeGenerationClient(), tmp_path, transport=FakeLiveTransport(fail=True))

        async with app.run_test() as pilot:
            await app.action_toggle_voice()
            await pilot.pause()

            assert not app.voice_active
            assert type(app.screen).__name__ == "AlertScreen"
