"""Tests for the Generation Controller."""

import asyncio

import httpx
import pytest

from frontgen import notify
from frontgen.client import CompletionClient
from frontgen.config import Config
from frontgen.core import Message, UiState
from frontgen.errors import (
    ChatNotFoundError,
    ConfigurationError,
    EmptyResponseError,
    GenerationBusyError,
    TransportError,
    ValidationError,
)
from frontgen.generation import GenerationController, clean_completion, user_facing_error
from frontgen.prompts import SYSTEM_PROMPTS


@pytest.fixture
def ui():
    return UiState()


@pytest.fixture
def controller(store, client, ui):
    return GenerationController(store, client, ui)


class TestCleanCompletion:
    def test_strips_language_fences(self):
        assert clean_completion("```html\n<html></html>\n```") == "<html></html>"

    def test_strips_bare_fences_and_whitespace(self):
        assert clean_completion("\n```\nfunction App() {}\n```  \n") == "function App() {}"

    def test_leaves_clean_output_alone(self):
        code = "<template>\n  <div/>\n</template>"
        assert clean_completion(code) == code


def test_user_facing_error_elides_body():
    assert user_facing_error("API request failed with status: 500. Body: rate limited") == (
        "API request failed with status: 500."
    )


@pytest.mark.asyncio
async def test_login_form_scenario(controller, store, ui, fake_api):
    fake_api.reply("```html\n<html>...</html>\n```\n")

    outcome = await controller.generate("Build a login form", "html")

    assert outcome.ok
    chat = store.active_chat
    assert chat.title == "Build a login form"
    assert chat.history == [
        Message("user", "Build a login form"),
        Message("assistant", "<html>...</html>"),
    ]
    assert ui.displayed_code == "<html>...</html>"
    assert ui.prompt == ""
    assert ui.is_loading is False


@pytest.mark.asyncio
async def test_outbound_messages_replay_history(controller, fake_api):
    fake_api.reply("<p>v1</p>")
    fake_api.reply("<p>v2</p>")

    await controller.generate("make a card", "html")
    await controller.generate("make it blue", "react")

    second = fake_api.bodies()[1]["messages"]
    assert second == [
        {"role": "system", "content": SYSTEM_PROMPTS["react"]},
        {"role": "user", "content": "make a card"},
        {"role": "assistant", "content": "<p>v1</p>"},
        {"role": "user", "content": "make it blue"},
    ]


@pytest.mark.asyncio
async def test_n_rounds_give_2n_messages(controller, store, fake_api):
    for n in range(4):
        fake_api.reply(f"<p>{n}</p>")
        await controller.generate(f"round {n}", "html")

    assert len(store.chats) == 1
    history = store.active_chat.history
    assert len(history) == 8
    assert [m.role for m in history] == ["user", "assistant"] * 4


@pytest.mark.asyncio
async def test_http_500_scenario(controller, store, ui, fake_api):
    fake_api.reply("<p>ok</p>")
    await controller.generate("first", "html")
    fake_api.fail(500, "rate limited")

    outcome = await controller.generate("second", "html")

    assert not outcome.ok
    assert isinstance(outcome.error, TransportError)
    assert len(store.active_chat.history) == 2
    assert ui.displayed_code.startswith("// Error: API request failed with status: 500")
    assert ui.error == "API request failed with status: 500."
    assert "rate limited" not in ui.error
    assert ui.is_loading is False


@pytest.mark.asyncio
async def test_failed_first_round_keeps_empty_chat(controller, store, fake_api):
    fake_api.reply("```\n```")

    outcome = await controller.generate("anything", "html")

    assert isinstance(outcome.error, EmptyResponseError)
    assert store.active_chat.history == []


@pytest.mark.asyncio
async def test_missing_credential_fails_fast(store, http_client, ui, fake_api):
    controller = GenerationController(store, CompletionClient(Config(), http_client), ui)

    outcome = await controller.generate("Build a login form", "html")

    assert isinstance(outcome.error, ConfigurationError)
    assert "API Key is not configured" in ui.error
    assert fake_api.requests == []
    assert store.chats == []


@pytest.mark.asyncio
async def test_empty_prompt_error_self_clears(controller, ui, fake_api, monkeypatch):
    monkeypatch.setattr(notify, "ERROR_CLEAR_DELAY", 0.01)

    outcome = await controller.generate("   ", "html")

    assert isinstance(outcome.error, ValidationError)
    assert ui.error == "Please enter a prompt!"
    assert fake_api.requests == []
    await asyncio.sleep(0.05)
    assert ui.error is None


@pytest.mark.asyncio
async def test_rejects_reentrant_generation(controller, ui):
    ui.is_loading = True
    with pytest.raises(GenerationBusyError):
        await controller.generate("again", "html")


@pytest.mark.asyncio
async def test_loading_state_during_call(store, config, ui):
    seen = {}

    def handler(request):
        seen["loading"] = ui.is_loading
        seen["code"] = ui.displayed_code
        return httpx.Response(200, json={"choices": [{"message": {"content": "<p/>"}}]})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    controller = GenerationController(store, CompletionClient(config, http_client), ui)
    await controller.generate("x", "vue")

    assert seen == {"loading": True, "code": "// Generating VUE code, please wait..."}
    assert ui.is_loading is False


@pytest.mark.asyncio
async def test_unexpected_exception_still_clears_loading(controller, ui, fake_api):
    fake_api.raw(RuntimeError("boom"))
    with pytest.raises(RuntimeError):
        await controller.generate("x", "html")
    assert ui.is_loading is False


@pytest.mark.asyncio
async def test_chat_deleted_mid_round_is_reported_as_failure(store, config, ui):
    def handler(request):
        store.delete_chat(store.active_chat_id)
        return httpx.Response(200, json={"choices": [{"message": {"content": "<p>late</p>"}}]})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    controller = GenerationController(store, CompletionClient(config, http_client), ui)

    outcome = await controller.generate("x", "html")

    assert not outcome.ok
    assert isinstance(outcome.error, ChatNotFoundError)
    assert ui.error.startswith("Chat not found")
    assert ui.displayed_code.startswith("// Error: Chat not found")
    assert ui.is_loading is False
    assert store.chats == []
