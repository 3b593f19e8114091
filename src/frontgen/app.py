"""Application root: ties the session store, UI state, preview and controller together.

Views never reach for global state; they hold a FrontendGenerator and call
its actions, then read ``snapshot()``.
"""

import logging
from typing import Optional

from . import notify, share
from .client import CompletionClient
from .core import FRAMEWORKS, UiState
from .errors import ChatNotFoundError, GenerationBusyError
from .generation import GenerationController, GenerationOutcome
from .preview import PreviewProjector
from .prompts import (
    EMPTY_CHAT_CODE,
    NEW_CHAT_CODE,
    PROMPT_TEMPLATES,
    find_template,
    has_artifact,
)
from .session_store import SessionStore

logger = logging.getLogger(__name__)

SHARED_LOADED_TOAST = "Shared code loaded!"
COPIED_TOAST = "Copied to clipboard!"
SHARE_COPIED_TOAST = "Share link copied to clipboard!"
NOTHING_TO_SHARE_TOAST = "Nothing to share yet!"


class FrontendGenerator:
    def __init__(self, store: SessionStore, client: CompletionClient):
        self.store = store
        self.client = client
        self.ui = UiState()
        self.preview = PreviewProjector()
        self.controller = GenerationController(store, client, self.ui)
        self._projected: Optional[tuple[str, str]] = None

    # ── Page load ────────────────────────────────────────────────────

    def boot(self, fragment: str | None = None) -> None:
        """Start a fresh page.

        A valid ``#/share/<token>`` fragment shows the shared code and skips
        loading local history; anything else loads the persisted session.
        """
        self._reset_ui()

        token = share.parse_fragment(fragment)
        code = share.decode(token) if token else None
        if code is not None:
            self.ui.displayed_code = code
            self.ui.shared_view = True
            notify.show_toast(self.ui, SHARED_LOADED_TOAST)
            logger.info("Loaded shared code (%d chars)", len(code))
        else:
            self.store.load()
        self._sync_preview()

    # ── Actions ──────────────────────────────────────────────────────

    async def generate(self, prompt: str | None = None, framework: str | None = None) -> GenerationOutcome:
        # A rejected request must not touch the prompt or framework of the round in flight.
        if self.ui.is_loading:
            raise GenerationBusyError()
        if prompt is not None:
            self.ui.prompt = prompt
        if framework is not None:
            self.set_framework(framework)
        try:
            return await self.controller.generate(self.ui.prompt, self.ui.framework)
        finally:
            self._sync_preview()

    def new_chat(self) -> None:
        self.ui.shared_view = False
        self.store.deactivate()
        self.ui.prompt = ""
        self.ui.displayed_code = NEW_CHAT_CODE
        self._sync_preview()

    def select_chat(self, chat_id: str) -> None:
        chat = self.store.get_chat(chat_id)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        self.ui.shared_view = False
        self.store.select_chat(chat_id)
        last = chat.last_assistant_message()
        self.ui.displayed_code = last.content if last else EMPTY_CHAT_CODE
        self._sync_preview()

    def delete_chat(self, chat_id: str) -> None:
        self.ui.shared_view = False
        if self.store.delete_chat(chat_id):
            self.new_chat()

    def use_template(self, title: str) -> None:
        template = find_template(title)
        if template is None:
            raise KeyError(title)
        self.new_chat()
        self.ui.prompt = template["prompt"]

    def set_prompt(self, prompt: str) -> None:
        self.ui.prompt = prompt

    def set_framework(self, framework: str) -> None:
        if framework not in FRAMEWORKS:
            raise ValueError(f"Unknown framework: {framework}")
        self.ui.framework = framework
        self._sync_preview()

    def toggle_sidebar(self) -> bool:
        self.ui.sidebar_open = not self.ui.sidebar_open
        return self.ui.sidebar_open

    def copy_text(self) -> Optional[str]:
        """Return the code to put on the clipboard, or None if there is none yet."""
        if not has_artifact(self.ui.displayed_code):
            return None
        notify.show_toast(self.ui, COPIED_TOAST)
        return self.ui.displayed_code

    def share(self, page_url: str) -> Optional[str]:
        if not has_artifact(self.ui.displayed_code):
            notify.show_toast(self.ui, NOTHING_TO_SHARE_TOAST)
            return None
        url = share.share_url(page_url, self.ui.displayed_code)
        notify.show_toast(self.ui, SHARE_COPIED_TOAST)
        return url

    # ── Views ────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        """JSON-safe view of everything the shell renders."""
        self._sync_preview()
        ui = self.ui
        if ui.shared_view:
            chats, active_id = [], None
        else:
            chats = [{"id": c.id, "title": c.title} for c in self.store.chats]
            active_id = self.store.active_chat_id
        return {
            "chats": chats,
            "active_chat_id": active_id,
            "prompt": ui.prompt,
            "displayed_code": ui.displayed_code,
            "is_loading": ui.is_loading,
            "error": ui.error,
            "toast": {"message": ui.toast.message, "visible": ui.toast.visible},
            "framework": ui.framework,
            "sidebar_open": ui.sidebar_open,
            "shared_view": ui.shared_view,
            "has_credential": self.client.has_credential,
            "preview": {"document": self.preview.document, "revision": self.preview.revision},
        }

    @staticmethod
    def templates() -> list[dict]:
        return [dict(t) for t in PROMPT_TEMPLATES]

    # ── Private helpers ──────────────────────────────────────────────

    def _reset_ui(self) -> None:
        # A round still in flight keeps the generate action locked.
        fresh = UiState(is_loading=self.ui.is_loading)
        for name in vars(fresh):
            setattr(self.ui, name, getattr(fresh, name))

    def _sync_preview(self) -> None:
        current = (self.ui.displayed_code, self.ui.framework)
        if current != self._projected:
            self.preview.project(*current)
            self._projected = current
