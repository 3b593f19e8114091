"""Generation Controller: one prompt in, one cleaned artifact out.

A round is recorded in the chat only when it succeeds. Any failure leaves
the history untouched and puts an error placeholder in the code view.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from . import notify
from .client import CompletionClient
from .core import FRAMEWORKS, Message, UiState
from .errors import (
    ConfigurationError,
    EmptyResponseError,
    FrontgenError,
    GenerationBusyError,
    ValidationError,
)
from .prompts import SYSTEM_PROMPTS, error_code, generating_code
from .session_store import SessionStore

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "API Key is not configured. Set FRONTGEN_API_KEY (or OPENROUTER_API_KEY) before generating."
)
EMPTY_PROMPT_MESSAGE = "Please enter a prompt!"

# Models sometimes wrap output in markdown fences despite being told not to.
_FENCE_RE = re.compile(r"```(?:jsx|javascript|js|html|css|vue|)\s*|```")


def clean_completion(text: str) -> str:
    """Strip stray code fences and surrounding whitespace from a completion."""
    return _FENCE_RE.sub("", text).strip()


def user_facing_error(message: str) -> str:
    """Drop any echoed response body from an error message."""
    return message.split("Body:")[0].strip()


def build_messages(framework: str, history: list[Message], prompt: str) -> list[Message]:
    return [
        Message(role="system", content=SYSTEM_PROMPTS[framework]),
        *history,
        Message(role="user", content=prompt),
    ]


@dataclass
class GenerationOutcome:
    ok: bool
    code: Optional[str] = None
    error: Optional[FrontgenError] = None
    chat_id: Optional[str] = None


class GenerationController:
    def __init__(self, store: SessionStore, client: CompletionClient, ui: UiState):
        self.store = store
        self.client = client
        self.ui = ui

    async def generate(self, prompt: str, framework: str) -> GenerationOutcome:
        if framework not in FRAMEWORKS:
            raise ValueError(f"Unknown framework: {framework}")

        if not self.client.has_credential:
            self.ui.error = MISSING_KEY_MESSAGE
            return GenerationOutcome(ok=False, error=ConfigurationError(MISSING_KEY_MESSAGE))
        if not prompt or not prompt.strip():
            notify.flash_error(self.ui, EMPTY_PROMPT_MESSAGE)
            return GenerationOutcome(ok=False, error=ValidationError(EMPTY_PROMPT_MESSAGE))
        if self.ui.is_loading:
            raise GenerationBusyError()

        self.ui.is_loading = True
        self.ui.error = None
        self.ui.displayed_code = generating_code(framework)
        try:
            active = None if self.ui.shared_view else self.store.active_chat
            if active is None:
                chat = self.store.create_chat(prompt)
                history = []
            else:
                chat = active
                history = list(active.history)
            self.ui.shared_view = False

            messages = build_messages(framework, history, prompt)
            try:
                code = clean_completion(await self.client.complete(messages))
                if not code:
                    raise EmptyResponseError()
                # Raises ChatNotFoundError if the chat was deleted mid-round.
                self.store.append_round(
                    chat.id,
                    Message(role="user", content=prompt),
                    Message(role="assistant", content=code),
                )
            except FrontgenError as e:
                logger.warning("Generation failed for chat %s: %s", chat.id, e.message)
                self.ui.error = user_facing_error(e.message)
                self.ui.displayed_code = error_code(e.message)
                return GenerationOutcome(ok=False, error=e, chat_id=chat.id)

            self.ui.displayed_code = code
            self.ui.prompt = ""
            logger.info("Generated %d chars of %s for chat %s", len(code), framework, chat.id)
            return GenerationOutcome(ok=True, code=code, chat_id=chat.id)
        finally:
            self.ui.is_loading = False
