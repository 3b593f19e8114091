"""Core data models for frontgen."""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from .prompts import INITIAL_CODE

TITLE_LIMIT = 30
TITLE_ELLIPSIS = "..."

HTML = "html"
REACT = "react"
VUE = "vue"
FRAMEWORKS = (HTML, REACT, VUE)

ROLES = ("system", "user", "assistant")


def is_renderable(framework: str) -> bool:
    """Return True if the framework's output can be shown in the live preview."""
    return framework == HTML


def make_title(prompt: str) -> str:
    """Derive a chat title from its first prompt."""
    if len(prompt) > TITLE_LIMIT:
        return prompt[:TITLE_LIMIT] + TITLE_ELLIPSIS
    return prompt


def new_chat_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Message:
    """A single message within a chat."""

    role: str  # "system" | "user" | "assistant"
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        role = data["role"]
        content = data["content"]
        if role not in ROLES or not isinstance(content, str):
            raise ValueError(f"Invalid message: {data!r}")
        return cls(role=role, content=content)


@dataclass
class Chat:
    """One conversation thread; its title is fixed at creation."""

    id: str
    title: str
    history: list[Message] = field(default_factory=list)

    def last_assistant_message(self) -> Optional[Message]:
        for msg in reversed(self.history):
            if msg.role == "assistant":
                return msg
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "history": [m.to_dict() for m in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Chat":
        chat_id = data["id"]
        title = data["title"]
        if not isinstance(chat_id, str) or not isinstance(title, str):
            raise ValueError(f"Invalid chat: {data!r}")
        return cls(
            id=chat_id,
            title=title,
            history=[Message.from_dict(m) for m in data.get("history", [])],
        )


@dataclass
class Session:
    """All chats (newest first) plus the active chat pointer."""

    chats: list[Chat] = field(default_factory=list)
    active_chat_id: Optional[str] = None

    def find(self, chat_id: str) -> Optional[Chat]:
        for chat in self.chats:
            if chat.id == chat_id:
                return chat
        return None

    def to_dict(self) -> dict:
        return {
            "chats": [c.to_dict() for c in self.chats],
            "active_chat_id": self.active_chat_id,
        }

    @classmethod
    def from_dict(cls, data) -> "Session":
        """Build a Session from persisted data.

        Accepts the current ``{"chats": [...], "active_chat_id": ...}`` shape
        as well as a bare list of chats. Raises ValueError, TypeError or
        KeyError on anything else.
        """
        if isinstance(data, list):
            data = {"chats": data}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid session payload: {type(data).__name__}")

        session = cls(chats=[Chat.from_dict(c) for c in data.get("chats", [])])
        active = data.get("active_chat_id")
        # Never resurrect a pointer to a chat that no longer exists.
        if active is not None and session.find(active) is not None:
            session.active_chat_id = active
        return session


@dataclass
class Toast:
    message: str = ""
    visible: bool = False


@dataclass
class UiState:
    """Transient per-page state. Never persisted."""

    prompt: str = ""
    displayed_code: str = INITIAL_CODE
    is_loading: bool = False
    error: Optional[str] = None
    toast: Toast = field(default_factory=Toast)
    framework: str = HTML
    sidebar_open: bool = True
    shared_view: bool = False
