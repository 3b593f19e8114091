"""Session Store: the chats, their histories and the active chat pointer.

Every mutating operation ends by writing the whole session back to the
key-value store. The store is read lazily, before the first read or
mutation, so a write can never clobber a persisted session that was
never loaded.
"""

import json
import logging
from typing import Optional

from .core import Chat, Message, Session, make_title, new_chat_id
from .errors import ChatNotFoundError
from .storage import SESSION_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, storage: KeyValueStore, key: str = SESSION_KEY):
        self.storage = storage
        self.key = key
        self._session = Session()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def session(self) -> Session:
        self._ensure_loaded()
        return self._session

    @property
    def chats(self) -> list[Chat]:
        return self.session.chats

    @property
    def active_chat_id(self) -> Optional[str]:
        return self.session.active_chat_id

    @property
    def active_chat(self) -> Optional[Chat]:
        active = self.session.active_chat_id
        return self._session.find(active) if active else None

    def load(self) -> Session:
        """Replace the in-memory session with the persisted one.

        Absent or malformed data yields an empty session.
        """
        raw = self.storage.get(self.key)
        session = Session()
        if raw:
            try:
                session = Session.from_dict(json.loads(raw))
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.warning("Discarding malformed persisted session: %s", e)
                session = Session()
        self._session = session
        self._loaded = True
        logger.debug("Loaded session with %d chats", len(session.chats))
        return session

    def persist(self) -> None:
        # Empty sessions are written too, so deleting the last chat sticks.
        self.storage.set(self.key, json.dumps(self._session.to_dict(), ensure_ascii=False))

    def get_chat(self, chat_id: str) -> Optional[Chat]:
        return self.session.find(chat_id)

    def create_chat(self, first_prompt: str) -> Chat:
        session = self.session
        chat = Chat(id=new_chat_id(), title=make_title(first_prompt))
        session.chats.insert(0, chat)
        session.active_chat_id = chat.id
        self.persist()
        logger.info("Created chat %s (%r)", chat.id, chat.title)
        return chat

    def append_round(self, chat_id: str, user_message: Message, assistant_message: Message) -> None:
        chat = self._require(chat_id)
        chat.history.extend([user_message, assistant_message])
        self.persist()

    def select_chat(self, chat_id: str) -> list[Message]:
        """Make a chat active and return a snapshot of its history."""
        chat = self._require(chat_id)
        self._session.active_chat_id = chat.id
        self.persist()
        return list(chat.history)

    def deactivate(self) -> None:
        self.session.active_chat_id = None
        self.persist()

    def delete_chat(self, chat_id: str) -> bool:
        """Remove a chat. Returns True if it was the active one."""
        session = self.session
        chat = session.find(chat_id)
        if chat is None:
            return False

        session.chats.remove(chat)
        was_active = session.active_chat_id == chat_id
        if was_active:
            session.active_chat_id = None
        self.persist()
        logger.info("Deleted chat %s", chat_id)
        return was_active

    # ── Private helpers ──────────────────────────────────────────────

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _require(self, chat_id: str) -> Chat:
        chat = self.session.find(chat_id)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        return chat
