"""
Mirror of match state in the managed chat backend.

Core services never call the chat backend directly. They return
``MatchCreated`` / ``MatchDeleted`` events, and the routes hand those to
``publish_events`` as a background task, which runs after the database
transaction has committed. The match row is the source of truth; the
conversation is a projection of it, so a failed delivery is logged and
left for the next sync rather than surfaced to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Union

from loguru import logger

from zawaj.core.config import CHAT_SYNC_BACKEND
from zawaj.services.supabase_admin import supabase_admin


@dataclass(frozen=True)
class MatchCreated:
    match_id: str
    user_a: str
    user_b: str
    guardian_chat: bool = False


@dataclass(frozen=True)
class MatchDeleted:
    match_id: str


MatchEvent = Union[MatchCreated, MatchDeleted]


class ChatTransport(Protocol):
    def on_match_created(self, event: MatchCreated) -> None: ...

    def on_match_deleted(self, event: MatchDeleted) -> None: ...


class SupabaseChatTransport:
    """Conversations keyed by match id; both calls are idempotent."""

    def on_match_created(self, event: MatchCreated) -> None:
        client = supabase_admin()
        client.table("conversations").upsert(
            {
                "id": event.match_id,
                "participant_ids": [event.user_a, event.user_b],
                "is_guardian_chat": event.guardian_chat,
            },
            on_conflict="id",
            ignore_duplicates=True,
        ).execute()
        logger.info(f"[chat_sync] conversation {event.match_id} ensured")

    def on_match_deleted(self, event: MatchDeleted) -> None:
        client = supabase_admin()
        client.table("messages").delete().eq("conversation_id", event.match_id).execute()
        client.table("conversations").delete().eq("id", event.match_id).execute()
        logger.info(f"[chat_sync] conversation {event.match_id} deleted")


class LogChatTransport:
    """Used when no chat backend is configured (local runs)."""

    def on_match_created(self, event: MatchCreated) -> None:
        logger.info(
            f"[chat_sync] (log) match created {event.match_id}: {event.user_a} <-> {event.user_b}"
        )

    def on_match_deleted(self, event: MatchDeleted) -> None:
        logger.info(f"[chat_sync] (log) match deleted {event.match_id}")


def get_chat_transport() -> ChatTransport:
    if CHAT_SYNC_BACKEND == "supabase":
        return SupabaseChatTransport()
    if CHAT_SYNC_BACKEND != "log":
        logger.warning(f"[chat_sync] unknown CHAT_SYNC_BACKEND={CHAT_SYNC_BACKEND!r}, logging only")
    return LogChatTransport()


def publish_events(transport: ChatTransport, events: Iterable[MatchEvent]) -> None:
    for event in events:
        try:
            if isinstance(event, MatchCreated):
                transport.on_match_created(event)
            else:
                transport.on_match_deleted(event)
        except Exception:
            logger.exception(f"[chat_sync] delivery failed for {event!r}")
