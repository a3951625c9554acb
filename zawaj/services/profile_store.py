from __future__ import annotations

import hashlib
import json
from typing import Dict, Iterable, List, Optional, Set, Tuple

from fastapi import Depends
from loguru import logger
from sqlalchemy import and_, delete, or_, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from zawaj.core.clock import utcnow
from zawaj.core.db import get_db
from zawaj.models.block import Block
from zawaj.models.discovery_seen import DiscoverySeen
from zawaj.models.match import AuditLog, Match, Message
from zawaj.models.preference import Preference
from zawaj.models.report import Report
from zawaj.models.swipe import Swipe
from zawaj.models.user import Photo, User
from zawaj.modules.discovery.eligibility import normalized_column


def canonical_pair(a: str, b: str) -> Tuple[str, str]:
    a_str = str(a)
    b_str = str(b)
    return (a_str, b_str) if a_str < b_str else (b_str, a_str)


def pair_lock_key(pair: Tuple[str, str]) -> int:
    """Signed 64-bit advisory lock key for an unordered user pair."""
    a, b = canonical_pair(*pair)
    digest = hashlib.sha256(f"{a}:{b}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


class ProfileStore:
    """
    Keyed reads and writes over the profile tables.

    No business rules live here. Writes are not committed; the calling
    service decides when the unit of work ends.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------
    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def detach(self, obj) -> None:
        self.db.expunge(obj)

    def lock_pair(self, pair: Tuple[str, str]) -> None:
        """
        Serialize writers on one user pair until the transaction ends.

        PostgreSQL takes a transaction-scoped advisory lock. SQLite already
        serializes writers, so nothing is needed there.
        """
        if self.db.get_bind().dialect.name == "postgresql":
            self.db.execute(
                text("select pg_advisory_xact_lock(:key)"),
                {"key": pair_lock_key(pair)},
            )

    def _insert(self, model):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(model)
        if dialect == "sqlite":
            return sqlite_insert(model)
        raise RuntimeError(f"Upserts are not supported on dialect {dialect!r}")

    # ------------------------------------------------------------
    # Users
    # ------------------------------------------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        rows = self.db.query(User).filter(User.id.in_(ids)).all()
        return {u.id: u for u in rows}

    def email_taken(self, email: str) -> bool:
        return self.db.query(User.id).filter(User.email == email).first() is not None

    def add_user(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    def add_photo(self, user_id: str, url: str, ordering: int = 0) -> Photo:
        photo = Photo(user_id=user_id, url=url, ordering=ordering)
        self.db.add(photo)
        self.db.flush()
        return photo

    def find_candidates(self, predicate: ColumnElement, limit: int) -> List[User]:
        return (
            self.db.query(User)
            .filter(predicate)
            .order_by(User.updated_at.desc(), User.created_at.desc())
            .limit(limit)
            .all()
        )

    def guardians_missing_ward(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(
                normalized_column(User.role) == "mother",
                or_(
                    User.mother_for.is_(None),
                    normalized_column(User.mother_for).notin_(["son", "daughter"]),
                ),
            )
            .order_by(User.created_at.asc())
            .all()
        )

    def delete_user(self, user_id: str) -> List[str]:
        """Remove the user and everything pointing at them. Returns deleted match ids."""
        match_ids = [m.id for m in self.matches_for(user_id)]
        if match_ids:
            self.db.execute(delete(Message).where(Message.match_id.in_(match_ids)))
            self.db.execute(delete(Match).where(Match.id.in_(match_ids)))

        self.db.execute(
            delete(Swipe).where(or_(Swipe.from_user_id == user_id, Swipe.to_user_id == user_id))
        )
        self.db.execute(
            delete(Block).where(or_(Block.blocker_id == user_id, Block.blocked_id == user_id))
        )
        self.db.execute(
            delete(DiscoverySeen).where(
                or_(DiscoverySeen.viewer_id == user_id, DiscoverySeen.seen_user_id == user_id)
            )
        )
        self.db.execute(delete(Report).where(Report.reporter_id == user_id))
        user = self.get_user(user_id)
        if user is not None:
            # photos and preferences go with the ORM cascade
            self.db.delete(user)
        self.db.flush()
        return match_ids

    # ------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------
    def get_preferences(self, user_id: str) -> Optional[Preference]:
        return self.db.query(Preference).filter(Preference.user_id == user_id).first()

    def upsert_preferences(self, user_id: str, values: dict) -> Preference:
        prefs = self.get_preferences(user_id)
        if prefs is None:
            prefs = Preference(user_id=user_id)
            self.db.add(prefs)
        for key, value in values.items():
            setattr(prefs, key, value)
        self.db.flush()
        return prefs

    # ------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------
    def get_blocks_involving(self, user_id: str) -> List[Block]:
        return (
            self.db.query(Block)
            .filter(or_(Block.blocker_id == user_id, Block.blocked_id == user_id))
            .all()
        )

    def block_exists(self, a: str, b: str) -> bool:
        row = (
            self.db.query(Block.id)
            .filter(
                or_(
                    and_(Block.blocker_id == a, Block.blocked_id == b),
                    and_(Block.blocker_id == b, Block.blocked_id == a),
                )
            )
            .first()
        )
        return row is not None

    def upsert_block(self, blocker_id: str, blocked_id: str) -> Block:
        stmt = self._insert(Block).values(
            blocker_id=blocker_id,
            blocked_id=blocked_id,
            created_at=utcnow(),
        )
        self.db.execute(stmt.on_conflict_do_nothing(index_elements=["blocker_id", "blocked_id"]))
        return (
            self.db.query(Block)
            .filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
            .one()
        )

    def delete_block(self, blocker_id: str, blocked_id: str) -> bool:
        result = self.db.execute(
            delete(Block).where(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        )
        return result.rowcount > 0

    # ------------------------------------------------------------
    # Swipes
    # ------------------------------------------------------------
    def get_swipes_from(self, user_id: str) -> List[Swipe]:
        return self.db.query(Swipe).filter(Swipe.from_user_id == user_id).all()

    def get_right_swipes_to(self, user_id: str) -> List[Swipe]:
        return (
            self.db.query(Swipe)
            .filter(Swipe.to_user_id == user_id, Swipe.direction == "right")
            .order_by(Swipe.updated_at.desc(), Swipe.id.desc())
            .all()
        )

    def get_swipe(self, from_user_id: str, to_user_id: str) -> Optional[Swipe]:
        return (
            self.db.query(Swipe)
            .populate_existing()
            .filter(Swipe.from_user_id == from_user_id, Swipe.to_user_id == to_user_id)
            .first()
        )

    def latest_swipe_from(self, user_id: str) -> Optional[Swipe]:
        return (
            self.db.query(Swipe)
            .filter(Swipe.from_user_id == user_id)
            .order_by(Swipe.updated_at.desc(), Swipe.id.desc())
            .first()
        )

    def upsert_swipe(
        self,
        from_user_id: str,
        to_user_id: str,
        direction: str,
        is_super_like: bool,
    ) -> Swipe:
        now = utcnow()
        stmt = self._insert(Swipe).values(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            direction=direction,
            is_super_like=is_super_like,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["from_user_id", "to_user_id"],
            set_={
                "direction": stmt.excluded.direction,
                "is_super_like": stmt.excluded.is_super_like,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)
        return self.get_swipe(from_user_id, to_user_id)

    def delete_swipe(self, swipe_id: int) -> None:
        self.db.execute(delete(Swipe).where(Swipe.id == swipe_id))

    # ------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------
    def get_match(self, pair: Tuple[str, str]) -> Optional[Match]:
        a, b = canonical_pair(*pair)
        return (
            self.db.query(Match)
            .populate_existing()
            .filter(Match.user_a_id == a, Match.user_b_id == b)
            .first()
        )

    def get_match_by_id(self, match_id: str) -> Optional[Match]:
        return self.db.query(Match).filter(Match.id == match_id).first()

    def matches_for(self, user_id: str) -> List[Match]:
        return (
            self.db.query(Match)
            .filter(or_(Match.user_a_id == user_id, Match.user_b_id == user_id))
            .order_by(Match.last_message_at.desc().nulls_last(), Match.created_at.desc())
            .all()
        )

    def matched_user_ids(self, user_id: str) -> Set[str]:
        return {m.other_user_id(user_id) for m in self.matches_for(user_id)}

    def upsert_match(self, pair: Tuple[str, str], roles_snapshot: dict) -> Tuple[Match, bool]:
        """
        Insert the canonical pair unless it already exists.

        Returns the stored row and whether this call created it. A racing
        second insert hits the unique key and becomes a no-op.
        """
        a, b = canonical_pair(*pair)
        stmt = (
            self._insert(Match)
            .values(
                user_a_id=a,
                user_b_id=b,
                roles_snapshot=json.dumps(roles_snapshot),
                created_at=utcnow(),
            )
            .on_conflict_do_nothing(index_elements=["user_a_id", "user_b_id"])
            .returning(Match.id)
        )
        created = self.db.execute(stmt).first() is not None
        return self.get_match((a, b)), created

    def delete_match(self, pair: Tuple[str, str]) -> Optional[Match]:
        match = self.get_match(pair)
        if match is None:
            return None
        self.db.execute(delete(Message).where(Message.match_id == match.id))
        self.db.delete(match)
        self.db.flush()
        logger.debug(f"[store] deleted match {match.id} ({match.user_a_id}, {match.user_b_id})")
        return match

    # ------------------------------------------------------------
    # Discovery seen-log
    # ------------------------------------------------------------
    def get_seen_ids(self, viewer_id: str) -> Set[str]:
        rows = (
            self.db.query(DiscoverySeen.seen_user_id)
            .filter(DiscoverySeen.viewer_id == viewer_id)
            .all()
        )
        return {r[0] for r in rows}

    def upsert_seen(self, viewer_id: str, seen_user_id: str) -> None:
        stmt = self._insert(DiscoverySeen).values(
            viewer_id=viewer_id,
            seen_user_id=seen_user_id,
            created_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["viewer_id", "seen_user_id"],
            set_={"created_at": stmt.excluded.created_at},
        )
        self.db.execute(stmt)

    # ------------------------------------------------------------
    # Messages + audit
    # ------------------------------------------------------------
    def add_message(self, match: Match, sender_id: str, text: str) -> Message:
        msg = Message(match_id=match.id, sender_id=sender_id, text=text, created_at=utcnow())
        self.db.add(msg)
        match.last_message_at = msg.created_at
        self.db.flush()
        return msg

    def list_messages(self, match_id: str, limit: int) -> List[Message]:
        rows = (
            self.db.query(Message)
            .filter(Message.match_id == match_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
            .all()
        )
        rows.reverse()
        return rows

    def append_audit(self, match_id: str, sender_id: str, action: str) -> None:
        self.db.add(AuditLog(match_id=match_id, sender_id=sender_id, action=action))
        self.db.flush()

    # ------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------
    def add_report(self, reporter_id: str, target_type: str, target_id: str, reason: str) -> Report:
        report = Report(
            reporter_id=reporter_id, target_type=target_type, target_id=target_id, reason=reason
        )
        self.db.add(report)
        self.db.flush()
        return report


# ------------------------------------------------------------
# FastAPI dependency
# ------------------------------------------------------------
def get_store(db: Session = Depends(get_db)) -> ProfileStore:
    return ProfileStore(db)
