from loguru import logger

from zawaj.core.errors import NotFound, ValidationFailed
from zawaj.models.block import Block
from zawaj.models.user import User
from zawaj.services.profile_store import ProfileStore


def block_user(store: ProfileStore, me: User, target_user_id: str) -> Block:
    if target_user_id == me.id:
        raise ValidationFailed("Cannot block yourself")
    if store.get_user(target_user_id) is None:
        raise NotFound("User not found", details={"user_id": target_user_id})

    block = store.upsert_block(me.id, target_user_id)
    store.commit()
    logger.info(f"[blocks] {me.id} blocked {target_user_id}")
    return block


def unblock_user(store: ProfileStore, me: User, target_user_id: str) -> None:
    if not store.delete_block(me.id, target_user_id):
        raise NotFound("Block not found", details={"user_id": target_user_id})
    store.commit()
    logger.info(f"[blocks] {me.id} unblocked {target_user_id}")
