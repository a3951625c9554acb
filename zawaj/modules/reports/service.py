from loguru import logger

from zawaj.core.errors import NotFound, ValidationFailed
from zawaj.models.report import Report
from zawaj.models.user import User
from zawaj.schemas.report import ReportCreateRequest, ReportTarget
from zawaj.services.profile_store import ProfileStore


def file_report(store: ProfileStore, me: User, payload: ReportCreateRequest) -> Report:
    """Record a moderation report. Reviewing reports happens elsewhere."""
    reason = payload.reason.strip()
    if len(reason) < 3:
        raise ValidationFailed("Reason is too short")

    if payload.target_type == ReportTarget.user:
        if payload.target_id == me.id:
            raise ValidationFailed("Cannot report yourself")
        if store.get_user(payload.target_id) is None:
            raise NotFound("User not found", details={"user_id": payload.target_id})

    report = store.add_report(me.id, payload.target_type.value, payload.target_id, reason)
    store.commit()
    logger.info(f"[reports] {me.id} reported {payload.target_type.value} {payload.target_id}")
    return report
