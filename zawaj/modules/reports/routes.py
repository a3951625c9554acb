from fastapi import APIRouter, Depends

from zawaj.core.auth import get_current_user
from zawaj.models.user import User
from zawaj.schemas.report import ReportCreateRequest, ReportOut
from zawaj.services.profile_store import ProfileStore, get_store

from .service import file_report

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportOut)
def report_create(
    payload: ReportCreateRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return ReportOut.model_validate(file_report(store, me, payload))
