from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from zawaj.core.match_config import REPORT_REASON_MAX_LENGTH
from zawaj.schemas.base import BaseSchema


class ReportTarget(str, Enum):
    user = "user"
    message = "message"
    photo = "photo"


class ReportCreateRequest(BaseModel):
    target_type: ReportTarget
    target_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=3, max_length=REPORT_REASON_MAX_LENGTH)


class ReportOut(BaseSchema):
    id: str
    reporter_id: str
    target_type: str
    target_id: str
    reason: str
    created_at: datetime
