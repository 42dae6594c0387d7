from pydantic import BaseModel
from datetime import datetime
from enum import Enum


class NotificationLevel(str, Enum):
    success = "success"
    error = "error"
    info = "info"


class Notification(BaseModel):
    id: int
    level: NotificationLevel
    message: str
    created_at: datetime
    expires_at: datetime
    ttl_seconds: float
