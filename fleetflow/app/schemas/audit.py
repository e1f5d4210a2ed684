"""
Audit trail schemas.
"""

from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime


class AuditLogResponse(BaseModel):
    id: int
    actor_id: Optional[int]
    actor_username: Optional[str]
    action: str
    entity_type: Optional[str]
    entity_id: Optional[int]
    meta_data: Optional[Dict[str, Any]]
    ip_address: Optional[str]
    timestamp: datetime

    class Config:
        from_attributes = True
