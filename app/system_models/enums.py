# app/system_models/enums.py
"""Closed tag sets shared by models, schemas and engines. The DB stores ``.value``."""
from enum import Enum


class AntibioticStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    SUSPENDED = "suspended"


class CultureStatus(str, Enum):
    PENDING = "pending"
    NEGATIVE = "negative"
    POSITIVE = "positive"
    CONTAMINATED = "contaminated"


class AlertType(str, Enum):
    CULTURE_PENDING = "culture_pending"
    ATB_REVIEW = "atb_review"
    LAB_CRITICAL = "lab_critical"
    PROPHYLAXIS = "prophylaxis"
    CUSTOM = "custom"


class AlertPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Sort key: critical first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    AlertPriority.CRITICAL: 1,
    AlertPriority.HIGH: 2,
    AlertPriority.MEDIUM: 3,
    AlertPriority.LOW: 4,
}


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(str, Enum):
    CHAT = "chat"
    EVOLUTION = "evolution"
    ALERT = "alert"
    SUMMARY = "summary"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"
    LOGIN = "login"
    LOGOUT = "logout"


class UserRole(str, Enum):
    RESIDENT = "resident"
    PRECEPTOR = "preceptor"
    ADMIN = "admin"
