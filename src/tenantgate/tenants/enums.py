"""Closed value sets for tenant and verification state."""

import enum


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class SubscriptionType(str, enum.Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"


class ApiStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"


class AuthType(str, enum.Enum):
    HMAC = "HMAC"


class VerificationStatus(str, enum.Enum):
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"
    SUSPENDED = "suspended"


class LifecycleAction(str, enum.Enum):
    ENABLE = "enable"
    DISABLE = "disable"
    SUSPEND = "suspend"
