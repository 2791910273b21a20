"""Infrastructure persistence layer."""

from .database import Database
from .models import (
    Base,
    ClickEventModel,
    CreatorProfileModel,
    SmartLinkTargetModel,
    SocialLinkModel,
)
from .profile_lookup import DatabaseProfileLookup
from .repositories import (
    ClickEventRepository,
    ProfileRepository,
    SmartLinkTargetRepository,
)

__all__ = [
    "Base",
    "ClickEventModel",
    "ClickEventRepository",
    "CreatorProfileModel",
    "Database",
    "DatabaseProfileLookup",
    "ProfileRepository",
    "SmartLinkTargetModel",
    "SmartLinkTargetRepository",
    "SocialLinkModel",
]
