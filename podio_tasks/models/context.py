"""
Per-call user context
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict
from podio_tasks.config.settings import settings


class UserContext(BaseModel):
    """
    Identity a request is made as

    Passed into every service operation; "the current user" of the
    listing operations is whoever this token belongs to.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    user_id: Optional[int] = None

    @classmethod
    def from_settings(cls) -> "UserContext":
        settings.validate()
        return cls(access_token=settings.PODIO_ACCESS_TOKEN, user_id=settings.PODIO_USER_ID)

    def __repr__(self) -> str:
        return f"UserContext(user_id={self.user_id!r})"
