"""
Reference model

A reference points from a task to the object it is attached to.
"""

from enum import Enum
from typing import Union
from pydantic import BaseModel, ConfigDict
from podio_tasks.utils.error_handler import InvalidReference


class ReferenceType(str, Enum):
    """Kinds of objects a task can be attached to"""
    
    ALERT = "alert"
    APP = "app"
    APP_FIELD = "app_field"
    APP_REVISION = "app_revision"
    BULLETIN = "bulletin"
    COMMENT = "comment"
    CONVERSATION = "conversation"
    FILE = "file"
    ITEM = "item"
    ITEM_REVISION = "item_revision"
    ITEM_VALUE = "item_value"
    NOTIFICATION = "notification"
    ORG = "org"
    PROFILE = "profile"
    RATING = "rating"
    SHARE = "share"
    SPACE = "space"
    SPACE_MEMBER = "space_member"
    STATUS = "status"
    TASK = "task"
    USER = "user"
    WIDGET = "widget"


class Reference(BaseModel):
    """
    Pointer to another object: (type, id)
    
    Construction is lenient so that bad input can be reported as
    InvalidReference by resolve_reference_path instead of failing
    somewhere inside model validation.
    """
    
    model_config = ConfigDict(frozen=True)
    
    type: Union[ReferenceType, str]
    id: int
    
    def to_path(self) -> str:
        return resolve_reference_path(self)


def _resolve_type(ref_type: Union[ReferenceType, str]) -> ReferenceType:
    if isinstance(ref_type, ReferenceType):
        return ref_type
    if isinstance(ref_type, str):
        candidate = ref_type.strip()
        try:
            return ReferenceType[candidate.upper()]
        except KeyError:
            pass
        try:
            return ReferenceType(candidate.lower())
        except ValueError:
            pass
    raise InvalidReference(f"Unsupported reference type: {ref_type!r}")


def resolve_reference_path(reference: Reference) -> str:
    """
    Build the "{type}/{id}" path segment for a reference
    
    Args:
        reference: Reference to resolve
        
    Returns:
        Path segment, e.g. "item/7"
        
    Raises:
        InvalidReference: If the type is unknown or the id is not positive
    """
    ref_type = _resolve_type(reference.type)
    ref_id = reference.id
    if isinstance(ref_id, bool) or not isinstance(ref_id, int) or ref_id <= 0:
        raise InvalidReference(f"Reference id must be a positive integer, got {ref_id!r}")
    return f"{ref_type.value}/{ref_id}"
