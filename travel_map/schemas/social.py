"""Social Schemas — likes, comments and notification actions.

Invariants:
    - LikeCreate targets exactly one of post_id / comment_id
    - Comment content is trimmed, 1-2000 chars
    - Notification PATCH needs markAllRead or a list of ids; DELETE needs ids
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from travel_map.core.domain_types import LikeTarget


class LikeCreate(BaseModel):
    """Like a post or a comment."""
    post_id: UUID | None = None
    comment_id: UUID | None = None

    @model_validator(mode="after")
    def validate_single_target(self):
        if self.post_id is None and self.comment_id is None:
            raise ValueError("Either post_id or comment_id is required")
        if self.post_id is not None and self.comment_id is not None:
            raise ValueError("Provide post_id or comment_id, not both")
        return self

    @property
    def target(self) -> LikeTarget:
        return LikeTarget.COMMENT if self.comment_id else LikeTarget.POST


def _strip_content(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("content cannot be empty or whitespace")
    return v


class CommentCreate(BaseModel):
    post_id: UUID
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return _strip_content(v)


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return _strip_content(v)


class NotificationMarkRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    notification_ids: list[UUID] | None = Field(None, alias="notificationIds")
    mark_all_read: bool = Field(False, alias="markAllRead")

    @model_validator(mode="after")
    def validate_action(self):
        if not self.mark_all_read and self.notification_ids is None:
            raise ValueError("markAllRead or notificationIds is required")
        return self


class NotificationDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    notification_ids: list[UUID] = Field(alias="notificationIds")
