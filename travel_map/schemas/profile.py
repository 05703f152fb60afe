"""Profile Schemas — editable profile fields.

Invariants:
    - Omitted fields are left untouched; empty strings clear the stored value
    - Wire names are camelCase (displayName, avatarUrl, bio)
"""

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName", max_length=100)
    avatar_url: str | None = Field(None, alias="avatarUrl", max_length=2000)
    bio: str | None = Field(None, max_length=500)

    def changes(self) -> dict[str, str | None]:
        """Fields present in the request, with blanks normalized to None."""
        return {
            name: (getattr(self, name) or None)
            for name in self.model_fields_set
        }
