"""Framework-neutral embed model."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator


class RadarcordEmbed(BaseModel):
    """Discord embed structure.

    Bindings convert this into their native embed type; webhook sends
    serialize it with ``to_dict()``.
    """

    title: str | None = Field(None, max_length=256)
    description: str | None = Field(None, max_length=4096)
    url: str | None = None
    timestamp: str | None = None
    color: int | None = Field(None, ge=0, le=0xFFFFFF)
    footer: dict[str, str] | None = None
    image: dict[str, str] | None = None
    thumbnail: dict[str, str] | None = None
    author: dict[str, str] | None = None
    fields: list[dict[str, str | bool]] = Field(default_factory=list, max_length=25)

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[dict[str, str | bool]]) -> list[dict[str, str | bool]]:
        """Validate embed fields."""
        for field in v:
            if "name" not in field or "value" not in field:
                raise ValueError("Each field must have 'name' and 'value'")
            if len(str(field["name"])) > 256:
                raise ValueError("Field name cannot exceed 256 characters")
            if len(str(field["value"])) > 1024:
                raise ValueError("Field value cannot exceed 1024 characters")
        return v

    @model_validator(mode="after")
    def validate_total_length(self) -> Self:
        """Discord rejects embeds whose text exceeds 6000 characters."""
        total = len(self.title or "") + len(self.description or "")
        total += sum(len(str(field["name"])) + len(str(field["value"])) for field in self.fields)
        if self.footer:
            total += len(self.footer.get("text", ""))
        if self.author:
            total += len(self.author.get("name", ""))
        if total > 6000:
            raise ValueError("Embed text cannot exceed 6000 characters")
        return self

    def add_field(self, name: str, value: str, *, inline: bool = False) -> Self:
        """Append a field and return the embed for chaining."""
        self.fields = [*self.fields, {"name": name, "value": value, "inline": inline}]
        return self

    def to_dict(self) -> dict[str, object]:
        """Serialize to the Discord API embed payload."""
        return self.model_dump(exclude_none=True)
