from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.services.search_normalization import display_title


class ICHISearchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., alias="Title")
    code: str = Field(..., alias="Code")


class ICHIEntryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., alias="Code")
    block_id: str | None = Field(default=None, alias="BlockId")
    title: str = Field(..., alias="Title")
    display_title: str = Field(default="", alias="DisplayTitle")
    class_kind: str | None = Field(default=None, alias="ClassKind")
    depth_in_kind: int = Field(..., alias="DepthInKind")

    @classmethod
    def from_entry(cls, entry: object) -> "ICHIEntryResponse":
        title = getattr(entry, "title", "") or ""
        return cls(
            code=getattr(entry, "code"),
            block_id=getattr(entry, "block_id", None),
            title=title,
            display_title=display_title(title),
            class_kind=getattr(entry, "class_kind", None),
            depth_in_kind=int(getattr(entry, "depth_in_kind")),
        )


class ICHISearchResponse(BaseModel):
    query: str
    limit: int
    depth_in_kind: int | None
    count: int
    results: list[ICHISearchResult]


class ICHIListResponse(BaseModel):
    count: int
    limit: int
    offset: int
    sort: str
    results: list[ICHIEntryResponse]


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
