"""
Request and response models for the Telegraph API.

Field names match the JSON wire names. Request models carry the API's own
field rules (lengths, ranges, URL shape) so that a bad request is rejected
before it is sent.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler, field_validator
from pydantic_core import core_schema

from telegraphkit.content.nodes import ContentNode, nodes_from_wire, nodes_to_wire

URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$")

ACCOUNT_FIELDS = ("short_name", "author_name", "author_url", "auth_url", "page_count")
AccountField = Literal["short_name", "author_name", "author_url", "auth_url", "page_count"]


class _WireContent:
    """Pydantic hook: validate/serialize content through the node wire codec."""

    def __get_pydantic_core_schema__(self, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            nodes_from_wire,
            serialization=core_schema.plain_serializer_function_ser_schema(
                nodes_to_wire,
                return_schema=core_schema.list_schema(),
            ),
        )


ContentNodes = Annotated[Tuple[ContentNode, ...], _WireContent()]


# --- Requests ---


class TelegraphRequest(BaseModel):
    """Base for request bodies."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @field_validator("author_url", check_fields=False)
    @classmethod
    def author_url_is_http(cls, v: Optional[str]) -> Optional[str]:
        if v and not URL_PATTERN.match(v):
            raise ValueError("author_url must be a valid URL")
        return v


class CreateAccountRequest(TelegraphRequest):
    short_name: str = Field(min_length=1, max_length=32)
    author_name: Optional[str] = Field(default=None, max_length=128)
    author_url: Optional[str] = Field(default=None, max_length=512)


class EditAccountInfoRequest(TelegraphRequest):
    access_token: str = Field(min_length=1)
    short_name: Optional[str] = Field(default=None, min_length=1, max_length=32)
    author_name: Optional[str] = Field(default=None, max_length=128)
    author_url: Optional[str] = Field(default=None, max_length=512)


class GetAccountInfoRequest(TelegraphRequest):
    access_token: str = Field(min_length=1)
    fields: Optional[List[AccountField]] = None


class CreatePageRequest(TelegraphRequest):
    access_token: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=256)
    author_name: Optional[str] = Field(default=None, max_length=128)
    author_url: Optional[str] = Field(default=None, max_length=512)
    content: ContentNodes
    return_content: bool = False

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: Tuple[ContentNode, ...]) -> Tuple[ContentNode, ...]:
        if not v:
            raise ValueError("content is required")
        return v


class EditPageRequest(CreatePageRequest):
    path: str = Field(min_length=1)


class GetPageRequest(TelegraphRequest):
    path: str = Field(min_length=1)
    return_content: bool = False


class GetPageListRequest(TelegraphRequest):
    access_token: str = Field(min_length=1)
    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=0, le=200)


class GetViewsRequest(TelegraphRequest):
    path: str = Field(min_length=1)
    year: Optional[int] = Field(default=None, ge=2000, le=2100)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    day: Optional[int] = Field(default=None, ge=1, le=31)
    hour: Optional[int] = Field(default=None, ge=0, le=24)


# --- Responses ---


class TelegraphObject(BaseModel):
    """Base for API result objects; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class Account(TelegraphObject):
    short_name: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    # Only returned by createAccount / revokeAccessToken
    access_token: Optional[str] = None
    auth_url: Optional[str] = None
    page_count: Optional[int] = None


class Page(TelegraphObject):
    path: str
    url: str
    title: str
    description: str = ""
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    image_url: Optional[str] = None
    content: Optional[ContentNodes] = None
    views: int = 0
    can_edit: Optional[bool] = None


class PageList(TelegraphObject):
    total_count: int
    pages: List[Page] = Field(default_factory=list)


class PageViews(TelegraphObject):
    views: int
