"""Lead and search request schemas."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MARKDOWN_LINK_RE = re.compile(r"^\[[^\]]*\]\((?P<url>[^)\s]+)\)$")


class LeadType(str, Enum):
    """Kinds of funding a lead can describe."""

    GRANT = "Grant"
    LOAN = "Loan"
    INVESTOR = "Investor"


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while accepting snake_case too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Lead(CamelModel):
    """One funding opportunity returned by a search."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: str = Field(min_length=1, max_length=255)
    type: LeadType
    amount: str = ""
    deadline: str = ""
    link: str = ""
    match_reason: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            for lead_type in LeadType:
                if value.strip().lower() == lead_type.value.lower():
                    return lead_type
        return value

    @field_validator("name", "amount", "deadline", "link", "match_reason", mode="before")
    @classmethod
    def stringify(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("link")
    @classmethod
    def unwrap_markdown_link(cls, value: str) -> str:
        # "[https://x.org](https://x.org)" -> "https://x.org"
        match = MARKDOWN_LINK_RE.match(value)
        return match.group("url") if match else value


class SearchRequest(CamelModel):
    """Search form body.

    Fields are optional here so that authentication is checked before
    presence; the search service enforces the required ones.
    """

    business_type: str | None = None
    location: str | None = None
    purpose: str | None = None
