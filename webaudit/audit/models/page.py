"""Pydantic models for auditable pages and the elements they carry.

A Page is the unit handed to check modules. It bundles the raw response
data with the link, form, cookie and header elements extracted from it.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ElementKind(str, Enum):
    """Kinds of auditable elements a page can expose."""
    LINK = "link"
    FORM = "form"
    COOKIE = "cookie"
    HEADER = "header"


class Element(BaseModel):
    """A single auditable element (link, form, cookie or header)."""

    kind: ElementKind = Field(description="Element kind")
    action: str = Field(description="URL the element submits to")
    method: str = Field(default="GET", description="HTTP method used on submission")
    inputs: Dict[str, str] = Field(
        default_factory=dict,
        description="Input names mapped to their default values"
    )

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class Page(BaseModel):
    """A fetched and parsed page ready for auditing."""

    url: str = Field(description="URL of the page")
    code: int = Field(default=200, description="HTTP status code of the response")
    method: str = Field(default="GET", description="HTTP method used to fetch the page")
    body: str = Field(default="", description="Raw response body")
    query_vars: Dict[str, str] = Field(
        default_factory=dict,
        description="Query string parameters of the page URL"
    )
    response_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Headers returned with the response"
    )

    links: List[Element] = Field(default_factory=list, description="Link elements")
    forms: List[Element] = Field(default_factory=list, description="Form elements")
    cookies: List[Element] = Field(default_factory=list, description="Cookie elements")
    headers: List[Element] = Field(default_factory=list, description="Request header elements")

    def clone(self) -> "Page":
        """Return an independent deep copy of this page."""
        return self.model_copy(deep=True)

    def elements_of(self, kind: ElementKind) -> List[Element]:
        """Return the element collection for ``kind``."""
        return {
            ElementKind.LINK: self.links,
            ElementKind.FORM: self.forms,
            ElementKind.COOKIE: self.cookies,
            ElementKind.HEADER: self.headers,
        }[ElementKind(kind)]

    @property
    def element_count(self) -> int:
        """Total number of auditable elements on the page."""
        return len(self.links) + len(self.forms) + len(self.cookies) + len(self.headers)

    def get_response_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a response header value (case-insensitive)."""
        for key, value in self.response_headers.items():
            if key.lower() == name.lower():
                return value
        return default
