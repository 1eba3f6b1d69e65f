from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

NOT_FOUND = "Not found"


class Platform(StrEnum):
    linkedin = "linkedin"
    facebook = "facebook"
    twitter = "twitter"
    instagram = "instagram"
    youtube = "youtube"
    tiktok = "tiktok"
    pinterest = "pinterest"
    github = "github"
    discord = "discord"


class EnrichmentRequest(BaseModel):
    company: str
    fast_mode: bool = False
    fields_to_extract: list[str] = []

    @field_validator("company")
    @classmethod
    def _strip_company(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("company must not be blank")
        return value


class EnrichmentRecord(BaseModel):
    """Output unit. Unresolved fields hold NOT_FOUND, never None."""

    model_config = ConfigDict(frozen=True)

    company_name: str = NOT_FOUND
    website: str = NOT_FOUND
    domain: str = NOT_FOUND
    contact_page: str = NOT_FOUND
    email: str = NOT_FOUND
    phone: str = NOT_FOUND
    social_links: dict[Platform, str] = {}
    visited_pages: list[str] = []

    def social(self, platform: Platform) -> str:
        return self.social_links.get(platform, NOT_FOUND)

    def to_output(self) -> dict[str, Any]:
        """Flatten into the external format: one key per platform, sentinel for gaps."""
        data: dict[str, Any] = {
            "company_name": self.company_name,
            "website": self.website,
            "company_domain": self.domain,
            "contact_page": self.contact_page,
            "email": self.email,
            "phone": self.phone,
        }
        for platform in Platform:
            data[platform.value] = self.social(platform)
        data["visited_pages"] = list(self.visited_pages)
        return data

    @classmethod
    def from_output(cls, data: dict[str, Any]) -> "EnrichmentRecord":
        social_links = {
            platform: data[platform.value]
            for platform in Platform
            if data.get(platform.value, NOT_FOUND) != NOT_FOUND
        }
        return cls(
            company_name=data.get("company_name", NOT_FOUND),
            website=data.get("website", NOT_FOUND),
            domain=data.get("company_domain", NOT_FOUND),
            contact_page=data.get("contact_page", NOT_FOUND),
            email=data.get("email", NOT_FOUND),
            phone=data.get("phone", NOT_FOUND),
            social_links=social_links,
            visited_pages=list(data.get("visited_pages", [])),
        )


class KeywordsRequest(BaseModel):
    url: str


class KeywordsResponse(BaseModel):
    url: str
    keywords: list[str] = []
