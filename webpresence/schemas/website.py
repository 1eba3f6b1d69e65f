from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from webpresence.schemas.enrichment import Platform


class StatusClass(StrEnum):
    success = "success"
    client_error = "client_error"
    server_error = "server_error"
    network_error = "network_error"


class FetchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    html: str = ""
    final_url: str
    status_class: StatusClass
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_class == StatusClass.success


class ContactInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str | None = None
    phone: str | None = None


class ScrapedPage(BaseModel):
    """Signals pulled from one page by one extraction tier."""

    model_config = ConfigDict(frozen=True)

    url: str
    final_url: str | None = None
    html: str = ""
    social_links: dict[Platform, str] = {}
    contact: ContactInfo = ContactInfo()
    strategy: str = ""
    success: bool = False
    error: str | None = None

    @property
    def has_social_signal(self) -> bool:
        return bool(self.social_links)


class PageType(StrEnum):
    home = "home"
    contact = "contact"
    about = "about"
    privacy = "privacy"
    terms = "terms"


class CrawlPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    page_type: PageType


class CandidateDomain(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    tld: str

    @property
    def host(self) -> str:
        return f"{self.name}.{self.tld}"


class SiteSignals(BaseModel):
    """Partial result of one source, merged by the result merger."""

    model_config = ConfigDict(frozen=True)

    social_links: dict[Platform, str] = {}
    email: str | None = None
    phone: str | None = None
    contact_page: str | None = None
    visited_pages: tuple[str, ...] = ()
