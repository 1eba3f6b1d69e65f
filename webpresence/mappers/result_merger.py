from webpresence.schemas.enrichment import NOT_FOUND, EnrichmentRecord, Platform
from webpresence.schemas.website import ScrapedPage, SiteSignals

# Output fields that are always filled, whatever the caller asked for
_ALWAYS_FILLED = frozenset({"company_name", "website", "company_domain"})

CONTACT_FIELDS = frozenset({"email", "phone", "contact_page"})
SOCIAL_FIELDS = frozenset(p.value for p in Platform)


def _is_empty(value: str | None) -> bool:
    return value is None or value.strip() == "" or value == NOT_FOUND


def page_signals(page: ScrapedPage) -> SiteSignals:
    return SiteSignals(
        social_links=dict(page.social_links),
        email=page.contact.email,
        phone=page.contact.phone,
    )


def merge_signals(*sources: SiteSignals) -> SiteSignals:
    """Merge partial results, highest priority first.

    A field (or a platform entry) is taken from the first source that has it
    and never overwritten by a later one.
    """
    social: dict[Platform, str] = {}
    scalars: dict[str, str | None] = {"email": None, "phone": None, "contact_page": None}
    visited: list[str] = []

    for source in sources:
        for platform, url in source.social_links.items():
            if platform not in social and not _is_empty(url):
                social[platform] = url
        for field in scalars:
            value = getattr(source, field)
            if _is_empty(scalars[field]) and not _is_empty(value):
                scalars[field] = value
        for page in source.visited_pages:
            if page not in visited:
                visited.append(page)

    return SiteSignals(social_links=social, visited_pages=tuple(visited), **scalars)


def wants(field: str, fields_to_extract: list[str]) -> bool:
    return not fields_to_extract or field in _ALWAYS_FILLED or field in fields_to_extract


def build_record(
    company_name: str,
    website: str | None,
    domain: str | None,
    signals: SiteSignals,
    fields_to_extract: list[str] | None = None,
) -> EnrichmentRecord:
    """Apply the sentinel to every unresolved field and drop unrequested ones."""
    requested = fields_to_extract or []

    def _value(field: str, value: str | None) -> str:
        if _is_empty(value) or not wants(field, requested):
            return NOT_FOUND
        return value

    return EnrichmentRecord(
        company_name=_value("company_name", company_name),
        website=_value("website", website),
        domain=_value("company_domain", domain),
        contact_page=_value("contact_page", signals.contact_page),
        email=_value("email", signals.email),
        phone=_value("phone", signals.phone),
        social_links={
            platform: url
            for platform, url in signals.social_links.items()
            if wants(platform.value, requested) and not _is_empty(url)
        },
        visited_pages=list(signals.visited_pages),
    )
