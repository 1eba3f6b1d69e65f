from webpresence.mappers.result_merger import build_record, merge_signals, page_signals
from webpresence.schemas.enrichment import NOT_FOUND, Platform
from webpresence.schemas.website import ContactInfo, ScrapedPage, SiteSignals


def test_first_found_wins_per_field():
    home = SiteSignals(email="info@acme.com", social_links={Platform.linkedin: "https://linkedin.com/company/acme"})
    contact = SiteSignals(
        email="sales@acme.com",
        phone="+1 212 736 5000",
        social_links={
            Platform.linkedin: "https://linkedin.com/company/acme-old",
            Platform.facebook: "https://facebook.com/acme",
        },
    )

    merged = merge_signals(home, contact)

    assert merged.email == "info@acme.com"
    assert merged.phone == "+1 212 736 5000"
    assert merged.social_links == {
        Platform.linkedin: "https://linkedin.com/company/acme",
        Platform.facebook: "https://facebook.com/acme",
    }


def test_sentinel_and_blank_values_do_not_block_later_sources():
    merged = merge_signals(
        SiteSignals(email=NOT_FOUND, phone="  "),
        SiteSignals(email="hello@acme.com", phone="+44 20 7946 0958"),
    )
    assert merged.email == "hello@acme.com"
    assert merged.phone == "+44 20 7946 0958"


def test_visited_pages_deduplicated_in_order():
    merged = merge_signals(
        SiteSignals(visited_pages=("https://acme.com/",)),
        SiteSignals(visited_pages=("https://acme.com/contact", "https://acme.com/")),
    )
    assert merged.visited_pages == ("https://acme.com/", "https://acme.com/contact")


def test_page_signals():
    page = ScrapedPage(
        url="https://acme.com/",
        social_links={Platform.github: "https://github.com/acme"},
        contact=ContactInfo(email="info@acme.com"),
        success=True,
    )
    signals = page_signals(page)
    assert signals.email == "info@acme.com"
    assert signals.phone is None
    assert signals.social_links == {Platform.github: "https://github.com/acme"}


def test_build_record_fills_sentinel():
    record = build_record("Acme", None, None, SiteSignals())
    assert record.company_name == "Acme"
    assert record.website == NOT_FOUND
    assert record.domain == NOT_FOUND
    assert record.email == NOT_FOUND
    assert record.social(Platform.tiktok) == NOT_FOUND


def test_build_record_applies_field_mask():
    signals = SiteSignals(
        email="info@acme.com",
        phone="+1 212 736 5000",
        contact_page="https://acme.com/contact",
        social_links={
            Platform.linkedin: "https://linkedin.com/company/acme",
            Platform.facebook: "https://facebook.com/acme",
        },
    )

    record = build_record(
        "Acme", "https://acme.com/", "acme.com", signals, fields_to_extract=["email", "facebook"],
    )

    assert record.company_name == "Acme"
    assert record.website == "https://acme.com/"
    assert record.domain == "acme.com"
    assert record.email == "info@acme.com"
    assert record.phone == NOT_FOUND
    assert record.contact_page == NOT_FOUND
    assert record.social_links == {Platform.facebook: "https://facebook.com/acme"}
