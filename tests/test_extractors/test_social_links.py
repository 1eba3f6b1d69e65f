from bs4 import BeautifulSoup

from webpresence.extractors.social_links import (
    canonicalize_social_url,
    classify_social_url,
    extract_social_links,
    extract_social_links_from_source,
)
from webpresence.schemas.enrichment import Platform

BASE = "https://acme.com/"


def _links(body: str) -> dict[Platform, str]:
    soup = BeautifulSoup(f"<html><body>{body}</body></html>", "html.parser")
    return extract_social_links(soup, BASE)


def test_finds_profiles_per_platform():
    found = _links(
        '<a href="https://www.linkedin.com/company/acme-robotics">in</a>'
        '<a href="https://twitter.com/acmerobots">tw</a>'
        '<a href="https://www.youtube.com/@acme">yt</a>'
        '<a href="https://github.com/acme">gh</a>'
        '<a href="https://discord.gg/acme">dc</a>'
    )
    assert found == {
        Platform.linkedin: "https://www.linkedin.com/company/acme-robotics",
        Platform.twitter: "https://twitter.com/acmerobots",
        Platform.youtube: "https://www.youtube.com/@acme",
        Platform.github: "https://github.com/acme",
        Platform.discord: "https://discord.gg/acme",
    }


def test_facebook_sharer_is_not_a_profile():
    found = _links('<a href="https://www.facebook.com/sharer/sharer.php?u=https://acme.com">Share</a>')
    assert Platform.facebook not in found


def test_share_and_intent_links_excluded():
    found = _links(
        '<a href="https://twitter.com/intent/tweet?text=hi">Tweet</a>'
        '<a href="https://www.linkedin.com/shareArticle?url=x">Share</a>'
    )
    assert found == {}


def test_share_buttons_do_not_hide_later_profiles():
    found = _links(
        '<a href="https://www.linkedin.com/sharing/share-offsite/?url=https://acme.com">Share</a>'
        '<a href="https://pinterest.com/pin/create/button/?url=https://acme.com">Pin it</a>'
        '<a href="https://www.linkedin.com/company/acme">LinkedIn</a>'
        '<a href="https://www.pinterest.com/acmeco/">Pinterest</a>'
    )
    assert found == {
        Platform.linkedin: "https://www.linkedin.com/company/acme",
        Platform.pinterest: "https://www.pinterest.com/acmeco/",
    }


def test_facebook_tracking_and_embed_paths_excluded():
    assert classify_social_url("https://www.facebook.com/tr?id=1&ev=PageView") is None
    assert classify_social_url("https://www.facebook.com/plugins/page.php?href=x") is None
    assert classify_social_url("https://www.facebook.com/2008/fbml") is None
    assert classify_social_url("https://www.facebook.com/trailhead.outfitters") == Platform.facebook


def test_bare_platform_homepage_excluded():
    assert _links('<a href="https://www.instagram.com/">Instagram</a>') == {}


def test_query_and_fragment_stripped():
    found = _links('<a href="https://www.instagram.com/acme/?hl=en#top">ig</a>')
    assert found[Platform.instagram] == "https://www.instagram.com/acme/"


def test_first_link_in_document_order_wins():
    found = _links(
        '<header><a href="https://www.facebook.com/acme">fb</a></header>'
        '<footer><a href="https://www.facebook.com/acme-old">fb</a></footer>'
    )
    assert found[Platform.facebook] == "https://www.facebook.com/acme"


def test_protocol_relative_href_resolved():
    found = _links('<a href="//twitter.com/acme">tw</a>')
    assert found[Platform.twitter] == "https://twitter.com/acme"


def test_unrelated_host_ending_in_platform_name_ignored():
    assert _links('<a href="https://netflix.com/browse">Watch</a>') == {}


def test_meta_tags_are_scanned():
    soup = BeautifulSoup(
        '<html><head><meta name="twitter:site" content="https://x.com/acme">'
        '<meta name="description" content="https://www.pinterest.com/acme"></head></html>',
        "html.parser",
    )
    found = extract_social_links(soup, BASE)
    assert found == {Platform.twitter: "https://x.com/acme"}


def test_classify_prefers_specific_pattern():
    assert classify_social_url("https://www.linkedin.com/company/acme") == Platform.linkedin
    assert classify_social_url("https://m.facebook.com/acme") == Platform.facebook
    assert classify_social_url("https://www.linkedin.com/login") is None
    assert classify_social_url("mailto:hi@acme.com") is None


def test_canonicalize():
    assert canonicalize_social_url(" https://x.com/acme?s=20#x ") == "https://x.com/acme"


def test_source_scan_finds_links_inside_scripts():
    source = (
        '<script>window.cfg = {"ig": "https://www.instagram.com/acme_co", '
        '"fb": "https://www.facebook.com/sharer.php?u=1"};</script>'
    )
    found = extract_social_links_from_source(source)
    assert found == {Platform.instagram: "https://www.instagram.com/acme_co"}


def test_source_scan_skips_meta_pixel():
    source = (
        "<script>fbq('init', '1234');</script>"
        '<noscript><img src="https://www.facebook.com/tr?id=1234&ev=PageView&noscript=1"></noscript>'
    )
    assert extract_social_links_from_source(source) == {}


def test_source_scan_finds_profile_after_pixel():
    source = (
        '<img src="https://www.facebook.com/tr?id=1234&ev=PageView">'
        '<a href="https://www.facebook.com/acmeco">Facebook</a>'
    )
    found = extract_social_links_from_source(source)
    assert found == {Platform.facebook: "https://www.facebook.com/acmeco"}


def test_source_scan_skips_pin_button():
    source = (
        '<script src="https://assets.pinterest.com/js/pinit.js"></script>'
        '<a data-pin-do="buttonPin" href="https://www.pinterest.com/pin/create/button/?url=x"></a>'
    )
    assert extract_social_links_from_source(source) == {}
