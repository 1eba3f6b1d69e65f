import logging
import re
from urllib.parse import unquote

from bs4 import BeautifulSoup

from webpresence.schemas.website import ContactInfo

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b")
_EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_PHONE_PATTERNS = (
    # +1-234-567-8900, +49 (0)30 1234 5678, +44 20 7946 0958
    re.compile(r"\+\d{1,3}[\s.\-]?(?:\(?\d{1,4}\)?[\s./\-]?){2,5}\d{2,4}"),
    # (123) 456-7890, 123.456.7890
    re.compile(r"\(?\d{3}\)?[\s.\-]?\d{3}[\s.\-]?\d{4}"),
    # 030/1234 5678, 0800 123 4567
    re.compile(r"\d{2,5}[\s./\-]\d{3,4}[\s./\-]?\d{3,4}"),
)

# Footer and contact-labelled regions are scanned before the full body
EMAIL_REGIONS = (
    'footer, .contact, .footer, #contact, #footer, [class*="contact"], [class*="footer"]'
)
PHONE_REGIONS = EMAIL_REGIONS + ', [class*="phone"], [class*="hotline"]'

# Substrings of placeholder, test and monitoring addresses
_BLOCKED_EMAIL_FRAGMENTS = (
    "example.com", "test.com", "yourdomain", "sentry.io",
    "sentry-next", "wixpress.com", "noreply",
    "no-reply", "donotreply", "mailer-daemon", "google-analytics",
    "googletagmanager", "hotjar", "segment.io", "mixpanel", "w3.org",
)
_IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")

_CONTACT_LOCAL_PARTS = ("contact", "info", "hello", "support")

_SEQUENTIAL_PREFIXES = ("0123456789", "123456", "987654")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


def _digits_only(phone: str) -> str:
    return "".join(c for c in phone if c.isdigit())


def is_placeholder_email(email: str) -> bool:
    lower = email.lower()
    if lower.endswith(_IMAGE_SUFFIXES):
        return True
    return any(fragment in lower for fragment in _BLOCKED_EMAIL_FRAGMENTS)


def is_placeholder_phone(digits: str) -> bool:
    """Repeated, sequential and fictional (555) numbers."""
    if len(set(digits)) == 1:
        return True
    if digits.startswith(_SEQUENTIAL_PREFIXES):
        return True
    national = digits[1:] if len(digits) == 11 and digits.startswith("1") else digits
    # North American area codes never start with 0 or 1
    if len(national) == 10 and national[0] in "23456789" and "555" in (national[:3], national[3:6]):
        return True
    return False


def is_valid_phone(phone: str) -> bool:
    digits = _digits_only(phone)
    if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        return False
    return not is_placeholder_phone(digits)


def pick_email(candidates: list[str]) -> str | None:
    """Drop placeholders, then prefer contact-oriented local parts."""
    valid = [e for e in candidates if not is_placeholder_email(e)]
    if not valid:
        return None
    for email in valid:
        local = email.split("@")[0].lower()
        if any(part in local for part in _CONTACT_LOCAL_PARTS):
            return email
    return valid[0]


def pick_phone(candidates: list[str]) -> str | None:
    for phone in candidates:
        if is_valid_phone(phone):
            return phone.strip()
    return None


def _mailto_email(soup: BeautifulSoup) -> str | None:
    for a in soup.select('a[href^="mailto:" i]'):
        decoded = unquote(a["href"])
        email = decoded[len("mailto:"):].split("?")[0].split("&")[0].strip()
        if _EMAIL_SHAPE_RE.match(email):
            return email
    return None


def _tel_phone(soup: BeautifulSoup) -> str | None:
    for a in soup.select('a[href^="tel:" i]'):
        decoded = unquote(a["href"])
        phone = re.sub(r"\s+", " ", decoded[len("tel:"):]).strip()
        if is_valid_phone(phone):
            return phone
    return None


def _region_text(soup: BeautifulSoup, selector: str) -> str:
    return " ".join(el.get_text(" ", strip=True) for el in soup.select(selector))


def _body_text(soup: BeautifulSoup) -> str:
    body = soup.body or soup
    return body.get_text(" ", strip=True)


def _phone_candidates(text: str) -> list[str]:
    found: list[str] = []
    for pattern in _PHONE_PATTERNS:
        found.extend(m.group(0) for m in pattern.finditer(text))
    return found


def extract_email(soup: BeautifulSoup) -> str | None:
    email = _mailto_email(soup)
    if email:
        return email
    for text in (_region_text(soup, EMAIL_REGIONS), _body_text(soup)):
        email = pick_email(_EMAIL_RE.findall(text))
        if email:
            return email
    return None


def extract_phone(soup: BeautifulSoup) -> str | None:
    phone = _tel_phone(soup)
    if phone:
        return phone
    for text in (_region_text(soup, PHONE_REGIONS), _body_text(soup)):
        phone = pick_phone(_phone_candidates(text))
        if phone:
            return phone
    return None


def extract_contact_info(soup: BeautifulSoup) -> ContactInfo:
    """Email and phone from a parsed page. Explicit mailto:/tel: links beat text scanning."""
    return ContactInfo(email=extract_email(soup), phone=extract_phone(soup))


_SOURCE_MAILTO_RE = re.compile(r"mailto:([a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,})", re.I)
_SOURCE_TEL_RE = re.compile(r"tel:([+\d\s().\-]{7,})", re.I)


def extract_contact_info_from_source(text: str) -> ContactInfo:
    """mailto:/tel: values from raw page text, for markup the parser mangles."""
    text = unquote(text)
    emails = [m.group(1) for m in _SOURCE_MAILTO_RE.finditer(text)]
    phones = [m.group(1) for m in _SOURCE_TEL_RE.finditer(text)]
    return ContactInfo(email=pick_email(emails), phone=pick_phone(phones))
