import re
from collections import Counter

from bs4 import BeautifulSoup

MAX_KEYWORDS = 30
MIN_OCCURRENCES = 2

# Section weights: repeated this many times in the bag of words
_WEIGHTS = {"title": 5, "meta": 3, "h1": 4, "h2": 2, "body": 1}

_STOP_WORDS = frozenset("""
the a an and or but in on at to for of with by from as is was are were been be have has had
do does did will would should could may might must can this that these those i you he she it
we they what which who when where why how all each every both few more most other some such no
nor not only own same so than too very s t just don now our your their about into through during
before after above below up down out off over under again further then once here there also any
because until while get make go know take see come think look want give use find tell ask work
seem feel try leave call back read need let put mean keep begin show hear play run move like live
believe hold bring happen write provide sit stand lose pay meet include continue set learn change
lead understand watch follow stop create speak allow add spend grow open walk win offer remember
love consider appear buy wait serve die send expect build stay fall cut reach kill remain suggest
raise pass sell require report decide pull home page site website click view privacy policy terms
conditions copyright rights reserved contact help support login sign register account user menu
search skip content main navigation footer header cookie cookies
""".split())

_NON_WORD_RE = re.compile(r"[^\w\s]")
_TECH_CODE_RE = re.compile(r"^[a-z]\d+$")
_DIGIT_RUN_RE = re.compile(r"\d{3,}")


def _is_keyword(word: str) -> bool:
    if len(word) < 3 or len(word) > 20:
        return False
    if word in _STOP_WORDS or word.isdigit():
        return False
    if "_" in word or _TECH_CODE_RE.match(word) or _DIGIT_RUN_RE.search(word):
        return False
    letters = sum(c.isalpha() for c in word)
    return letters >= len(word) * 0.7


def _tokens(text: str) -> list[str]:
    return _NON_WORD_RE.sub(" ", text.lower()).split()


def extract_keywords(html: str) -> list[str]:
    """Top terms weighted by where they appear on the page."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "nav", "header", "footer", "iframe", "noscript"]):
        tag.decompose()

    def meta(name: str) -> str:
        tag = soup.find("meta", attrs={"name": name})
        return (tag.get("content") or "") if tag else ""

    main = soup.select("main, article, .content, #content")
    body_text = " ".join(el.get_text(" ") for el in main) if main else (
        soup.body.get_text(" ") if soup.body else ""
    )
    sections = {
        "title": soup.title.get_text(" ") if soup.title else "",
        "meta": meta("description") + " " + meta("keywords"),
        "h1": " ".join(h.get_text(" ") for h in soup.find_all("h1")),
        "h2": " ".join(h.get_text(" ") for h in soup.find_all("h2")),
        "body": body_text,
    }

    counts: Counter[str] = Counter()
    for section, text in sections.items():
        for word in _tokens(text):
            if _is_keyword(word):
                counts[word] += _WEIGHTS[section]

    return [word for word, n in counts.most_common() if n >= MIN_OCCURRENCES][:MAX_KEYWORDS]
