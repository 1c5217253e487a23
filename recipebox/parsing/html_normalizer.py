"""
HTML -> plain text for the downstream parsers.

Paragraph, heading and list boundaries survive as newlines and list items
come out as "- " lines, which the heuristic parser keys off.
"""
import re

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, ProcessingInstruction

# Dropped together with everything inside them
DROP_TAGS = [
    "head", "script", "style", "noscript", "template", "nav", "header",
    "footer", "aside", "iframe", "svg", "form", "button", "select",
]

BLOCK_TAGS = [
    "p", "div", "section", "article", "main", "h1", "h2", "h3", "h4", "h5",
    "h6", "td", "th", "tr", "ul", "ol", "table", "blockquote", "pre", "dt",
    "dd", "dl", "figcaption", "figure", "hr",
]

# Whole class/id tokens of ad, sidebar and widget containers
NOISE_TOKENS = {
    "ad", "ads", "advert", "advertisement", "advertising", "sponsored",
    "promo", "sidebar", "newsletter", "popup", "modal", "cookie-banner",
    "cookie-notice", "social", "share", "sharing", "comments", "comment-list",
}
# Token prefixes of the same ("ad-slot-3", "sidebar-widget", "social_share")
NOISE_PREFIXES = (
    "ad-", "ads-", "advert", "sponsored", "promo-", "sidebar", "newsletter",
    "popup", "cookie-", "social-", "share-", "sharing-", "comments-",
)
# CMS taxonomy classes on the post itself ("tag-cookies", "category-desserts")
TAXONOMY_PREFIXES = ("tag-", "category-", "post-", "type-", "format-")

# Content wrappers; never dropped as noise, nor is anything holding one
CONTENT_TAGS = ["article", "main"]

_HSPACE_RE = re.compile(r"[ \t\f\v\xa0\u200b]+")


def _is_noise(tag) -> bool:
    tokens = list(tag.get("class") or [])
    if tag.get("id"):
        tokens.append(tag["id"])
    for token in tokens:
        token = str(token).lower().replace("_", "-")
        if token.startswith(TAXONOMY_PREFIXES):
            continue
        if token in NOISE_TOKENS or token.startswith(NOISE_PREFIXES):
            return True
    return False


def _collapse_lines(text: str) -> str:
    lines = [_HSPACE_RE.sub(" ", line).strip() for line in text.split("\n")]

    # "- " emitted before a block-level child ends up alone on its line
    merged = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line == "-":
            j = i + 1
            while j < len(lines) and not lines[j]:
                j += 1
            if j < len(lines):
                merged.append(f"- {lines[j]}")
                i = j + 1
                continue
        merged.append(line)
        i += 1

    out = []
    for line in merged:
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    while out and not out[-1]:
        out.pop()
    return "\n".join(out)


def normalize_html(html: str) -> str:
    """
    Strip non-content markup and return text with one item per line.
    Never raises; anything the parser can't make sense of comes back as plain text.
    Running it on its own output returns the same text.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for node in soup.find_all(string=lambda s: isinstance(s, (Comment, Declaration, Doctype, ProcessingInstruction))):
        node.extract()

    for tag in soup.find_all(DROP_TAGS):
        tag.decompose()

    protected = set()
    for content in soup.find_all(CONTENT_TAGS):
        protected.add(id(content))
        protected.update(id(parent) for parent in content.parents)

    for tag in soup.find_all(True):
        if tag.decomposed or tag.name in ("html", "body") or id(tag) in protected:
            continue
        if _is_noise(tag):
            tag.decompose()

    for br in soup.find_all("br"):
        br.replace_with("\n")

    for li in soup.find_all("li"):
        li.insert_before("\n- ")
        li.insert_after("\n")

    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    text = soup.get_text()
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _collapse_lines(text)
