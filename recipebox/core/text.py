import re

# Keycap emojis used as step numbers in video descriptions ("1️⃣ Boil water")
_KEYCAP_DIGITS = {f"{d}\ufe0f\u20e3": f"{d}." for d in range(10)}
_KEYCAP_DIGITS.update({f"{d}\u20e3": f"{d}." for d in range(10)})
_KEYCAP_DIGITS["\U0001f51f"] = "10."

STEP_PREFIX_RE = re.compile(r"^\s*step\s*\d+\s*[:.)\-]?\s*", re.IGNORECASE)
SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")


def clean_md(text: str) -> str:
    """
    Sanitize markdown artifacts from text.
    Removes:
    - Leading headers (#, ##)
    - Bold markers (**, __)
    - Leading bullets (-, *, •)
    """
    if not text:
        return ""

    # Remove bolding (**text** -> text)
    text = re.sub(r"(\*\*|__)(.*?)\1", r"\2", text)

    # Remove leading headers (# Title -> Title)
    text = re.sub(r"^\s*#+\s+", "", text)

    # Remove leading bullets (- Item -> Item)
    text = re.sub(r"^\s*[-*•]\s+", "", text)

    return text.strip()


def normalize_bullet(text: str) -> str:
    return re.sub(r"^\s*[-–—•*·]+\s*", "", text or "").strip()


def strip_step_prefix(text: str) -> str:
    """'Step 2: Whisk the eggs' -> 'Whisk the eggs'"""
    return STEP_PREFIX_RE.sub("", text or "").strip()


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def normalize_emojis(text: str) -> str:
    for k, v in _KEYCAP_DIGITS.items():
        text = text.replace(k, v)
    return text


def split_sentences(text: str) -> list[str]:
    return [p.strip() for p in SENTENCE_BREAK_RE.split(text or "") if p.strip()]


def split_instruction_text(text: str) -> list[str]:
    """
    Split a free-form instruction blob into steps.
    Line breaks (blank or not) separate steps first; each remaining
    paragraph is then split where a sentence ends and a capital letter starts.
    """
    steps = []
    for paragraph in re.split(r"\n+", text or ""):
        paragraph = collapse_whitespace(paragraph)
        if paragraph:
            steps.extend(split_sentences(paragraph))
    return steps


def title_case_words(text: str) -> str:
    # str.title() would turn "all-purpose" into "All-Purpose" and "chef's" into "Chef'S"
    return " ".join(w[:1].upper() + w[1:] for w in text.split())


def dedupe_case_insensitive(items: list[str]) -> list[str]:
    seen = set()
    out = []
    for item in items:
        key = collapse_whitespace(item).lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out
