"""Приведение возрастных групп к каноническим меткам: "12U", "Girls 8U", "HS", "Open"."""
import re

GIRLS_RE = re.compile(r"\bgirls?\b", re.IGNORECASE)
# "12u", "12 u", "12 under", "12 and under"; голое "12" тоже считается
UNDER_RE = re.compile(r"\b(6|8|10|12|14)(?:\s*(?:and\s*under|under|u)\b|\b)")
HIGH_SCHOOL_RE = re.compile(r"\b(?:high\s*school|hs)\b")
OPEN_RE = re.compile(r"\bopen\b")
WORD_START_RE = re.compile(r"\b\w")
WHITESPACE_RE = re.compile(r"\s+")

GIRLS_PREFIX = "Girls "


def normalize_age_group(raw: str | None) -> str:
    """Канонизировать произвольную строку возрастной группы.

    Функция чистая и идемпотентная: normalize(normalize(x)) == normalize(x),
    поэтому её можно вызывать и при записи, и при сравнении.
    """
    s = (raw or "").strip()

    girls = bool(GIRLS_RE.search(s))
    s = GIRLS_RE.sub("", s)

    s = s.replace("&", "and")
    s = WHITESPACE_RE.sub(" ", s).strip().lower()

    prefix = GIRLS_PREFIX if girls else ""

    m = UNDER_RE.search(s)
    if m:
        return f"{prefix}{m.group(1)}U"
    if HIGH_SCHOOL_RE.search(s):
        return f"{prefix}HS"
    if OPEN_RE.search(s):
        return f"{prefix}Open"

    tidy = WORD_START_RE.sub(lambda c: c.group(0).upper(), s)
    return f"{prefix}{tidy}".strip()
