# thethought/social/hashtags.py
import re

from sqlalchemy import String, cast, false

from thethought.core.text import escape_like, LIKE_ESCAPE

HASHTAG_RE = re.compile(r"#([A-Za-z0-9_]+)")


def extract_hashtags(text: str | None) -> list[str]:
    """
    Etiquetas `#palabra` del texto, sin el `#` y en minúsculas.
    Se conservan el orden y los duplicados tal como aparecen.
    """
    if not text:
        return []
    return [m.lower() for m in HASHTAG_RE.findall(text)]


def is_hashtag_token(value: str) -> bool:
    return bool(value) and HASHTAG_RE.fullmatch(f"#{value}") is not None


def hashtag_clause(column, tag: str):
    """
    Pertenencia exacta de `tag` a una columna JSON de hashtags.
    Compara contra el texto serializado (`["foo", "bar"]`) para funcionar
    igual en Postgres y SQLite.
    """
    tag = tag.lower()
    if not is_hashtag_token(tag):
        return false()
    return cast(column, String).like(f'%"{escape_like(tag)}"%', escape=LIKE_ESCAPE)
