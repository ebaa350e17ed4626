# thethought/core/text.py
LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escapa los comodines de LIKE para buscar el texto literal."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def contains_pattern(value: str) -> str:
    return f"%{escape_like(value)}%"
