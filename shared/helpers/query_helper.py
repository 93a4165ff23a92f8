LIKE_ESCAPE = "\\"


def contains_pattern(value: str) -> str:
    """`%value%` for ilike, with the user's own % and _ matched literally (pair with escape=LIKE_ESCAPE)."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
