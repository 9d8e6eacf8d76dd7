def to_uppercase(value: str | None) -> str | None:
    """
    Uppercase a settings value, leaving None untouched.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Lowercase a settings value, leaving None untouched.
    """
    if value is None:
        return None
    return value.strip().lower()
