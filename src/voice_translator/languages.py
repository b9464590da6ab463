"""Language code helpers shared by the router, the synthesis chain and the gateway."""

AUTO = "auto"
ENGLISH = "en"


def normalize_language_code(code: str) -> str:
    """Reduce a provider language label to a lower-case base code.

    Examples:
        >>> normalize_language_code("en-US")
        'en'
        >>> normalize_language_code("zh_CN")
        'zh'
        >>> normalize_language_code(" FR ")
        'fr'
    """
    normalized = code.strip().lower().replace("_", "-")
    return normalized.split("-", 1)[0]


def is_auto(code: str) -> bool:
    return code.strip().lower() == AUTO
