import re

_WORD_BOUNDARY = re.compile(r"[-_.\s]+|(?<=[a-z0-9])(?=[A-Z])")


def nameify(value: str) -> str:
    """``actionButtons`` -> ``Action Buttons``."""
    words = [word for word in _WORD_BOUNDARY.split(value) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def classify(value: str) -> str:
    """``menu-item`` -> ``MenuItem``."""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_BOUNDARY.split(value) if word)

