import re

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^a-z0-9\-_]")


def slugify(name: str) -> str:
    """Lower-cases, joins words with '-' and drops anything not URL safe."""
    return _UNSAFE.sub("", _WHITESPACE.sub("-", name.strip().lower()))
