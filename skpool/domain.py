"""Defines the core data structures for the pool manager."""

from typing import Dict, NamedTuple

Pool = Dict[str, str]
"""Mapping of account email to session key."""

PREVIEW_HEAD = 8
PREVIEW_TAIL = 4
PREVIEW_MASK = '***'


class PoolEntry(NamedTuple):
    """An account in the pool."""

    email: str
    sk: str


class AdminEntry(NamedTuple):
    """An account as shown to administrators, with the SK redacted."""

    email: str
    sk_preview: str


def redact(sk: str) -> str:
    """
    Produce a preview of a session key that does not reveal it.

    Keys longer than the preview window keep their first and last few
    characters; shorter keys are masked completely.
    """
    if len(sk) <= PREVIEW_HEAD + PREVIEW_TAIL:
        return PREVIEW_MASK
    return f'{sk[:PREVIEW_HEAD]}...{sk[-PREVIEW_TAIL:]}'


def is_usable(sk: object) -> bool:
    """An SK can be handed to the issuer only if it is a non-empty string."""
    return isinstance(sk, str) and bool(sk.strip())
