"""Identifier generation for blocks, branches, options and share links."""
from __future__ import annotations

from random import Random, SystemRandom

_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_-"
_SHORT_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

DEFAULT_ID_LENGTH = 21
DEFAULT_SHORT_CODE_LENGTH = 8


class IdGenerator:
    """Produces unique string ids; seeded instances are deterministic."""

    def __init__(self, seed: int | None = None) -> None:
        self._random: Random = SystemRandom() if seed is None else Random(seed)

    def new_id(self, prefix: str | None = None, length: int = DEFAULT_ID_LENGTH) -> str:
        """Return a url-safe random id, optionally prefixed (``prefix_xxxx``)."""
        if length < 1:
            raise ValueError("Id length must be positive.")
        token = "".join(self._random.choice(_ALPHABET) for _ in range(length))
        return f"{prefix}_{token}" if prefix else token

    def short_code(self, length: int = DEFAULT_SHORT_CODE_LENGTH) -> str:
        """Return an alphanumeric code used in shareable story links."""
        if length < 1:
            raise ValueError("Short code length must be positive.")
        return "".join(self._random.choice(_SHORT_ALPHABET) for _ in range(length))
