"""
Paste identifier generation and validation.

Ids are short strings over the ASCII alphanumeric alphabet. Every id coming
from a client must pass IdValidator before it is used to build a path.
"""
import secrets
import string

ALPHABET = string.ascii_letters + string.digits
_ALPHABET_SET = frozenset(ALPHABET)


class IdGenerator:
    """Generates random fixed-length alphanumeric ids."""

    def __init__(self, length: int):
        if length < 1:
            raise ValueError("id length must be positive")
        self.length = length

    def generate(self) -> str:
        """Return a fresh id drawn from a cryptographically secure source."""
        return "".join(secrets.choice(ALPHABET) for _ in range(self.length))


class IdValidator:
    """Checks that an externally supplied id is well-formed."""

    def __init__(self, length: int):
        if length < 1:
            raise ValueError("id length must be positive")
        self.length = length

    def validate(self, candidate: str) -> bool:
        # Pure string check, never touches the filesystem.
        if not isinstance(candidate, str) or len(candidate) != self.length:
            return False
        return all(ch in _ALPHABET_SET for ch in candidate)
