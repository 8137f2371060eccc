"""
Value Composition

Describes the shape of a credential value (length, fixed prefix and
allowed ASCII character classes) and checks values against it.
"""

import string
from dataclasses import dataclass, field
from typing import Optional


_CLASSES = {
    'uppercase': frozenset(string.ascii_uppercase),
    'lowercase': frozenset(string.ascii_lowercase),
    'digits': frozenset(string.digits),
    'symbols': frozenset(string.punctuation),
}


@dataclass(frozen=True)
class Charset:
    """Set of enabled ASCII character classes."""

    uppercase: bool = False
    lowercase: bool = False
    digits: bool = False
    symbols: bool = False

    def enabled(self) -> frozenset:
        """Return the union of all enabled character classes."""
        allowed = frozenset()
        for name, chars in _CLASSES.items():
            if getattr(self, name):
                allowed |= chars
        return allowed

    def is_empty(self) -> bool:
        return not (self.uppercase or self.lowercase or self.digits or self.symbols)

    def allows(self, char: str) -> bool:
        return char in self.enabled()


@dataclass(frozen=True)
class CompositionRule:
    """Declared shape of a credential value.

    A value satisfies the rule when its length equals ``length`` (if set),
    it starts with ``prefix`` (if set) and every character after the prefix
    belongs to an enabled class of ``charset``. An empty charset places no
    constraint on characters.
    """

    length: Optional[int] = None
    prefix: Optional[str] = None
    charset: Charset = field(default_factory=Charset)

    def validate(self, value: str) -> bool:
        return validate(value, self)

    def explain(self, value: str) -> Optional[str]:
        """Return why ``value`` fails the rule, or None when it satisfies it.

        The returned reason never contains the value itself.
        """
        if self.length is not None and len(value) != self.length:
            return f"expected length {self.length}, got {len(value)}"

        body = value
        if self.prefix:
            if not value.startswith(self.prefix):
                return f"expected prefix '{self.prefix}'"
            body = value[len(self.prefix):]

        if not self.charset.is_empty():
            allowed = self.charset.enabled()
            for position, char in enumerate(body, start=len(value) - len(body)):
                if char not in allowed:
                    return f"character at position {position} not in allowed charset"

        return None


def validate(value: str, rule: CompositionRule) -> bool:
    """
    Check a value against a composition rule.

    Args:
        value: Candidate credential value
        rule: Composition rule to check against

    Returns:
        True if the value satisfies every constraint of the rule
    """
    return rule.explain(value) is None
