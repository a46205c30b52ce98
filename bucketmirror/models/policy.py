"""
Policy values that are either absent, a single scalar, or an ordered
pattern map.
"""
from enum import Enum
from typing import Any, Iterator, Optional, Tuple

from ..utils.errors import ConfigError


class PolicyKind(str, Enum):
    """Tag of a :class:`PolicyValue`."""
    ABSENT = "absent"
    SCALAR = "scalar"
    PATTERN_MAP = "pattern_map"


class PolicyValue:
    """Tagged union of {Absent, Scalar, PatternMap}.

    Pattern maps keep the order the patterns were defined in; resolvers
    walk them front to back and stop at the first match.

    Example:
        >>> PolicyValue.pattern_map([("*.html", "public-read")]).kind
        <PolicyKind.PATTERN_MAP: 'pattern_map'>
    """

    __slots__ = ("kind", "scalar", "patterns")

    def __init__(self, kind: PolicyKind, scalar: Optional[str] = None,
                 patterns: Tuple[Tuple[str, Any], ...] = ()):
        self.kind = kind
        self.scalar = scalar
        self.patterns = patterns

    @classmethod
    def absent(cls) -> 'PolicyValue':
        return cls(PolicyKind.ABSENT)

    @classmethod
    def of_scalar(cls, value: str) -> 'PolicyValue':
        return cls(PolicyKind.SCALAR, scalar=value)

    @classmethod
    def pattern_map(cls, pairs) -> 'PolicyValue':
        return cls(PolicyKind.PATTERN_MAP, patterns=tuple(pairs))

    @classmethod
    def from_raw(cls, raw, name: str = "value") -> 'PolicyValue':
        """Build a policy from a decoded JSON value.

        Args:
            raw: ``None``/empty, a string, or a dict (document order kept)
            name: Option name used in error messages

        Raises:
            ConfigError: If *raw* is neither a string nor a mapping
        """
        if raw is None or raw == "" or raw == {}:
            return cls.absent()
        if isinstance(raw, str):
            return cls.of_scalar(raw)
        if isinstance(raw, dict):
            return cls.pattern_map(raw.items())
        raise ConfigError(
            f"'{name}' must be a string or a mapping, got {type(raw).__name__}"
        )

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.patterns)

    def __eq__(self, other):
        if not isinstance(other, PolicyValue):
            return NotImplemented
        return (self.kind, self.scalar, self.patterns) == (other.kind, other.scalar, other.patterns)

    def __repr__(self):
        if self.kind is PolicyKind.SCALAR:
            return f"PolicyValue.scalar({self.scalar!r})"
        if self.kind is PolicyKind.PATTERN_MAP:
            return f"PolicyValue.pattern_map({list(self.patterns)!r})"
        return "PolicyValue.absent()"
