"""A collection of policy rules backed either by a list or by a hash set."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

Rule = tuple[str, ...]


class PoliciesValues:
    """Policy rules kept in insertion order.

    A list-backed collection keeps duplicate rules; a hash-backed one keeps
    each rule once and answers membership in constant time.
    """

    __slots__ = ("_rules", "_hashed")

    def __init__(self, rules: Iterable[Sequence[str]] = (), hashed: bool = False) -> None:
        self._hashed = hashed
        self._rules: list[Rule] | dict[Rule, None]
        self._rules = {} if hashed else []
        for rule in rules:
            self.add(rule)

    @classmethod
    def with_list(cls, rules: Iterable[Sequence[str]] = ()) -> PoliciesValues:
        """Create a list-backed collection."""
        return cls(rules, hashed=False)

    @classmethod
    def with_hashset(cls, rules: Iterable[Sequence[str]] = ()) -> PoliciesValues:
        """Create a hash-backed collection."""
        return cls(rules, hashed=True)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[list[str]]:
        for rule in list(self._rules):
            yield list(rule)

    def __contains__(self, rule: object) -> bool:
        if not isinstance(rule, (list, tuple)):
            return False
        return tuple(rule) in self._rules

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PoliciesValues):
            return NotImplemented
        return list(self._rules) == list(other._rules)

    def __repr__(self) -> str:
        kind = "hashset" if self._hashed else "list"
        return f"PoliciesValues({[list(r) for r in self._rules]!r}, {kind})"

    def is_hash(self) -> bool:
        """Report whether the collection is hash-backed."""
        return self._hashed

    def add(self, rule: Sequence[str]) -> None:
        """Add a rule; a hash-backed collection ignores a rule it already holds."""
        key = tuple(rule)
        if isinstance(self._rules, dict):
            self._rules[key] = None
        else:
            self._rules.append(key)

    def discard(self, rule: Sequence[str]) -> bool:
        """Remove the first occurrence of ``rule``; return whether one was removed."""
        key = tuple(rule)
        if isinstance(self._rules, dict):
            if key in self._rules:
                del self._rules[key]
                return True
            return False
        try:
            self._rules.remove(key)
        except ValueError:
            return False
        return True

    def clear(self) -> None:
        """Remove every rule."""
        self._rules.clear()

    def empty_like(self) -> PoliciesValues:
        """Return a new empty collection of the same kind."""
        return PoliciesValues(hashed=self._hashed)