"""A single assertion of a model section and the role links built from it."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from rbacmodel.policies import PoliciesValues


class IllegalArgumentError(ValueError):
    """Raised when a role definition or grouping rule is malformed."""


class PolicyOp(Enum):
    """The kind of change applied to a policy."""

    ADD = "add"
    REMOVE = "remove"


class RoleManager(Protocol):
    """What an assertion needs from a role manager."""

    def add_link(self, name1: str, name2: str, domain: Sequence[str]) -> None: ...

    def delete_link(self, name1: str, name2: str, domain: Sequence[str]) -> None: ...


@dataclass
class Assertion:
    """An expression in a section of the model, e.g. ``r = sub, obj, act``."""

    key: str = ""
    value: str = ""
    tokens: list[str] = field(default_factory=list)
    policy: PoliciesValues = field(default_factory=PoliciesValues)
    rm: RoleManager | None = None

    def _role_arity(self) -> int:
        count = self.value.count("_")
        if count < 2:
            raise IllegalArgumentError(
                'the number of "_" in role definition should be at least 2'
            )
        return count

    @staticmethod
    def _split_rule(rule: Sequence[str], arity: int) -> tuple[str, str, list[str]]:
        if len(rule) < arity:
            raise IllegalArgumentError("grouping policy elements do not meet role definition")
        rule = list(rule)[:arity]
        return rule[0], rule[1], rule[2:]

    def build_incremental_role_links(
        self, rm: RoleManager, op: PolicyOp, rules: Iterable[Sequence[str]]
    ) -> None:
        """Add or remove the role links for ``rules`` in ``rm``."""
        self.rm = rm
        arity = self._role_arity()
        for rule in rules:
            name1, name2, domain = self._split_rule(rule, arity)
            if op is PolicyOp.ADD:
                rm.add_link(name1, name2, domain)
            else:
                rm.delete_link(name1, name2, domain)

    def build_role_links(self, rm: RoleManager) -> None:
        """Add a role link to ``rm`` for every rule of this assertion's policy."""
        self.rm = rm
        arity = self._role_arity()
        for rule in self.policy:
            name1, name2, domain = self._split_rule(rule, arity)
            rm.add_link(name1, name2, domain)