"""Effects of matched policy rules and the interface that merges them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum


class Effect(Enum):
    """The outcome of one rule, or of a whole request."""

    ALLOW = "allow"
    INDETERMINATE = "indeterminate"
    DENY = "deny"


class Effector(ABC):
    """Merges the results of all matched rules into a single decision."""

    @abstractmethod
    def merge_effects(
        self,
        expr: str,
        effects: Sequence[Effect],
        matches: Sequence[float],
        policy_index: int,
        policy_length: int,
    ) -> tuple[Effect, int]:
        """Merge the matching results collected so far.

        ``expr`` is the policy effect expression, ``effects`` the effects of the
        rules, ``matches`` the matcher results, ``policy_index`` the index of the
        current rule and ``policy_length`` the number of rules.

        Returns the decision (``Effect.INDETERMINATE`` when more rules must be
        examined) and the index of the rule that explains it, or -1.
        """