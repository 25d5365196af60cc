"""The access control model: its sections, assertions and policy rules."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Protocol

from rbacmodel.assertion import Assertion, PolicyOp, RoleManager
from rbacmodel.policies import PoliciesValues

SECTION_NAMES = {
    "r": "request_definition",
    "p": "policy_definition",
    "g": "role_definition",
    "e": "policy_effect",
    "m": "matchers",
}

# Minimal sections a model needs to be valid.
REQUIRED_SECTIONS = ("r", "p", "e", "m")

# Sections are read in this order so that "m" and "r" exist before "p".
_READING_ORDER = ("m", "r", "p", "g", "e")


class MissingRequiredSectionsError(ValueError):
    """Raised when a loaded model lacks one of the required sections."""


class ConfigSource(Protocol):
    """What a model needs from a configuration: values looked up by 'section::key'."""

    def get_string(self, key: str) -> str: ...


def _remove_comments(text: str) -> str:
    pos = text.find("#")
    if pos < 0:
        return text
    return text[:pos].strip()


def _dedupe(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _matches_filter(rule: Sequence[str], field_index: int, field_values: Sequence[str]) -> bool:
    for offset, wanted in enumerate(field_values):
        if wanted == "":
            continue
        pos = field_index + offset
        if pos >= len(rule) or rule[pos] != wanted:
            return False
    return True


class Model:
    """An access control model made of sections of assertions."""

    def __init__(self) -> None:
        self.sections: dict[str, dict[str, Assertion]] = {}

    @classmethod
    def from_config(cls, cfg: ConfigSource) -> Model:
        """Create a model loaded from ``cfg``."""
        model = cls()
        model.load_model_from_config(cfg)
        return model

    def load_model_from_config(self, cfg: ConfigSource) -> None:
        """Load every section from ``cfg``; raise if a required one is missing."""
        for sec in _READING_ORDER:
            self._load_section(cfg, sec)
        missing = [SECTION_NAMES[sec] for sec in REQUIRED_SECTIONS if not self.has_section(sec)]
        if missing:
            raise MissingRequiredSectionsError("missing required sections: " + ",".join(missing))

    def _load_section(self, cfg: ConfigSource, sec: str) -> None:
        i = 1
        while True:
            key = sec if i == 1 else f"{sec}{i}"
            value = cfg.get_string(f"{SECTION_NAMES[sec]}::{key}")
            if not self.add_def(sec, key, value):
                break
            i += 1

    def has_section(self, sec: str) -> bool:
        """Report whether the model has section ``sec``."""
        return sec in self.sections

    def _hashset_usable(self) -> bool:
        request = self.sections.get("r", {}).get("r")
        matcher_assertion = self.sections.get("m", {}).get("m")
        if request is None or matcher_assertion is None:
            return False
        matcher = matcher_assertion.value
        for token in request.tokens:
            name = re.escape(token[2:])
            matcher = re.sub("r." + name + " == p." + name, "", matcher)
        expected = " && " * max(len(request.tokens) - 1, 0)
        return matcher == expected and "g" not in self.sections

    def add_def(self, sec: str, key: str, value: str) -> bool:
        """Add an assertion to the model; return False if ``value`` is empty."""
        if value == "":
            return False
        assertion = Assertion(key=key, value=value)
        if sec in ("r", "p"):
            assertion.tokens = [f"{key}_{token.strip()}" for token in value.split(",")]
        else:
            assertion.value = _remove_comments(value)
        section = self.sections.setdefault(sec, {})
        if sec == "p" and ("m" not in self.sections or "r" not in self.sections):
            return False
        assertion.policy = PoliciesValues(hashed=self._hashset_usable())
        section[key] = assertion
        return True

    def _policy(self, sec: str, p_type: str) -> PoliciesValues:
        return self.sections[sec][p_type].policy

    def build_incremental_role_links(
        self,
        rm: RoleManager,
        op: PolicyOp,
        sec: str,
        p_type: str,
        rules: Iterable[Sequence[str]],
    ) -> None:
        """Apply role link changes for ``rules`` of a grouping assertion."""
        if sec == "g":
            self.sections["g"][p_type].build_incremental_role_links(rm, op, rules)

    def build_role_links(self, rm: RoleManager) -> None:
        """Initialise the role links of every grouping assertion."""
        for assertion in self.sections.get("g", {}).values():
            assertion.build_role_links(rm)

    def clear_policy(self) -> None:
        """Remove every policy and grouping rule."""
        for sec in ("p", "g"):
            for assertion in self.sections.get(sec, {}).values():
                assertion.policy.clear()

    def get_policy(self, sec: str, p_type: str) -> PoliciesValues:
        """Return a copy of all rules of a policy."""
        policy = self._policy(sec, p_type)
        return PoliciesValues(policy, hashed=policy.is_hash())

    def get_filtered_policy(
        self, sec: str, p_type: str, field_index: int, field_values: Sequence[str]
    ) -> PoliciesValues:
        """Return the rules matching the field filters; "" matches any value."""
        return PoliciesValues.with_list(
            rule
            for rule in self._policy(sec, p_type)
            if _matches_filter(rule, field_index, field_values)
        )

    def has_policy(self, sec: str, p_type: str, rule: Sequence[str]) -> bool:
        """Report whether the policy holds ``rule``."""
        return tuple(rule) in self._policy(sec, p_type)

    def add_policy(self, sec: str, p_type: str, rule: Sequence[str]) -> bool:
        """Add ``rule`` unless it is already there; return whether it was added."""
        if self.has_policy(sec, p_type, rule):
            return False
        self._policy(sec, p_type).add(rule)
        return True

    def add_policies(self, sec: str, p_type: str, rules: Iterable[Sequence[str]]) -> bool:
        """Add all ``rules``, or none if any is already there."""
        rules = list(rules)
        if any(self.has_policy(sec, p_type, rule) for rule in rules):
            return False
        policy = self._policy(sec, p_type)
        for rule in rules:
            policy.add(rule)
        return True

    def update_policy(
        self, sec: str, p_type: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> bool:
        """Replace ``old_rule`` by ``new_rule``.

        Returns False if the old rule is absent or the new one already exists;
        in the latter case the old rule has still been removed.
        """
        policy = self._policy(sec, p_type)
        if not policy.discard(old_rule):
            return False
        if self.has_policy(sec, p_type, new_rule):
            return False
        policy.add(new_rule)
        return True

    def update_policies(
        self,
        sec: str,
        p_type: str,
        old_rules: Iterable[Sequence[str]],
        new_rules: Iterable[Sequence[str]],
    ) -> bool:
        """Remove ``old_rules`` one by one, then add ``new_rules`` if none exists yet."""
        policy = self._policy(sec, p_type)
        for old_rule in old_rules:
            if not policy.discard(old_rule):
                return False
        new_rules = list(new_rules)
        if any(self.has_policy(sec, p_type, rule) for rule in new_rules):
            return False
        for rule in new_rules:
            policy.add(rule)
        return True

    def remove_policy(self, sec: str, p_type: str, rule: Sequence[str]) -> bool:
        """Remove ``rule``; return whether it was present."""
        return self._policy(sec, p_type).discard(rule)

    def remove_policies(self, sec: str, p_type: str, rules: Iterable[Sequence[str]]) -> bool:
        """Remove all ``rules``, or none if any of them is absent."""
        rules = list(rules)
        if not all(self.has_policy(sec, p_type, rule) for rule in rules):
            return False
        policy = self._policy(sec, p_type)
        for rule in rules:
            while policy.discard(rule):
                pass
        return True

    def remove_filtered_policy(
        self, sec: str, p_type: str, field_index: int, field_values: Sequence[str]
    ) -> tuple[bool, PoliciesValues]:
        """Remove rules matching the field filters.

        Returns whether any rule was removed, and the removed rules.
        """
        assertion = self.sections[sec][p_type]
        kept = assertion.policy.empty_like()
        removed = PoliciesValues.with_list()
        for rule in assertion.policy:
            if _matches_filter(rule, field_index, field_values):
                removed.add(rule)
            else:
                kept.add(rule)
        assertion.policy = kept
        return len(removed) > 0, removed

    def get_values_for_field_in_policy(self, sec: str, p_type: str, field_index: int) -> list[str]:
        """Return the distinct values of one field over all rules of a policy."""
        return _dedupe(rule[field_index] for rule in self._policy(sec, p_type))

    def get_values_for_field_in_policy_all_types(self, sec: str, field_index: int) -> list[str]:
        """Return the distinct values of one field over all policies of a section."""
        return _dedupe(
            value
            for p_type in self.sections.get(sec, {})
            for value in self.get_values_for_field_in_policy(sec, p_type, field_index)
        )