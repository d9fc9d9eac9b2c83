"""
Static skill tables loaded from YAML.

The tables are read once per path and shared read-only by every matcher.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml
from loguru import logger

from .text import is_glued, search_term

DEFAULT_TABLES_PATH = Path(__file__).parent / "data" / "skills.yaml"


@dataclass(frozen=True)
class RoleRule:
    """One entry of the ordered role decision list."""

    role: str
    triggers: tuple[str, ...]


@dataclass(frozen=True, eq=False)
class SkillTables:
    """Variation, abbreviation, fuzzy and role tables."""

    variations: Mapping[str, tuple[str, ...]]
    abbreviations: Mapping[str, tuple[str, ...]]
    fuzzy: Mapping[str, tuple[str, ...]]
    role_rules: tuple[RoleRule, ...]
    role_keywords: Mapping[str, tuple[str, ...]]
    profile_categories: Mapping[str, tuple[str, ...]]
    default_role: str = "fullstack"
    _canonical_index: Mapping[str, str] = field(default_factory=dict, repr=False)
    _all_terms: frozenset = field(default_factory=frozenset, repr=False)

    def __post_init__(self):
        index: dict[str, str] = {}
        for canonical, variants in self.variations.items():
            index.setdefault(canonical, canonical)
            for variant in variants:
                index.setdefault(variant, canonical)

        terms = set(index)
        for table in (self.abbreviations, self.fuzzy):
            for key, values in table.items():
                terms.add(key)
                terms.update(values)
        for keywords in list(self.role_keywords.values()) + list(self.profile_categories.values()):
            terms.update(keywords)

        object.__setattr__(self, "_canonical_index", MappingProxyType(index))
        object.__setattr__(self, "_all_terms", frozenset(terms))

    def canonical(self, skill: str) -> str:
        """Canonical name for a skill or one of its listed variants."""
        return self._canonical_index.get(skill, skill)

    def synonyms(self, skill: str) -> tuple[str, ...]:
        """The skill's canonical name and listed variants, skill first."""
        canonical = self.canonical(skill)
        terms = [skill]
        for term in (canonical,) + self.variations.get(canonical, ()):
            if term not in terms:
                terms.append(term)
        return tuple(terms)

    def abbreviations_for(self, skill: str) -> tuple[str, ...]:
        return _merged(self.abbreviations, skill, self.canonical(skill))

    def fuzzy_for(self, skill: str) -> tuple[str, ...]:
        return _merged(self.fuzzy, skill, self.canonical(skill))

    def shadows(self, needle: str, own_terms) -> tuple[str, ...]:
        """
        Known longer terms that contain ``needle`` glued to other characters
        and belong to a different skill, longest first.
        """
        found = [
            term for term in self._all_terms
            if len(term) > len(needle) and term not in own_terms and is_glued(needle, term)
        ]
        return tuple(sorted(found, key=lambda t: (-len(t), t)))

    def locate(self, text: str, term: str, own_terms=()) -> Optional[str]:
        """Search normalized text for a term, masking terms of other skills."""
        return search_term(text, term, self.shadows(term, set(own_terms) | {term}))


def _merged(table: Mapping[str, tuple[str, ...]], *keys: str) -> tuple[str, ...]:
    merged: list[str] = []
    for key in keys:
        for value in table.get(key, ()):
            if value not in merged:
                merged.append(value)
    return tuple(merged)


def _freeze(mapping: Optional[dict]) -> Mapping[str, tuple[str, ...]]:
    frozen = {
        str(key).lower(): tuple(str(v).lower() for v in (values or []))
        for key, values in (mapping or {}).items()
    }
    return MappingProxyType(frozen)


def load_skill_tables(path: Path = DEFAULT_TABLES_PATH) -> SkillTables:
    """Load skill tables from a YAML file."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    role_rules = tuple(
        RoleRule(
            role=str(rule["role"]).lower(),
            triggers=tuple(str(t).lower() for t in rule.get("triggers", [])),
        )
        for rule in data.get("role_detection", [])
    )

    tables = SkillTables(
        variations=_freeze(data.get("variations")),
        abbreviations=_freeze(data.get("abbreviations")),
        fuzzy=_freeze(data.get("fuzzy")),
        role_rules=role_rules,
        role_keywords=_freeze(data.get("role_keywords")),
        profile_categories=_freeze(data.get("profile_categories")),
        default_role=str(data.get("default_role", "fullstack")).lower(),
    )
    logger.debug(
        f"Loaded skill tables from {path}: {len(tables.variations)} skills, "
        f"{len(tables.role_rules)} role rules"
    )
    return tables


@lru_cache
def get_skill_tables(path: Optional[Path] = None) -> SkillTables:
    """Get cached skill tables, from ``path`` or the packaged defaults."""
    return load_skill_tables(path or DEFAULT_TABLES_PATH)
