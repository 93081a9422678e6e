from __future__ import annotations

"""
Analyzer configuration: which rules are enabled and which files they see.

The only rule today is the defer-in-test check. The analyzer metadata (rule
id, name and documentation) lives on the rule classes themselves; this module
is the single place that decides which of them run.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from nodefertest.rules.base import Rule
from nodefertest.rules.no_defer_in_test import NoDeferInTestRule


@dataclass
class Config:
    """
    Analyzer configuration.

    tests_only limits directory scans to *_test.go files; ignore_dirs of None
    means traversal.DEFAULT_IGNORE_DIRS.
    """

    rules: Sequence[Rule] = field(default_factory=list)
    tests_only: bool = True
    ignore_dirs: Optional[Set[str]] = None


def get_default_config() -> Config:
    """Return the default configuration with all currently implemented rules."""
    rules: List[Rule] = [
        NoDeferInTestRule(),
    ]
    return Config(rules=rules)


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the list of enabled rules from the given config (or default config)."""
    if config is None:
        config = get_default_config()
    return config.rules
