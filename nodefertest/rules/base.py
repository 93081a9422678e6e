# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules (no_defer_in_test, ...) subclass Rule and implement run().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# Contract: context is FileContext (path, source, tree), config is Config,
# return type is list[Finding].


class Rule(ABC):
    """
    Abstract base class for all static analysis rules.

    Subclasses must define:
    - id: str : unique rule identifier (e.g. "nodefertest")
    - name: str : human-readable rule name
    - doc: str : longer description shown by `nodefertest rules`
    - run(context, config) -> list[Finding] : analyze one file and return findings

    The CLI calls run() once per file; context holds path, source bytes, and AST.
    """

    id: str
    name: str
    doc: str = ""

    @abstractmethod
    def run(self, context: Any, config: Any) -> list[Any]:
        """
        Analyze one file and return any findings.

        Args:
            context: Per-file state (path, source bytes, AST tree). Type: FileContext.
            config: Scanner config (enabled rules, file selection). Type: Config.

        Returns:
            List of Finding objects for each issue found in this file.
            Return an empty list if no issues.
        """
        ...
