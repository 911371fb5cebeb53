"""Classification result produced fresh for every evaluation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Classification:
    """
    The situation category and the keywords that selected it.

    ``rule_index`` is the position of the winning rule in the policy's
    ordered list; it is None when the policy default was used.
    """
    category: str
    matched_keywords: tuple[str, ...] = ()
    rule_index: Optional[int] = None

    @property
    def is_default(self) -> bool:
        return self.rule_index is None
