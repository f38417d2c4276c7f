"""
The rule catalog: every rule clint knows about, and selection of the active subset.

RULES is fixed at import time and never mutated by the driver. Ordering here
is the order rules run in and the order they are listed by the CLI.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from clint.rules.base import Rule
from clint.rules.long_line import LongLineRule
from clint.rules.too_many_parameters import TooManyParametersRule
from clint.rules.unsafe_functions import UnsafeFunctionsRule
from clint.rules.use_after_free import UseAfterFreeRule

logger = logging.getLogger(__name__)

RULES: tuple[Rule, ...] = (
    UseAfterFreeRule(),
    UnsafeFunctionsRule(),
    TooManyParametersRule(),
    LongLineRule(),
)


def all_rule_ids(catalog: Sequence[Rule] = RULES) -> list[str]:
    return [rule.id for rule in catalog]


def get_rule(rule_id: str, catalog: Sequence[Rule] = RULES) -> Optional[Rule]:
    for rule in catalog:
        if rule.id == rule_id:
            return rule
    return None


def select_rules(identifiers: Iterable[str], catalog: Sequence[Rule] = RULES) -> list[Rule]:
    """
    Return the catalog rules whose id is in identifiers, in catalog order.

    Identifiers that match no rule are ignored, so a configuration written for
    a newer or older catalog still works.
    """
    wanted = set(identifiers)
    selected = [rule for rule in catalog if rule.id in wanted]
    unknown = wanted.difference(rule.id for rule in catalog)
    if unknown:
        logger.debug("Ignoring unknown rule identifier(s): %s", ", ".join(sorted(unknown)))
    return selected
