"""Purpose classification rules for usage sites."""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from extraction.models import UsagePurpose
from usage.config import PURPOSE_KEYWORDS


@dataclass(frozen=True)
class PurposeRule:
    """A case-insensitive keyword pattern and the purpose it implies."""

    pattern: Pattern[str]
    purpose: UsagePurpose

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def build_purpose_rules() -> Tuple[PurposeRule, ...]:
    """Compile the ordered rule table.

    Built once per analysis run and handed to the tracer; the tuple is never
    mutated.
    """
    return tuple(
        PurposeRule(
            pattern=re.compile("(" + "|".join(re.escape(k) for k in keywords) + ")", re.IGNORECASE),
            purpose=UsagePurpose(purpose),
        )
        for purpose, keywords in PURPOSE_KEYWORDS
    )


def classify_purpose(
    rules: Tuple[PurposeRule, ...],
    type_name: str,
    method_name: str,
    body: str,
) -> UsagePurpose:
    """First rule matching ``type method body`` wins; OTHER if none does.

    Example:
        >>> rules = build_purpose_rules()
        >>> classify_purpose(rules, "com.x.RedisDbConfig", "init", "").value
        'CACHE_CONFIG'
    """
    combined = f"{type_name} {method_name} {body}"
    for rule in rules:
        if rule.matches(combined):
            return rule.purpose
    return UsagePurpose.OTHER
