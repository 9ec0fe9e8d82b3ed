"""Static prompt screen applied before any credit check or generation call."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DENYLIST = [
    "alcohol", "pork", "gambling", "interest", "usury",
    "adultery", "fornication", "idol", "shirk",
    "riba", "intoxication", "wine", "beer", "drugs",
    "haram", "dating", "betting", "lottery",
]

SUSPICIOUS_PATTERNS = [
    (re.compile(r"(music|song|dance).*festival", re.IGNORECASE | re.DOTALL),
     "Content involving music festivals may not be appropriate."),
    (re.compile(r"dating.*relationship", re.IGNORECASE | re.DOTALL),
     "Content about dating relationships is not appropriate."),
    (re.compile(r"(interest|loan).*bank", re.IGNORECASE | re.DOTALL),
     "Content about banking interest (riba) is not permissible."),
]

REPHRASE_HINT = "Please modify your request to align with Islamic principles."


@dataclass(frozen=True)
class ScreenResult:
    allowed: bool
    reason: str | None = None


def screen(prompt: str) -> ScreenResult:
    """Return the first denylist term or topic pattern the prompt matches, if any."""
    lowered = prompt.lower()

    for term in DENYLIST:
        if term in lowered:
            logger.info("Prompt rejected by denylist term %r", term)
            return ScreenResult(
                allowed=False,
                reason=(
                    f'The prompt contains the haram term "{term}". This goes against Islamic principles. '
                    "Please rephrase your request to avoid non-halal topics."
                ),
            )

    for pattern, message in SUSPICIOUS_PATTERNS:
        if pattern.search(prompt):
            logger.info("Prompt rejected by pattern %s", pattern.pattern)
            return ScreenResult(allowed=False, reason=f"{message} {REPHRASE_HINT}")

    return ScreenResult(allowed=True)
