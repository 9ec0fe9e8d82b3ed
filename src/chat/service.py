"""Chat generation flow: screen, check balance, generate, then record.

Recording (credit debit, history row) happens after the response exists and
never fails the request. Each recording step is reported in ``ChatOutcome``
and failures go to the credits audit log so ledger drift can be reconciled.
"""

import logging
from dataclasses import dataclass, field

from src.chat import repository
from src.chat.schemas import ChatRequest
from src.config.settings import get_settings
from src.credits import ledger
from src.llm.service import generate
from src.moderation.filter import screen
from src.utils.errors import InsufficientCredits, ModerationRejected, NotFound

logger = logging.getLogger(__name__)
audit = logging.getLogger("src.credits.audit")


@dataclass
class BookkeepingStep:
    name: str
    ok: bool
    error: str | None = None


@dataclass
class ChatOutcome:
    response: str
    credits_remaining: int
    provider: str
    entry_id: str | None = None
    steps: list[BookkeepingStep] = field(default_factory=list)

    @property
    def fully_recorded(self) -> bool:
        return all(step.ok for step in self.steps)


async def run_chat(user_id: str, body: ChatRequest) -> ChatOutcome:
    settings = get_settings()
    cost = settings.CHAT_COST

    verdict = screen(body.prompt)
    if not verdict.allowed:
        raise ModerationRejected(verdict.reason)

    balance = ledger.get_balance(user_id)
    if balance < cost:
        raise InsufficientCredits()

    result = await generate(body.prompt, body.options())
    outcome = ChatOutcome(response=result.text, credits_remaining=balance, provider=result.provider)

    try:
        outcome.credits_remaining = ledger.debit(user_id, cost)
        outcome.steps.append(BookkeepingStep("debit", True))
    except Exception as exc:
        outcome.steps.append(BookkeepingStep("debit", False, type(exc).__name__))
        audit.error("Generation delivered without debit: user=%s cost=%d", user_id, cost, exc_info=True)

    try:
        entry = repository.create(user_id, body.prompt, result.text)
        outcome.entry_id = entry["id"]
        outcome.steps.append(BookkeepingStep("history", True))
    except Exception as exc:
        outcome.steps.append(BookkeepingStep("history", False, type(exc).__name__))
        logger.error("Failed to save chat history for user %s", user_id, exc_info=True)

    return outcome


def list_history(user_id: str) -> list[dict]:
    return repository.list_by_user(user_id)


def list_favorites(user_id: str) -> list[dict]:
    return repository.list_favorites(user_id)


def set_favorite(entry_id: str, user_id: str, is_favorite: bool) -> dict:
    entry = repository.set_favorite(entry_id, user_id, is_favorite)
    if not entry:
        raise NotFound("Chat entry not found")
    return entry
