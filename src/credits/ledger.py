"""Credit ledger: balance changes, referral bonuses and referrer propagation.

Balances only change through the ``adjust_credits`` stored procedure, which
applies the delta in a single UPDATE and refuses to take a balance below
zero. Multi-step operations (credit the earner, credit the referrer, notify
the referrer) are compensated in reverse order when a later step fails, and
the failure is raised as ``LedgerError``.
"""

import logging
from dataclasses import dataclass, field

from postgrest.exceptions import APIError

from src.auth import repository as users
from src.config.settings import get_settings
from src.db.client import get_supabase
from src.db.models import RPC_ADJUST_CREDITS
from src.notifications import repository as notifications
from src.utils.errors import InsufficientCredits, LedgerError, NotFound

audit = logging.getLogger("src.credits.audit")


@dataclass
class LedgerResult:
    user_id: str
    balance: int
    referrer_id: str | None = None
    referrer_balance: int | None = None


@dataclass
class _Applied:
    """Adjustments already committed for the current operation, in order."""

    reason: str
    steps: list[tuple[str, int]] = field(default_factory=list)

    def adjust(self, user_id: str, delta: int) -> int:
        balance = adjust_credits(user_id, delta)
        self.steps.append((user_id, delta))
        return balance

    def compensate(self) -> None:
        for user_id, delta in reversed(self.steps):
            try:
                adjust_credits(user_id, -delta)
            except Exception:
                audit.critical(
                    "Compensation failed: user=%s delta=%d reason=%s; manual reconciliation required",
                    user_id, -delta, self.reason, exc_info=True,
                )
        self.steps.clear()


def adjust_credits(user_id: str, delta: int) -> int:
    """Atomically add ``delta`` to the user's balance and return the new balance."""
    db = get_supabase()
    try:
        result = db.rpc(RPC_ADJUST_CREDITS, {"p_user_id": user_id, "p_delta": delta}).execute()
    except APIError as exc:
        message = exc.message or ""
        if "insufficient_credits" in message:
            raise InsufficientCredits() from exc
        if "user_not_found" in message:
            raise NotFound("User not found") from exc
        raise
    return int(result.data)


def get_balance(user_id: str) -> int:
    user = users.get_user_by_id(user_id)
    if not user:
        raise NotFound("User not found")
    return int(user["credits"])


def debit(user_id: str, amount: int) -> int:
    if amount <= 0:
        raise ValueError("Debit amount must be positive")
    balance = adjust_credits(user_id, -amount)
    audit.info("debit user=%s amount=%d balance=%d", user_id, amount, balance)
    return balance


def earn_credits(user_id: str, amount: int, reason: str) -> LedgerResult:
    """Credit a user and share the same amount with their referrer (one hop only)."""
    if amount <= 0:
        raise ValueError("Earned amount must be positive")

    user = users.get_user_by_id(user_id)
    if not user:
        raise NotFound("User not found")

    applied = _Applied(reason)
    balance = applied.adjust(user_id, amount)
    result = LedgerResult(user_id=user_id, balance=balance)

    referrer_id = user.get("referred_by")
    if referrer_id:
        try:
            result.referrer_balance = applied.adjust(referrer_id, amount)
            result.referrer_id = referrer_id
            notifications.create(
                referrer_id,
                f"You received {amount} credit(s) because {user['username']} earned credits!",
            )
        except Exception as exc:
            audit.error(
                "Referral propagation failed: user=%s referrer=%s amount=%d reason=%s; rolling back",
                user_id, referrer_id, amount, reason, exc_info=True,
            )
            applied.compensate()
            raise LedgerError() from exc

    audit.info(
        "earn user=%s amount=%d reason=%s balance=%d referrer=%s",
        user_id, amount, reason, balance, referrer_id,
    )
    return result


def award_signup_bonus(referrer_id: str, new_user: dict) -> int:
    """Give the referrer the fixed signup bonus and tell them who joined."""
    settings = get_settings()
    bonus = settings.REFERRAL_SIGNUP_BONUS
    applied = _Applied("referral_signup")
    try:
        balance = applied.adjust(referrer_id, bonus)
        notifications.create(
            referrer_id,
            f"{new_user['username']} joined using your referral link. You earned {bonus} credit(s)!",
        )
    except Exception as exc:
        audit.error(
            "Referral signup bonus failed: referrer=%s new_user=%s", referrer_id, new_user["id"], exc_info=True,
        )
        applied.compensate()
        raise LedgerError() from exc

    audit.info("referral_signup referrer=%s new_user=%s bonus=%d balance=%d", referrer_id, new_user["id"], bonus, balance)
    return balance


def referral_count(user_id: str) -> int:
    return users.count_referrals(user_id)
