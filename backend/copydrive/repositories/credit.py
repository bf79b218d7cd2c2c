"""Credit ledger repository.

Credits are derived from token usage:

    credits = round(tokens / tokens_per_credit * model_multiplier, 4)

Every balance change writes a CreditTransaction carrying the pricing snapshot
used for the computation.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from copydrive.db.models import CreditTransaction, ModelMultiplier, WorkspaceCredits
from copydrive.exceptions import InvalidRequestError, NotFoundError
from copydrive.repositories.base import BaseRepository
from copydrive.settings import settings
from copydrive.utils import generate_id, get_logger, get_timestamp_ms

logger = get_logger(__name__)

# Used when the model has no row in model_multipliers
FALLBACK_MULTIPLIERS: dict[str, float] = {
    "google/gemini-2.5-flash": 1.0,
    "openai/gpt-5": 3.0,
}
DEFAULT_MULTIPLIER = 1.0


def calculate_credits(tokens: int, multiplier: float, tokens_per_credit: int) -> float:
    """Credits charged for ``tokens`` at the given multiplier and TPC."""
    return round(tokens / tokens_per_credit * multiplier, 4)


class CreditRepository(BaseRepository[WorkspaceCredits]):
    """Repository for workspace balances and the credit transaction ledger."""

    id_prefix = "wcr"

    def __init__(self):
        super().__init__(WorkspaceCredits)

    calculate_credits = staticmethod(calculate_credits)

    def get_credits(self, db: Session, workspace_id: str) -> WorkspaceCredits | None:
        """Get the credits row of a workspace."""
        stmt = select(WorkspaceCredits).where(WorkspaceCredits.workspace_id == workspace_id)
        return db.execute(stmt).scalar_one_or_none()

    def get_balance(self, db: Session, workspace_id: str) -> float:
        """Current balance, 0.0 when the workspace has no credits row."""
        credits = self.get_credits(db, workspace_id)
        return float(credits.balance) if credits else 0.0

    def get_multiplier(self, db: Session, model_name: str) -> float:
        """Credit multiplier for a model.

        Lookup order: model_multipliers table, built-in fallback, 1.0.
        """
        stmt = select(ModelMultiplier).where(ModelMultiplier.model_name == model_name)
        row = db.execute(stmt).scalar_one_or_none()
        if row is not None:
            return float(row.multiplier)
        return FALLBACK_MULTIPLIERS.get(model_name, DEFAULT_MULTIPLIER)

    def debit_workspace_credits(
        self,
        db: Session,
        workspace_id: str,
        model_name: str,
        tokens_used: int,
        input_tokens: int,
        output_tokens: int,
        generation_id: str | None = None,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """Debit credits for a completed AI call.

        Runs as one transaction: the credits row is locked, the balance and
        ``total_used`` are updated and a debit transaction is written. The
        upstream call has already been paid for, so the balance may go
        negative.

        Returns:
            {"success", "debited", "balance_before", "balance_after"} or
            {"success": False, "error": ...} when the workspace has no credits row
        """
        tpc = settings.tokens_per_credit
        multiplier = self.get_multiplier(db, model_name)
        amount = calculate_credits(tokens_used, multiplier, tpc)

        try:
            stmt = (
                select(WorkspaceCredits)
                .where(WorkspaceCredits.workspace_id == workspace_id)
                .with_for_update()
            )
            credits = db.execute(stmt).scalar_one_or_none()
            if credits is None:
                db.rollback()
                logger.error(f"Debit failed: workspace {workspace_id} has no credits row")
                return {"success": False, "error": "workspace_credits_not_found"}

            now = get_timestamp_ms()
            balance_before = float(credits.balance)
            balance_after = round(balance_before - amount, 4)
            credits.balance = balance_after
            credits.total_used = round(float(credits.total_used or 0.0) + amount, 4)
            credits.updated_at = now

            db.add(
                CreditTransaction(
                    id=generate_id("ctx"),
                    workspace_id=workspace_id,
                    user_id=user_id,
                    transaction_type="debit",
                    amount=amount,
                    balance_before=balance_before,
                    balance_after=balance_after,
                    tokens_used=tokens_used,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    model_used=model_name,
                    multiplier_snapshot=multiplier,
                    tpc_snapshot=tpc,
                    generation_id=generation_id,
                    description=f"AI usage: {model_name} ({tokens_used} tokens)",
                    created_at=now,
                )
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        if balance_after < 0:
            logger.warning(f"Workspace {workspace_id} balance is negative after debit: {balance_after}")
        logger.info(
            f"Debited {amount} credits from workspace {workspace_id} "
            f"(model={model_name}, tokens={tokens_used}, balance {balance_before} -> {balance_after})"
        )
        return {
            "success": True,
            "debited": amount,
            "balance_before": balance_before,
            "balance_after": balance_after,
        }

    def add_workspace_credits(
        self,
        db: Session,
        workspace_id: str,
        amount: float,
        description: str | None = None,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """Add credits to a workspace and write a credit transaction."""
        if amount <= 0:
            raise InvalidRequestError("Credit amount must be positive", fields=["amount"])

        try:
            stmt = (
                select(WorkspaceCredits)
                .where(WorkspaceCredits.workspace_id == workspace_id)
                .with_for_update()
            )
            credits = db.execute(stmt).scalar_one_or_none()
            if credits is None:
                raise NotFoundError(f"Workspace {workspace_id} has no credits account")

            now = get_timestamp_ms()
            balance_before = float(credits.balance)
            balance_after = round(balance_before + amount, 4)
            credits.balance = balance_after
            credits.total_added = round(float(credits.total_added or 0.0) + amount, 4)
            credits.updated_at = now

            db.add(
                CreditTransaction(
                    id=generate_id("ctx"),
                    workspace_id=workspace_id,
                    user_id=user_id,
                    transaction_type="credit",
                    amount=amount,
                    balance_before=balance_before,
                    balance_after=balance_after,
                    description=description or "Credits added",
                    created_at=now,
                )
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Added {amount} credits to workspace {workspace_id} (balance -> {balance_after})")
        return {
            "success": True,
            "added": amount,
            "balance_before": balance_before,
            "balance_after": balance_after,
        }

    def check_workspace_credits(
        self,
        db: Session,
        workspace_id: str,
        model_name: str,
        estimated_tokens: int = 5000,
    ) -> dict[str, Any]:
        """Check whether the balance covers an estimated generation."""
        balance = self.get_balance(db, workspace_id)
        multiplier = self.get_multiplier(db, model_name)
        estimated_debit = calculate_credits(estimated_tokens, multiplier, settings.tokens_per_credit)
        return {
            "has_sufficient_credits": balance >= estimated_debit,
            "balance": balance,
            "estimated_debit": estimated_debit,
        }

    def list_transactions(self, db: Session, workspace_id: str, limit: int = 50) -> list[CreditTransaction]:
        """Most recent ledger entries of a workspace."""
        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.workspace_id == workspace_id)
            .order_by(CreditTransaction.created_at.desc())
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all())


credit_repository = CreditRepository()
