"""
Main Orchestrator for Installment Ledger

This module wires the components into a session and defines the
end-to-end flow for entering a new plan:

    draft → preview → (advisory in the background) → confirm → commit

DESIGN DECISION: The orchestrator enforces the boundaries:
- A blocked customer gets no new plan without explicit confirmation
- The advisory note never delays or fails a commit
- Destructive calls (delete plan, delete payment) are made by the caller
  only after it has confirmed with the user; the session never prompts

There is no global state besides the cached settings. Everything a caller
needs hangs off one LedgerSession.
"""

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from installment_ledger.agents import AdvisoryAgent, PlanSummary
from installment_ledger.config import Settings, get_settings
from installment_ledger.ledger import (
    CustomerRegistry,
    PlanCreation,
    PlanDraft,
    PlanManager,
    PlanRejectedError,
    TreasuryLedger,
)
from installment_ledger.models.records import Customer
from installment_ledger.models.reports import DashboardStats, PlanPreview
from installment_ledger.observability import (
    configure_logging,
    create_correlation_id,
    get_logger,
)
from installment_ledger.queries import dashboard_stats
from installment_ledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStore,
)


logger = get_logger(__name__)


BLOCKED_CUSTOMER_WARNING = (
    "⚠️ This customer is classified as BLOCKED. "
    "Confirm explicitly to start a new plan anyway."
)


@dataclass
class LedgerSession:
    """The components of one bookkeeping session over one record store."""

    store: RecordStore
    customers: CustomerRegistry
    treasury: TreasuryLedger
    plans: PlanManager
    settings: Settings

    def dashboard(self) -> DashboardStats:
        return dashboard_stats(
            self.plans.list_plans(),
            recent_limit=self.settings.app.recent_plans_limit,
        )

    def new_draft(self, **fields: Any) -> PlanDraft:
        """A plan draft pre-filled with the configured entry-form defaults."""
        return PlanDraft.from_settings(self.settings.app, **fields)

    def new_plan(self, draft: PlanDraft, agent: Optional[AdvisoryAgent] = None) -> "NewPlanFlow":
        return NewPlanFlow(self, draft, agent=agent)


def _store_from_settings(settings: Settings) -> RecordStore:
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryRecordStore()
    if storage.backend == "google_sheets":
        return GoogleSheetsRecordStore(GoogleSheetsClient(settings.google_sheets))
    return JsonFileRecordStore(storage.data_dir)


def create_session(store: Optional[RecordStore] = None) -> LedgerSession:
    """
    Build a session.

    Without an explicit store, the backend is chosen by STORAGE_BACKEND.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    if store is None:
        store = _store_from_settings(settings)
    customers = CustomerRegistry(store)
    treasury = TreasuryLedger(store)
    plans = PlanManager(store, treasury, customers)

    logger.info("session_created", store=type(store).__name__)
    return LedgerSession(
        store=store,
        customers=customers,
        treasury=treasury,
        plans=plans,
        settings=settings,
    )


class NewPlanFlow:
    """
    Orchestrates entering a new installment plan.

    Flow:
    1. Preview → calculator figures for the current draft
    2. Advise → optional, runs as a background task
    3. Commit → blocked-customer check, then create the plan

    The advisory is attached to the plan only if it has already finished
    when commit runs. A still-pending advisory is cancelled, and after
    commit the flow no longer holds the task, so a late result is dropped.
    """

    def __init__(
        self,
        session: LedgerSession,
        draft: PlanDraft,
        agent: Optional[AdvisoryAgent] = None,
    ):
        self._session = session
        self.draft = draft
        self._agent = agent or AdvisoryAgent()
        self._advisory_task: Optional[asyncio.Task] = None
        self._log = logger.bind(correlation_id=str(create_correlation_id()))

    def preview(self) -> PlanPreview:
        return self.draft.preview()

    def summary(self) -> PlanSummary:
        return PlanSummary.from_draft(self.draft, self.preview())

    def start_advisory(self) -> asyncio.Task:
        """
        Schedule the advisory call on the running event loop.

        Starting again replaces (and cancels) any earlier request.
        """
        if self._advisory_task is not None and not self._advisory_task.done():
            self._advisory_task.cancel()

        loop = asyncio.get_running_loop()
        self._advisory_task = loop.create_task(
            self._agent.generate_advisory(self.summary())
        )
        self._log.info("advisory_requested", product=self.draft.product_name)
        return self._advisory_task

    async def advise(self) -> str:
        """Run the advisory (starting it if needed) and wait for the text."""
        task = self._advisory_task or self.start_advisory()
        return await task

    @property
    def advisory_pending(self) -> bool:
        return self._advisory_task is not None and not self._advisory_task.done()

    def _take_advisory(self) -> Optional[str]:
        task, self._advisory_task = self._advisory_task, None
        if task is None:
            return None
        if not task.done():
            task.cancel()
            self._log.info("advisory_dropped")
            return None
        if task.cancelled():
            return None
        return task.result()

    def commit(
        self,
        customer: Customer,
        confirm_blocked: bool = False,
        on: Optional[date] = None,
    ) -> tuple[Optional[PlanCreation], str]:
        """
        Create the plan.

        Returns:
            (creation, message). creation is None when the customer is
            blocked and not confirmed, or when the plan was rejected; the
            message then says why.
        """
        if self._session.customers.requires_confirmation(customer) and not confirm_blocked:
            self._log.warning("blocked_customer_unconfirmed", customer_id=customer.id)
            return None, BLOCKED_CUSTOMER_WARNING

        ai_analysis = self._take_advisory()

        try:
            creation = self._session.plans.create_plan(
                self.draft,
                customer,
                ai_analysis=ai_analysis,
                on=on,
            )
        except PlanRejectedError as e:
            return None, f"❌ {e.reason}"

        self._log.info(
            "plan_committed",
            plan_id=creation.plan.id,
            with_advisory=ai_analysis is not None,
        )

        message = "✅ Plan saved."
        if creation.warnings:
            message += " Please double-check: " + "; ".join(creation.warnings)
        return creation, message
