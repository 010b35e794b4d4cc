"""
Main Orchestrator for pocketledger

This module ties together all the components and defines the
application service every front end talks to:
1. Entry (form / quick-entry text / bulk paste / shortcut -> transaction)
2. Maintenance (edit, delete, clear, shortcuts, settings)
3. Views (period summary, daily food budget, AI advice)

DESIGN DECISION: The Ledger owns the ONE authoritative transaction list.
- Every mutation is validated, then persisted, then audited
- Nothing derived is stored: views are recomputed on every call
- Network collaborators only ever hear about a transaction AFTER it has
  been committed, and their failures never reach the caller

The core is synchronous. Only notifications and advice are async.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from pocketledger.agents import AdviceResponse, FinancialAdvisor
from pocketledger.audit import AuditLogger, get_logger
from pocketledger.config import LedgerSettings, Settings, get_settings
from pocketledger.models.audit import AuditEvent, AuditEventBuilder
from pocketledger.models.category import default_category
from pocketledger.models.stats import (
    BudgetBand,
    CategoryShare,
    CumulativeFoodStats,
    DailyFoodGroup,
    DailyFoodStats,
    DateRange,
    TimeFilter,
    TodayActivity,
    Totals,
)
from pocketledger.models.transaction import (
    Currency,
    Shortcut,
    Transaction,
    TransactionType,
    serialize_amount,
)
from pocketledger.parsing import LineParser
from pocketledger.services.notifications import NotificationDispatcher, TransactionAdded
from pocketledger.services.sheets import GoogleSheetsClient, GoogleSheetsSync
from pocketledger.services.storage import (
    TRANSACTIONS_KEY,
    JsonFileStore,
    KeyValueStore,
    LedgerRepository,
    NotFoundError,
)
from pocketledger.stats import (
    budget_band,
    category_breakdown,
    cumulative_food_stats,
    daily_food_history,
    daily_food_stats,
    filter_by_period,
    today_activity,
    totals,
)
from pocketledger.validation import EntryValidator, InvalidEntryError


logger = get_logger(__name__)

Number = Union[Decimal, int, float, str]


class LedgerSummary(BaseModel):
    """Dashboard numbers for one period."""
    model_config = ConfigDict(frozen=True)

    period: TimeFilter
    transactions: tuple[Transaction, ...]
    totals: Totals
    breakdown: tuple[CategoryShare, ...]


class FoodBudgetView(BaseModel):
    """Everything the daily food tracker shows."""
    model_config = ConfigDict(frozen=True)

    limit: Decimal
    today: DailyFoodStats
    band: BudgetBand
    activity: TodayActivity
    history: tuple[DailyFoodGroup, ...]
    cumulative: CumulativeFoodStats

    @property
    def has_limit(self) -> bool:
        return self.limit > 0


class Ledger:
    """
    The application service.

    Flow for every new transaction:
    1. Validate -> reject with InvalidEntryError, nothing stored
    2. Prepend to the list and persist the whole list
    3. Audit
    4. Dispatch a TransactionAdded notification (fire-and-forget)
    """

    def __init__(
        self,
        repository: LedgerRepository,
        settings: Optional[LedgerSettings] = None,
        parser: Optional[LineParser] = None,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        advisor: Optional[FinancialAdvisor] = None,
    ):
        self._repository = repository
        self._settings = settings or get_settings().ledger
        self._parser = parser or LineParser(separator=self._settings.entry_separator)
        self._validator = validator or EntryValidator()
        self._audit_logger = audit_logger
        self._dispatcher = dispatcher or NotificationDispatcher(audit_logger=audit_logger)
        self._advisor = advisor

        # Load persisted state
        self._transactions: list[Transaction] = repository.load_transactions()
        self._shortcuts: list[Shortcut] = repository.load_shortcuts()
        self._daily_limit: Decimal = repository.load_daily_limit()
        self._currency: Currency = repository.load_currency()

        logger.info(
            "ledger_loaded",
            transactions=len(self._transactions),
            shortcuts=len(self._shortcuts),
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """All transactions, most recently added first."""
        return tuple(self._transactions)

    @property
    def shortcuts(self) -> tuple[Shortcut, ...]:
        return tuple(self._shortcuts)

    @property
    def daily_limit(self) -> Decimal:
        return self._daily_limit

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def parser(self) -> LineParser:
        return self._parser

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def _find_shortcut(self, shortcut_id: str) -> Shortcut:
        for shortcut in self._shortcuts:
            if shortcut.id == shortcut_id:
                return shortcut
        raise NotFoundError(f"Shortcut not found: {shortcut_id}")

    def _require_amount(self, amount: Optional[Number]) -> Decimal:
        try:
            return self._validator.require_amount(amount)
        except InvalidEntryError as e:
            self._audit(AuditEventBuilder.entry_rejected(e.field or "amount", str(e)))
            raise

    def _commit(self, new: list[Transaction], source: str) -> None:
        """Persist new transactions (prepended), then audit and notify."""
        updated = list(reversed(new)) + self._transactions
        self._repository.save_transactions(updated)
        self._transactions = updated

        for transaction in new:
            self._audit(AuditEventBuilder.transaction_added(
                transaction_id=transaction.id,
                amount=str(serialize_amount(transaction.amount)),
                category=transaction.category,
                source=source,
            ))
            self._dispatcher.dispatch(
                TransactionAdded.from_transaction(transaction, self._currency)
            )

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        amount: Number,
        transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
        category: Optional[str] = None,
        note: str = "",
        date: Optional[datetime] = None,
        source: str = "form",
    ) -> Transaction:
        """
        Record one transaction.

        Raises:
            InvalidEntryError: If the amount is not a positive number
        """
        transaction_type = TransactionType(transaction_type)
        value = self._require_amount(amount)

        transaction = Transaction(
            amount=value,
            type=transaction_type,
            category=category or default_category(transaction_type),
            note=note or "",
            date=date or datetime.now(),
        )
        self._commit([transaction], source)
        return transaction

    def add_from_text(
        self,
        text: str,
        transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
        category: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        """
        Record one quick-entry line.

        Returns None (and stores nothing) when the line has no amount yet.
        category is the caller's current selection, kept when nothing is
        inferred from the note.
        """
        transaction_type = TransactionType(transaction_type)
        parsed = self._parser.parse_line(text, transaction_type)
        if not parsed.has_amount:
            return None

        return self.add_transaction(
            amount=parsed.amount,
            transaction_type=transaction_type,
            category=parsed.resolve_category(transaction_type, category),
            note=parsed.note,
            date=date,
            source="quick_entry",
        )

    def add_bulk(
        self,
        text: str,
        transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
        category: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> list[Transaction]:
        """
        Record every line of a pasted block that carries an amount.

        Lines without a positive amount are skipped; the result lists the
        added transactions in line order.
        """
        transaction_type = TransactionType(transaction_type)
        drafts = self._parser.parse_bulk(text, transaction_type)
        when = date or datetime.now()

        added = [
            Transaction(
                amount=draft.amount,
                type=transaction_type,
                category=draft.resolve_category(transaction_type, category),
                note=draft.note,
                date=when,
            )
            for draft in drafts
        ]

        non_blank = sum(1 for line in (text or "").splitlines() if line.strip())
        if added:
            self._commit(added, source="bulk")
        self._audit(AuditEventBuilder.bulk_entry_submitted(
            submitted=len(added),
            skipped=non_blank - len(added),
        ))
        return added

    def use_shortcut(self, shortcut_id: str, now: Optional[datetime] = None) -> Transaction:
        """
        Record a transaction from a saved shortcut, dated now.

        Raises:
            NotFoundError: If no shortcut has this id
        """
        shortcut = self._find_shortcut(shortcut_id)
        transaction = shortcut.to_transaction(now)
        self._commit([transaction], source="shortcut")
        self._audit(AuditEventBuilder.shortcut_used(shortcut.id, transaction.id))
        return transaction

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def update_transaction(self, transaction: Transaction) -> Transaction:
        """
        Replace the stored transaction with the same id.

        Raises:
            InvalidEntryError: If the amount is not positive
            NotFoundError: If no transaction has this id
        """
        # model_copy(update=...) skips validation, so re-check the amount
        self._require_amount(transaction.amount)

        for index, existing in enumerate(self._transactions):
            if existing.id == transaction.id:
                break
        else:
            raise NotFoundError(f"Transaction not found: {transaction.id}")

        updated = list(self._transactions)
        updated[index] = transaction
        self._repository.save_transactions(updated)
        self._transactions = updated

        self._audit(AuditEventBuilder.transaction_updated(
            transaction.id,
            str(serialize_amount(transaction.amount)),
        ))
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction; False if the id is unknown."""
        remaining = [t for t in self._transactions if t.id != transaction_id]
        if len(remaining) == len(self._transactions):
            return False

        self._repository.save_transactions(remaining)
        self._transactions = remaining
        self._audit(AuditEventBuilder.transaction_deleted(transaction_id))
        return True

    def clear_transactions(self) -> int:
        """Remove every transaction. Returns how many were removed."""
        count = len(self._transactions)
        self._repository.clear(TRANSACTIONS_KEY)
        self._transactions = []
        self._audit(AuditEventBuilder.transactions_cleared(count))
        return count

    def add_shortcut(
        self,
        name: str,
        amount: Number,
        category: Optional[str] = None,
        transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
    ) -> Shortcut:
        """
        Save a new quick-entry template.

        Raises:
            InvalidEntryError: If the name is blank or the amount not positive
        """
        try:
            value = self._validator.require_shortcut(name, amount, transaction_type)
        except InvalidEntryError as e:
            self._audit(AuditEventBuilder.entry_rejected(e.field or "shortcut", str(e)))
            raise

        transaction_type = TransactionType(transaction_type)
        shortcut = Shortcut(
            name=name,
            amount=value,
            category=category or default_category(transaction_type),
            type=transaction_type,
        )
        self.save_shortcuts(self._shortcuts + [shortcut])
        return shortcut

    def delete_shortcut(self, shortcut_id: str) -> bool:
        remaining = [s for s in self._shortcuts if s.id != shortcut_id]
        if len(remaining) == len(self._shortcuts):
            return False

        self._repository.save_shortcuts(remaining)
        self._shortcuts = remaining
        self._audit(AuditEventBuilder.shortcut_deleted(shortcut_id))
        return True

    def save_shortcuts(self, shortcuts: Iterable[Shortcut]) -> None:
        """Replace the whole shortcut list."""
        shortcuts = list(shortcuts)
        known = {s.id for s in self._shortcuts}

        self._repository.save_shortcuts(shortcuts)
        self._shortcuts = shortcuts

        for shortcut in shortcuts:
            if shortcut.id not in known:
                self._audit(AuditEventBuilder.shortcut_saved(shortcut.id, shortcut.name))

    def set_daily_limit(self, value: Number) -> Decimal:
        """
        Change the daily food limit (0 = unset).

        Raises:
            InvalidEntryError: If the value is negative or not a number.
                The previous limit is kept.
        """
        result = self._validator.validate_daily_limit(value)
        if not result.is_valid:
            reason = result.first_error.message
            self._audit(AuditEventBuilder.daily_limit_rejected(str(value), reason))
            raise InvalidEntryError(reason, field="daily_limit")

        old = self._daily_limit
        self._repository.save_daily_limit(result.value)
        self._daily_limit = result.value

        self._audit(AuditEventBuilder.daily_limit_updated(
            str(serialize_amount(old)),
            str(serialize_amount(result.value)),
        ))
        return result.value

    def set_currency(self, value: Union[Currency, str]) -> Currency:
        try:
            currency = Currency(value)
        except ValueError:
            raise InvalidEntryError(f"Unknown currency: {value!r}", field="currency")

        self._repository.save_currency(currency)
        self._currency = currency
        self._audit(AuditEventBuilder.currency_updated(currency.value))
        return currency

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def summary(
        self,
        kind: Union[TimeFilter, str] = TimeFilter.ALL,
        date_range: Optional[DateRange] = None,
        now: Optional[datetime] = None,
    ) -> LedgerSummary:
        """Totals and expense breakdown for the selected period."""
        kind = TimeFilter(kind)
        selected = filter_by_period(
            self._transactions,
            kind,
            date_range=date_range,
            now=now,
            week_start=self._settings.week_start,
        )
        return LedgerSummary(
            period=kind,
            transactions=tuple(selected),
            totals=totals(selected),
            breakdown=tuple(category_breakdown(selected)),
        )

    def food_budget(self, today: Optional[date] = None) -> FoodBudgetView:
        """Daily food tracker over ALL transactions, whatever the period filter."""
        today = today or date.today()
        stats = daily_food_stats(self._transactions, self._daily_limit, today=today)
        return FoodBudgetView(
            limit=self._daily_limit,
            today=stats,
            band=budget_band(stats.percentage),
            activity=today_activity(self._transactions, today=today),
            history=tuple(daily_food_history(self._transactions, self._daily_limit)),
            cumulative=cumulative_food_stats(self._transactions, self._daily_limit),
        )

    async def request_advice(self) -> AdviceResponse:
        """Ask the AI advisor about recent spending. Never raises."""
        if self._advisor is None:
            self._advisor = FinancialAdvisor(window=self._settings.advice_window)

        response = await self._advisor.get_advice(self._transactions)
        self._audit(AuditEventBuilder.advice_generated(
            source=response.source,
            transaction_count=response.transaction_count,
        ))
        return response

    def close(self) -> None:
        """Give pending notifications a chance to finish, then stop workers."""
        self._dispatcher.close(timeout=self._settings.notify_timeout_seconds)


def create_ledger(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    use_sync: bool = True,
) -> Ledger:
    """
    Factory function to create a fully wired Ledger.

    Args:
        settings: Application settings (defaults to environment / .env)
        store: Key-value store (defaults to the JSON file in settings)
        use_sync: Whether to mirror new transactions to Google Sheets.
                  Ignored when Sheets is not configured.
    """
    settings = settings or get_settings()
    store = store or JsonFileStore(settings.ledger.storage_file)

    audit_logger = AuditLogger()
    dispatcher = NotificationDispatcher(audit_logger=audit_logger)

    if use_sync and settings.google_sheets.is_configured:
        dispatcher.add_sink(GoogleSheetsSync(GoogleSheetsClient(settings.google_sheets)))
    elif use_sync:
        logger.info("sheets_sync_disabled", reason="not configured")

    return Ledger(
        repository=LedgerRepository(store),
        settings=settings.ledger,
        parser=LineParser(separator=settings.ledger.entry_separator),
        audit_logger=audit_logger,
        dispatcher=dispatcher,
        advisor=FinancialAdvisor(settings.gemini, window=settings.ledger.advice_window),
    )
