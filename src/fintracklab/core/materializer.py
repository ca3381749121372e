"""
Recurring transaction materialization.

Turns monthly templates into concrete ledger entries up to "today" and advances
each template's cursor. This is a catch-up batch operation meant to run once per
session start, not a live scheduler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date

from .dates import iso_day
from .records import RecurringTransaction, Transaction

logger = logging.getLogger(__name__)

RECURRING_ID_PREFIX = "recurring"


def recurring_transaction_id(template_id: str, occurrence: date) -> str:
    """Deterministic id of a materialized entry: ``recurring:<templateId>:<date>``."""
    return f"{RECURRING_ID_PREFIX}:{template_id}:{iso_day(occurrence)}"


@dataclass
class MaterializationResult:
    """
    Outcome of a catch-up run.

    Attributes:
        transactions: The full ledger, sorted by date descending when changed
        templates: The templates with advanced cursors when changed
        new_transactions: Entries appended by this run (deduplicated)
        changed: False when nothing was appended; both collections are then the
            caller's inputs, untouched
    """

    transactions: list[Transaction]
    templates: list[RecurringTransaction]
    new_transactions: list[Transaction] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.new_transactions)


def due_occurrences(
    template: RecurringTransaction, today: date
) -> list[tuple[int, date]]:
    """
    List the unprocessed occurrences of ``template`` that are due by ``today``.

    Args:
        template: The recurring template
        today: The current calendar day

    Returns:
        ``(index, date)`` pairs in chronological order, bounded by ``today`` and
        by ``template.end_date`` when set. Empty when the template has not
        started yet.
    """
    if template.start_date > today:
        return []

    out: list[tuple[int, date]] = []
    k = template.next_occurrence_index()
    occurrence = template.occurrence(k)
    while occurrence <= today:
        if template.end_date is not None and occurrence > template.end_date:
            break
        out.append((k, occurrence))
        k += 1
        occurrence = template.occurrence(k)
    return out


def materialize_template(
    template: RecurringTransaction, today: date
) -> tuple[list[Transaction], RecurringTransaction]:
    """
    Materialize a single template.

    Returns:
        The generated transactions and the template with its cursor moved to the
        last generated occurrence (unchanged when nothing was due)
    """
    occurrences = due_occurrences(template, today)
    if not occurrences:
        logger.debug("recurring %s: nothing due by %s", template.id, today)
        return [], template

    generated = [
        Transaction(
            id=recurring_transaction_id(template.id, occurrence),
            date=occurrence,
            description=template.description,
            amount=template.amount,
            type=template.type,
        )
        for _, occurrence in occurrences
    ]
    cursor = occurrences[-1][1]
    if template.last_processed_date is not None:
        cursor = max(cursor, template.last_processed_date)
    return generated, replace(template, last_processed_date=cursor)


def sort_by_date_desc(records: list) -> list:
    """Sort records newest first; records sharing a day keep their relative order."""
    return sorted(records, key=lambda r: r.date, reverse=True)


def materialize(
    templates: list[RecurringTransaction],
    transactions: list[Transaction],
    today: date,
) -> MaterializationResult:
    """
    Catch the ledger up with every recurring template.

    **Algorithm (per template):**
        1. Skip templates whose ``start_date`` is after ``today``
        2. Resume after ``last_processed_date`` (or at ``start_date``), aiming
           each occurrence at the start day-of-month to avoid calendar drift
        3. Emit one entry per due occurrence, stopping at ``today`` or
           ``end_date``
        4. Drop entries whose id is already present in the ledger

    When at least one entry survives deduplication the ledger is re-sorted by
    date descending and the advanced templates are returned; otherwise both
    input collections are returned as they are, so callers skip the write.

    **Args:**
        templates: Current recurring templates
        transactions: Current ledger
        today: The current calendar day (injectable for testing)

    **Returns:**
        A MaterializationResult

    **Example:**
        ```python
        rent = RecurringTransaction(
            id="rent", description="Salary", amount=1000.0,
            type=TransactionType.INCOME, start_date=date(2024, 1, 31),
        )
        res = materialize([rent], [], today=date(2024, 4, 15))
        [t.date for t in res.new_transactions]
        # [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
        ```
    """
    existing_ids = {tx.id for tx in transactions}
    new_transactions: list[Transaction] = []
    updated_templates: list[RecurringTransaction] = []

    for template in templates:
        generated, updated = materialize_template(template, today)
        updated_templates.append(updated)
        for tx in generated:
            if tx.id in existing_ids:
                continue
            existing_ids.add(tx.id)
            new_transactions.append(tx)

    if not new_transactions:
        return MaterializationResult(
            transactions=list(transactions), templates=list(templates)
        )

    logger.info(
        "Materialized %d recurring entries from %d templates up to %s",
        len(new_transactions),
        len(templates),
        iso_day(today),
    )
    return MaterializationResult(
        transactions=sort_by_date_desc([*transactions, *new_transactions]),
        templates=updated_templates,
        new_transactions=new_transactions,
    )
