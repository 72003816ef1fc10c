"""Record normalizer.

Single translation boundary between the raw records served by the data
store and the canonical models the engine works on. Raw records come in
several shapes: ``_id`` or ``id``, ``type`` or ``kind``, credit/debit or
income/expense vocabularies, numeric or string amounts, ISO or date-only
strings. Every function here is pure. Bad records become Rejections; they
never raise out of this module.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from finflow.core.exceptions import RecordRejectedError
from finflow.core.models import (
    UNCATEGORIZED,
    Budget,
    BudgetPeriod,
    Category,
    NormalizedBatch,
    Rejection,
    RejectionReason,
    Transaction,
    TransactionKind,
    to_naive_utc,
)

logger = logging.getLogger(__name__)

KIND_ALIASES: dict[str, TransactionKind] = {
    "credit": TransactionKind.INFLOW,
    "income": TransactionKind.INFLOW,
    "inflow": TransactionKind.INFLOW,
    "debit": TransactionKind.OUTFLOW,
    "expense": TransactionKind.OUTFLOW,
    "outflow": TransactionKind.OUTFLOW,
}

PERIOD_ALIASES: dict[str, BudgetPeriod] = {
    "monthly": BudgetPeriod.MONTHLY,
    "yearly": BudgetPeriod.YEARLY,
}


# -----------------------------------------------------------------------------
# Field normalizers
# -----------------------------------------------------------------------------


def normalize_kind(value: Any) -> TransactionKind:
    """Map a raw type label to a canonical kind.

    Raises:
        RecordRejectedError: If the label is not a known alias.
    """
    if isinstance(value, TransactionKind):
        return value
    if isinstance(value, str):
        kind = KIND_ALIASES.get(value.strip().lower())
        if kind is not None:
            return kind
    raise RecordRejectedError(
        RejectionReason.INVALID_KIND, f"Unrecognized transaction type: {value!r}"
    )


def normalize_amount(value: Any) -> Decimal:
    """Coerce a raw amount to a positive Decimal.

    Floats go through ``str`` so that 0.1 stays 0.1.

    Raises:
        RecordRejectedError: For non-numeric input, zero or negative values, and
            values outside the range of a double.
    """
    if isinstance(value, bool) or value is None:
        raise RecordRejectedError(
            RejectionReason.INVALID_AMOUNT, f"Amount is not a number: {value!r}"
        )

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, int):
            amount = Decimal(value)
        elif isinstance(value, float):
            if not math.isfinite(value):
                raise InvalidOperation
            amount = Decimal(str(value))
        elif isinstance(value, str):
            amount = Decimal(value.strip())
        else:
            raise InvalidOperation
    except (InvalidOperation, ValueError):
        raise RecordRejectedError(
            RejectionReason.INVALID_AMOUNT, f"Amount is not a number: {value!r}"
        ) from None

    if not amount.is_finite() or not math.isfinite(float(amount)):
        raise RecordRejectedError(
            RejectionReason.INVALID_AMOUNT, f"Amount is not finite or out of range: {value!r}"
        )
    if amount <= 0:
        raise RecordRejectedError(
            RejectionReason.INVALID_AMOUNT, f"Amount must be positive: {value!r}"
        )
    return amount


def parse_datetime(value: Any) -> datetime:
    """Parse a raw date into a naive datetime.

    Accepts datetime/date objects and ISO-8601 or ``YYYY-MM-DD`` strings.
    Aware values are converted to UTC before dropping the offset. There is
    no fallback to the current time.

    Raises:
        RecordRejectedError: If the value cannot be parsed.
    """
    parsed: datetime | None = None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None

    if parsed is None:
        raise RecordRejectedError(
            RejectionReason.INVALID_DATE, f"Unparseable date: {value!r}"
        )

    return to_naive_utc(parsed)


def _parse_optional_datetime(value: Any) -> datetime | None:
    """Audit timestamps are optional; unparseable ones are dropped."""
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except RecordRejectedError:
        return None


def normalize_category(value: Any) -> str:
    """Trimmed category id, or the ``uncategorized`` sentinel."""
    if value is None:
        return UNCATEGORIZED
    text = str(value).strip()
    return text or UNCATEGORIZED


def normalize_period(value: Any) -> BudgetPeriod:
    """Map a raw budget period; missing means monthly.

    Raises:
        RecordRejectedError: For a present but unknown period.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return BudgetPeriod.MONTHLY
    if isinstance(value, BudgetPeriod):
        return value
    if isinstance(value, str):
        period = PERIOD_ALIASES.get(value.strip().lower())
        if period is not None:
            return period
    raise RecordRejectedError(
        RejectionReason.INVALID_PERIOD, f"Unrecognized budget period: {value!r}"
    )


def _record_id(raw: Mapping[str, Any]) -> str | None:
    value = raw.get("_id")
    if value is None:
        value = raw.get("id")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _rejection(
    raw: Any,
    reason: RejectionReason,
    detail: str,
    index: int | None,
    record_id: str | None,
) -> Rejection:
    logger.warning(
        "Rejected record %s (index=%s): %s - %s",
        record_id or "<no id>",
        index,
        reason.value,
        detail,
    )
    return Rejection(
        index=index,
        record_id=record_id,
        reason=reason,
        detail=detail,
        record=raw,
    )


# -----------------------------------------------------------------------------
# Record normalizers
# -----------------------------------------------------------------------------


def normalize_transaction(
    raw: Any,
    fallback_id: str | None = None,
    index: int | None = None,
) -> Transaction | Rejection:
    """Normalize one raw transaction record.

    Args:
        raw: Mapping in any of the known source shapes.
        fallback_id: Identifier to use when the record carries none.
        index: Position in the input batch, recorded on rejections.

    Returns:
        A Transaction, or a Rejection describing the first failed check.
    """
    if not isinstance(raw, Mapping):
        return _rejection(
            raw, RejectionReason.INVALID_RECORD, "Record is not a mapping", index, None
        )

    record_id = _record_id(raw) or fallback_id
    try:
        kind = normalize_kind(raw.get("type") or raw.get("kind"))
        amount = normalize_amount(raw.get("amount"))
        tx_date = parse_datetime(raw.get("date"))

        description = str(raw.get("description") or "").strip()
        if not description:
            raise RecordRejectedError(
                RejectionReason.MISSING_DESCRIPTION, "Description is required"
            )

        return Transaction(
            id=record_id or f"transaction-{index if index is not None else 0}",
            description=description,
            amount=amount,
            category=normalize_category(raw.get("category")),
            date=tx_date,
            kind=kind,
            created_at=_parse_optional_datetime(raw.get("createdAt", raw.get("created_at"))),
            updated_at=_parse_optional_datetime(raw.get("updatedAt", raw.get("updated_at"))),
        )
    except RecordRejectedError as e:
        return _rejection(raw, e.reason, e.detail, index, record_id)
    except ValidationError as e:
        return _rejection(raw, RejectionReason.INVALID_RECORD, str(e), index, record_id)


def normalize_budget(
    raw: Any,
    fallback_id: str | None = None,
    index: int | None = None,
) -> Budget | Rejection:
    """Normalize one raw budget record.

    Non-positive amounts are rejected. A missing period defaults to monthly.
    """
    if not isinstance(raw, Mapping):
        return _rejection(
            raw, RejectionReason.INVALID_RECORD, "Record is not a mapping", index, None
        )

    record_id = _record_id(raw) or fallback_id
    try:
        return Budget(
            id=record_id or f"budget-{index if index is not None else 0}",
            category=normalize_category(raw.get("category")),
            amount=normalize_amount(raw.get("amount")),
            period=normalize_period(raw.get("period")),
            created_at=_parse_optional_datetime(raw.get("createdAt", raw.get("created_at"))),
            updated_at=_parse_optional_datetime(raw.get("updatedAt", raw.get("updated_at"))),
        )
    except RecordRejectedError as e:
        return _rejection(raw, e.reason, e.detail, index, record_id)
    except ValidationError as e:
        return _rejection(raw, RejectionReason.INVALID_RECORD, str(e), index, record_id)


def normalize_category_record(raw: Any, index: int | None = None) -> Category | Rejection:
    """Normalize a stored category document (``_id``/``id``, name, color)."""
    if not isinstance(raw, Mapping):
        return _rejection(
            raw, RejectionReason.INVALID_RECORD, "Record is not a mapping", index, None
        )

    record_id = _record_id(raw)
    name = str(raw.get("name") or "").strip()
    category_id = record_id or name.lower()
    try:
        return Category(
            id=category_id,
            name=name or category_id,
            color=raw.get("color") or "bg-gray-500",
            icon=raw.get("icon"),
        )
    except ValidationError as e:
        return _rejection(raw, RejectionReason.INVALID_RECORD, str(e), index, record_id)


# -----------------------------------------------------------------------------
# Batches
# -----------------------------------------------------------------------------


def normalize_transactions(raws: Iterable[Any]) -> NormalizedBatch[Transaction]:
    """Normalize a batch, keeping valid records and collecting rejections."""
    batch: NormalizedBatch[Transaction] = NormalizedBatch()
    for index, raw in enumerate(raws):
        result = normalize_transaction(raw, fallback_id=f"transaction-{index}", index=index)
        if isinstance(result, Rejection):
            batch.rejections.append(result)
        else:
            batch.records.append(result)

    logger.debug(
        "Normalized %d transactions (%d rejected)",
        len(batch.records),
        len(batch.rejections),
    )
    return batch


def normalize_budgets(raws: Iterable[Any]) -> NormalizedBatch[Budget]:
    """Normalize a batch of budgets; see normalize_transactions."""
    batch: NormalizedBatch[Budget] = NormalizedBatch()
    for index, raw in enumerate(raws):
        result = normalize_budget(raw, fallback_id=f"budget-{index}", index=index)
        if isinstance(result, Rejection):
            batch.rejections.append(result)
        else:
            batch.records.append(result)

    logger.debug(
        "Normalized %d budgets (%d rejected)", len(batch.records), len(batch.rejections)
    )
    return batch


def extract_records(payload: Any, key: str) -> list[Any]:
    """Pull the record list out of an API payload.

    The data store answers either with a bare list or with an envelope like
    ``{"success": true, "transactions": [...]}`` or ``{"data": [...]}``.
    Anything else yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for candidate in (key, "data"):
            records = payload.get(candidate)
            if isinstance(records, list):
                return records
    return []
