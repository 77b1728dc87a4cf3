from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Literal, Optional

from ..domain.status import BookingStatus
from .request_id import get_request_id

AuditAction = Literal[
    "booking.created",
    "booking.cancelled",
]
AuditInitiator = Literal["customer", "owner", "admin"]

_audit_logger = logging.getLogger("audit")
_audit_logger.setLevel(logging.INFO)
if not _audit_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    _audit_logger.addHandler(handler)
_audit_logger.propagate = False


def _enum_to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def emit_audit_log(
    *,
    action: AuditAction,
    initiator: AuditInitiator,
    booking_id: int,
    hall_id: Optional[int],
    actor_id: Optional[int],
    customer_id: Optional[int],
    booking_date: Optional[date],
    guest_count: Optional[int],
    status: Optional[BookingStatus] = None,
) -> None:
    """Emit structured JSON audit log. Raises RuntimeError if logging fails."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": "info",
        "action": action,
        "initiator": initiator,
        "request_id": get_request_id(),
        "booking_id": booking_id,
        "hall_id": hall_id,
        "actor_id": actor_id,
        "customer_id": customer_id,
        "booking_date": booking_date.isoformat() if booking_date is not None else None,
        "guest_count": guest_count,
        "status": _enum_to_str(status),
    }
    # Drop None values to keep the log compact.
    compact_payload = {k: v for k, v in payload.items() if v is not None}
    try:
        _audit_logger.info(json.dumps(compact_payload, ensure_ascii=True))
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("failed to emit audit log") from exc
