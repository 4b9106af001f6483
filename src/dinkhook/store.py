from __future__ import annotations

import time
from collections import Counter, OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from dinkhook.dispatch import Notification
from dinkhook.intake import Attachment
from dinkhook.utils.logger_util import get_logger

logger = get_logger(__name__)

STATUSES = ("received", "queued", "handled", "unhandled", "failed")
# statuses whose repeats are suppressed; "received" means handlers are still running
SUPPRESSING = frozenset({"received", "queued", "handled", "unhandled"})


@dataclass
class NotificationRecord:
    id: str
    type: str
    player_name: Optional[str]
    account_hash: Optional[str]
    received_at: datetime
    fingerprint: str
    envelope: Dict[str, Any]
    attachment: Optional[Attachment] = None
    status: str = "received"
    error: Optional[str] = None
    summary: Optional[str] = None
    # monotonic receive time, only used for the duplicate window
    seen_at: float = field(default=0.0, repr=False)

    def to_dict(self, include_envelope: bool = True) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "type": self.type,
            "player_name": self.player_name,
            "account_hash": self.account_hash,
            "received_at": self.received_at.isoformat(),
            "status": self.status,
            "error": self.error,
            "summary": self.summary,
            "attachment": None,
        }
        if self.attachment is not None:
            out["attachment"] = {
                "filename": self.attachment.filename,
                "content_type": self.attachment.content_type,
                "size": self.attachment.size,
            }
        if include_envelope:
            out["envelope"] = self.envelope
        return out


class InMemoryNotificationStore:
    """Bounded in-process history of received notifications.

    Not durable. Oldest records are evicted once ``history_size`` is reached.
    Also answers whether a delivery repeats one already processed within
    ``dedup_window_seconds`` (0 disables the check).
    """

    def __init__(self, history_size: int = 500, dedup_window_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.history_size = int(history_size)
        self.dedup_window_seconds = float(dedup_window_seconds)
        self._clock = clock
        self._records: "OrderedDict[str, NotificationRecord]" = OrderedDict()
        self._by_fingerprint: Dict[str, str] = {}
        self.total_received = 0
        self.duplicates = 0

    def __len__(self) -> int:
        return len(self._records)

    def add(self, notification: Notification, fingerprint: str) -> NotificationRecord:
        env = notification.envelope
        rec = NotificationRecord(
            id=notification.id,
            type=notification.type,
            player_name=env.player_name,
            account_hash=env.dink_account_hash,
            received_at=notification.received_at,
            fingerprint=fingerprint,
            envelope=env.to_wire(),
            attachment=notification.attachment,
            seen_at=self._clock(),
        )
        self._records[rec.id] = rec
        self._by_fingerprint[fingerprint] = rec.id
        self.total_received += 1
        while len(self._records) > self.history_size:
            _, old = self._records.popitem(last=False)
            if self._by_fingerprint.get(old.fingerprint) == old.id:
                del self._by_fingerprint[old.fingerprint]
        return rec

    def find_duplicate(self, fingerprint: str) -> Optional[NotificationRecord]:
        """Return the in-flight or settled record this fingerprint repeats, if still inside the window."""
        if self.dedup_window_seconds <= 0:
            return None
        rid = self._by_fingerprint.get(fingerprint)
        rec = self._records.get(rid) if rid else None
        if rec is None or rec.status not in SUPPRESSING:
            return None
        if self._clock() - rec.seen_at > self.dedup_window_seconds:
            return None
        self.duplicates += 1
        logger.info("duplicate delivery of %s %s from %s", rec.type, rec.id, rec.player_name)
        return rec

    def get(self, record_id: str) -> Optional[NotificationRecord]:
        return self._records.get(record_id)

    def set_status(self, record_id: str, status: str, error: Optional[str] = None):
        if status not in STATUSES:
            raise ValueError(f"unknown status {status!r}")
        rec = self.get(record_id)
        if rec:
            rec.status = status
            rec.error = error

    def set_summary(self, record_id: str, summary: str):
        rec = self.get(record_id)
        if rec:
            rec.summary = summary

    def list(self, event_type: Optional[str] = None, player: Optional[str] = None, limit: int = 50) -> List[NotificationRecord]:
        out = []
        for rec in reversed(self._records.values()):
            if event_type and rec.type != event_type:
                continue
            if player and (rec.player_name or "").lower() != player.lower():
                continue
            out.append(rec)
            if len(out) >= limit:
                break
        return out

    def stats(self) -> Dict[str, Any]:
        return {
            "total_received": self.total_received,
            "duplicates": self.duplicates,
            "retained": len(self._records),
            "by_type": dict(Counter(r.type for r in self._records.values())),
            "by_status": dict(Counter(r.status for r in self._records.values())),
            "by_player": dict(Counter(r.player_name or "unknown" for r in self._records.values())),
        }
