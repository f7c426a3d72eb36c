"""
Spend ledger — one immutable entry per approved time log / travel request.

The running financial total is the SUM over this table, so there is no
shared counter to race on. The (record_type, record_id) unique constraint
makes a second approval of the same record fail at the database instead of
double-counting.
"""

from datetime import datetime, timezone

from ramp_portal.models import db


class SpendLedgerEntry(db.Model):
    __tablename__ = "spend_ledger_entries"

    id = db.Column(db.Integer, primary_key=True)
    record_type = db.Column(db.String(30), nullable=False, comment="time_log | travel_request")
    record_id = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Float, nullable=False)
    approved_by = db.Column(db.String(200), nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("record_type", "record_id", name="uq_ledger_record"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "record_type": self.record_type,
            "record_id": self.record_id,
            "amount": self.amount,
            "approved_by": self.approved_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<SpendLedgerEntry {self.record_type}#{self.record_id} {self.amount}>"
