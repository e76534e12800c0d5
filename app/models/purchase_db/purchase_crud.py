from uuid import UUID
from sqlalchemy.orm import Session

from app.models.purchase_db.purchase_db import Purchase, PaymentStatus


def has_paid(db: Session, user_id: UUID, batch_id: UUID) -> bool:
    count = (
        db.query(Purchase)
        .filter(
            Purchase.user_id == user_id,
            Purchase.batch_id == batch_id,
            Purchase.payment_status == PaymentStatus.paid,
        )
        .count()
    )
    return count > 0
