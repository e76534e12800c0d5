import enum
import uuid
from sqlalchemy import Column, DateTime, Enum, ForeignKey, Uuid
from app.core.clock import utcnow
from app.core.database import Base


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    batch_id = Column(Uuid(as_uuid=True), ForeignKey("batches.id"), nullable=False, index=True)
    payment_status = Column(Enum(PaymentStatus, name="payment_status"), nullable=False, default=PaymentStatus.pending)
    created_at = Column(DateTime, default=utcnow)
