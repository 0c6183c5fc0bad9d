from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON

from storefront.data.database import Base


class PaymentLogModel(Base):
    """Log audytowy odpowiedzi procesora platnosci, tylko dopisywanie."""

    __tablename__ = "payment_logs"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    transaction_id = Column(String, nullable=True)
    charge_id = Column(String, nullable=True)
    status = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    response_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
