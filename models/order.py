from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.sql import func
from models import BIGINT
from models import db


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.UniqueConstraint("customer_id", "idempotency_key", name="uq_order_customer_idempotency"),
        db.Index("ix_order_customer_created", "customer_id", "created_at"),
        db.CheckConstraint(
            "status IN ('pending', 'completed', 'cancelled')", name="ck_order_status"
        ),
    )
    id = Column(BIGINT, primary_key=True)
    customer_id = Column(String(32), ForeignKey("user_profile.uid"), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default="completed")
    idempotency_key = Column(String(128), nullable=True)
    created_at = Column(DateTime, default=func.now())

    lines = db.relationship(
        "OrderLine",
        backref="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
        lazy=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "items": [line.to_dict() for line in self.lines],
            "total_amount": float(self.total_amount),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class OrderLine(db.Model):
    __tablename__ = "order_line"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("order.id"), nullable=False)
    position = Column(Integer, nullable=False)

    # Snapshot at purchase time, no foreign key to product
    product_id = Column(BIGINT, nullable=False)
    product_name = Column(String(100), nullable=False)
    product_image = Column(String(512))
    quantity = Column(Integer, nullable=False)
    price_at_purchase = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_image": self.product_image,
            "quantity": self.quantity,
            "price_at_purchase": float(self.price_at_purchase),
            "subtotal": float(self.subtotal),
        }
