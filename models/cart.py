from models import db, BIGINT, utcnow


class CartLine(db.Model):
    __tablename__ = "cart_line"
    __table_args__ = (
        db.UniqueConstraint("customer_id", "product_id", name="uq_cart_line_customer_product"),
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.String(32), db.ForeignKey("user_profile.uid"), nullable=False, index=True)
    product_id = db.Column(BIGINT, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    # Product snapshot captured when the line was first added
    product_name = db.Column(db.String(100), nullable=False)
    product_price = db.Column(db.Numeric(12, 2), nullable=False)
    product_image_url = db.Column(db.String(512), nullable=True)
    product_category = db.Column(db.String(20), nullable=True)
    product_seller_id = db.Column(db.String(32), nullable=True)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "added_at": self.added_at.isoformat() if self.added_at else None,
            "product": {
                "id": self.product_id,
                "name": self.product_name,
                "price": float(self.product_price),
                "image_url": self.product_image_url,
                "category": self.product_category,
                "seller_id": self.product_seller_id,
            },
        }
