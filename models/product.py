# --- models/product.py ---
from models import db, BIGINT, utcnow

DEFAULT_IMAGE_URL = "https://placehold.co/400x400/e5e7eb/6b7280?text=No+Image"


class Product(db.Model):
    __tablename__ = "product"
    __table_args__ = (
        db.Index("ix_product_seller_category", "seller_id", "category"),
        db.CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        db.CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )

    id = db.Column(BIGINT, primary_key=True)
    seller_id = db.Column(db.String(32), db.ForeignKey("user_profile.uid"), nullable=False)

    # Core details
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    category = db.Column(db.String(20), nullable=False)          # see app.schemas.catalog.Category

    # Pricing & inventory
    price = db.Column(db.Numeric(12, 2), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    # Media
    image_url = db.Column(db.String(512), nullable=False, default=DEFAULT_IMAGE_URL)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "stock": self.stock,
            "category": self.category,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
