# --- models/user.py ---
from models import db, utcnow

ROLES = ("customer", "seller")


class UserProfile(db.Model):
    __tablename__ = "user_profile"

    uid = db.Column(db.String(32), primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False)               # customer | seller, never changes
    is_disabled = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "uid": self.uid,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User uid={self.uid} role={self.role}>"
