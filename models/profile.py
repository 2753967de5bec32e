# --- models/profile.py ---
from models import db, BIGINT
from datetime import datetime

ROLES = ("consumer", "fbo", "admin")


# --- Auth user (credentials) ---
class AuthUser(db.Model):
    __tablename__ = "auth_user"

    id = db.Column(BIGINT, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_sign_in_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<AuthUser id={self.id} email={self.email}>"


# --- Profile ---
class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(BIGINT, db.ForeignKey("auth_user.id"), primary_key=True)
    email = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="consumer")  # consumer, fbo, admin

    # Business fields, only meaningful for fbo
    business_name = db.Column(db.String(150), nullable=True)
    business_address = db.Column(db.String(255), nullable=True)
    business_description = db.Column(db.Text, nullable=True)

    avatar_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def display_name(self):
        return self.business_name or self.full_name

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "role": self.role,
            "business_name": self.business_name,
            "business_address": self.business_address,
            "business_description": self.business_description,
            "avatar_url": self.avatar_url,
        }

    def __repr__(self):
        return f"<Profile id={self.id} role={self.role}>"
