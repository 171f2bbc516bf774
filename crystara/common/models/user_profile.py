from sqlalchemy import Column, DateTime, JSON, String

from .base import Base, utcnow


ADMIN_ROLE = "admin"
CUSTOMER_ROLE = "customer"


class UserProfile(Base):
    __tablename__ = "user_profiles"

    # same value as the identity-provider user id
    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=True)
    address_street = Column(String(255), nullable=True)
    address_city = Column(String(128), nullable=True)
    address_state = Column(String(128), nullable=True)
    address_pincode = Column(String(16), nullable=True)
    saved_addresses = Column(JSON, nullable=True)
    role = Column(String(16), nullable=False, default=CUSTOMER_ROLE)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    @property
    def is_onboarded(self) -> bool:
        return bool(self.name)
