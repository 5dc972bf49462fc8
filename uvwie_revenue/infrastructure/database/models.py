"""SQLAlchemy ORM models for the shop register, revenue types, payments and permits"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(12, 2)


class ShopRecord(Base):
    """Registered shop"""

    __tablename__ = "shop"

    shop_id = Column(String(64), primary_key=True)
    business_name = Column(Text, nullable=False)
    owner_name = Column(Text, nullable=True)
    ward = Column(Text, nullable=False, index=True)
    business_type = Column(Text, nullable=False, index=True)
    shop_size_category = Column(Text, nullable=False)
    compliance_status = Column(Text, nullable=False, default="New", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship("PaymentRecord", back_populates="shop", cascade="all, delete-orphan")
    permits = relationship("PermitRecord", back_populates="shop", cascade="all, delete-orphan")


class RevenueTypeRecord(Base):
    """Configured revenue line"""

    __tablename__ = "revenue_type"

    type_id = Column(String(64), primary_key=True)
    type_name = Column(Text, nullable=False)
    base_amount = Column(Money, nullable=False)
    calculation_method = Column(Text, nullable=False, default="Fixed")
    frequency = Column(Text, nullable=False, default="Annual")
    is_active = Column(Boolean, nullable=False, default=True)


class PaymentRecord(Base):
    """Amount assessed against a shop, with what has been paid so far"""

    __tablename__ = "payment"

    payment_id = Column(String(64), primary_key=True)
    shop_id = Column(String(64), ForeignKey("shop.shop_id", ondelete="CASCADE"), nullable=False, index=True)
    revenue_type_id = Column(String(64), ForeignKey("revenue_type.type_id"), nullable=False, index=True)
    assessment_year = Column(Integer, nullable=False)
    amount_due = Column(Money, nullable=False)
    amount_paid = Column(Money, nullable=False, default=0)
    penalty_amount = Column(Money, nullable=False, default=0)
    due_date = Column(DateTime(timezone=True), nullable=True)
    payment_status = Column(Text, nullable=False, default="Pending", index=True)
    receipt_number = Column(Text, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    shop = relationship("ShopRecord", back_populates="payments")


class PermitRecord(Base):
    """Permit issued to a shop"""

    __tablename__ = "permit"

    permit_id = Column(String(64), primary_key=True)
    shop_id = Column(String(64), ForeignKey("shop.shop_id", ondelete="CASCADE"), nullable=False, index=True)
    permit_type = Column(Text, nullable=False)
    issue_date = Column(DateTime(timezone=True), nullable=False)
    expiry_date = Column(DateTime(timezone=True), nullable=True, index=True)
    permit_status = Column(Text, nullable=False, default="Active")
    renewal_status = Column(Text, nullable=False, default="Active")
    permit_fee = Column(Money, nullable=False, default=0)

    shop = relationship("ShopRecord", back_populates="permits")
