"""
Business models: the business itself (which carries the per-business
defaults used by the metrics engine), its weekly work schedule and its
members.
"""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, ForeignKey, Integer, Numeric, String,
    UniqueConstraint
)
from sqlalchemy.orm import relationship

from backoffice.models.base import BaseModel, SoftDeleteModel, BusinessScopedMixin


class Business(SoftDeleteModel):
    """
    A restaurant or retail business.

    The nullable parameter columns are the business-level defaults
    consulted when a month has no goal override.
    """

    __tablename__ = "businesses"

    name = Column(String(255), nullable=False)

    vat_percentage = Column(
        Numeric(precision=6, scale=4),
        nullable=True,
        comment="VAT rate as a fraction (0.18 = 18%)"
    )
    markup_percentage = Column(
        Numeric(precision=6, scale=4),
        nullable=True,
        comment="Employer-overhead multiplier applied to labor cost"
    )
    manager_monthly_salary = Column(Numeric(precision=12, scale=2), nullable=True)

    revenue_target = Column(Numeric(precision=14, scale=2), nullable=True)
    labor_cost_target_pct = Column(Numeric(precision=6, scale=2), nullable=True)
    food_cost_target_pct = Column(Numeric(precision=6, scale=2), nullable=True)
    operating_cost_target_pct = Column(Numeric(precision=6, scale=2), nullable=True)

    schedule = relationship(
        "BusinessSchedule",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="BusinessSchedule.day_of_week",
    )
    members = relationship("BusinessMember", back_populates="business")


class BusinessSchedule(BaseModel, BusinessScopedMixin):
    """
    One weekly schedule slot.

    day_of_week follows the 0 = Sunday ... 6 = Saturday convention;
    day_factor is the expected fraction of a work day on that weekday.
    """

    __tablename__ = "business_schedule"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_business_schedule_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_business_schedule_dow"),
    )

    day_of_week = Column(Integer, nullable=False)
    day_factor = Column(Numeric(precision=4, scale=2), nullable=False, default=1)

    business = relationship("Business", back_populates="schedule")


class UserProfile(BaseModel):
    """Platform user profile; is_admin grants access to every business."""

    __tablename__ = "profiles"

    email = Column(String(255), nullable=True, unique=True)
    is_admin = Column(Boolean, nullable=False, default=False)


class BusinessMember(SoftDeleteModel, BusinessScopedMixin):
    """Membership of a user in a business."""

    __tablename__ = "business_members"
    __table_args__ = (
        UniqueConstraint("business_id", "user_id", name="uq_business_member"),
    )

    user_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(String(50), nullable=False, default="member")

    business = relationship("Business", back_populates="members")
