"""
Expense database model.

Pure log entries; fuel expenses carry liters, maintenance expenses do not.
"""

from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import timestamp_columns, utcnow
from fleetflow.app.models.enums import ExpenseType


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)
    expense_type = Column(Enum(ExpenseType), nullable=False, index=True)

    liters = Column(Float, default=0, nullable=False)
    cost = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Set when the expense was generated by a maintenance service log
    maintenance_id = Column(
        Integer, ForeignKey('maintenance_logs.id', ondelete='SET NULL'), nullable=True, index=True
    )

    created_at, updated_at = timestamp_columns()

    vehicle = relationship("Vehicle")

    def __repr__(self):
        return f"<Expense(id={self.id}, vehicle_id={self.vehicle_id}, type='{self.expense_type.value}', cost={self.cost})>"
