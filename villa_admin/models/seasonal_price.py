from sqlalchemy import Column, Integer, String, Text, Boolean, Date, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel


class SeasonalPrice(BaseModel):
    __tablename__ = "seasonal_prices"
    __table_args__ = (
        UniqueConstraint("villa_id", "start_date", "end_date", name="uq_seasonal_prices_villa_start_end"),
    )

    villa_id = Column(Integer, ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True)
    season_name = Column(String(100), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # inclusive
    nightly_price = Column(Numeric(12, 2), nullable=False)
    weekly_price = Column(Numeric(12, 2), nullable=True)  # usually nightly * 7, stored independently
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    villa = relationship("Villa", back_populates="seasonal_prices")
