# models/alert.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from services.db_service import Base


class AlertCondition(str, enum.Enum):
    ABOVE = "above"
    BELOW = "below"


class AssetType(str, enum.Enum):
    CRYPTO = "crypto"
    STOCK = "stock"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class PriceAlert(Base):
    __tablename__ = "price_alerts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    symbol = Column(String, nullable=False)         # exchange format, e.g. "BTCUSDT"
    asset_type = Column(
        SAEnum(AssetType, values_callable=_enum_values, name="asset_type"),
        nullable=False,
        default=AssetType.CRYPTO,
    )
    target_price = Column(Numeric(24, 8), nullable=False)
    condition = Column(
        SAEnum(AlertCondition, values_callable=_enum_values, name="alert_condition"),
        nullable=False,
    )  # "above" / "below"
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    triggered_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return (
            f"<PriceAlert id={self.id} {self.symbol} {getattr(self.condition, 'value', self.condition)} "
            f"{self.target_price} active={self.is_active}>"
        )
