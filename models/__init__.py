# models/__init__.py
from .base import Base
from .development import Development
from .unit import Unit, UnitStatus, UnitType, SolarOrientation
from .pricing_parameter_set import PricingParameterSet
from .floor_valorization import FloorValorization
from .adjustment_history import AdjustmentHistoryEntry

__all__ = [
     "Base",
     "Development",
     "Unit",
     "UnitStatus",
     "UnitType",
     "SolarOrientation",
     "PricingParameterSet",
     "FloorValorization",
     "AdjustmentHistoryEntry",
]
