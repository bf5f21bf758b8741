# services/__init__.py
from .exceptions import (
     PricingError,
     NotFoundError,
     InvalidUnitError,
     NoActiveParameterError,
     ActivationTransactionError,
     PerUnitComputationError,
)
from .valuation_engine import (
     UnitAttributes,
     PricingParameters,
     compute_value,
)
from .parameter_service import ParameterSetService, regenerate_floor_curve
from .recalculation_service import (
     RecalcResult,
     activate_and_recalculate,
     recalculate_development,
)
from .adjustment_ledger_service import AdjustmentResult, apply_adjustment, list_history
from .development_service import DevelopmentService
from .unit_service import UnitService
from .reporting_service import calculate_vgv, simulate_parameter_set

__all__ = [
     "PricingError",
     "NotFoundError",
     "InvalidUnitError",
     "NoActiveParameterError",
     "ActivationTransactionError",
     "PerUnitComputationError",
     "UnitAttributes",
     "PricingParameters",
     "compute_value",
     "ParameterSetService",
     "regenerate_floor_curve",
     "RecalcResult",
     "activate_and_recalculate",
     "recalculate_development",
     "AdjustmentResult",
     "apply_adjustment",
     "list_history",
     "DevelopmentService",
     "UnitService",
     "calculate_vgv",
     "simulate_parameter_set",
]
