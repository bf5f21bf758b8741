# schemas/__init__.py
from .development import (
     DevelopmentCreate,
     DevelopmentUpdate,
     DevelopmentResponse,
     VgvSummaryResponse,
)
from .unit import (
     UnitCreate,
     UnitUpdate,
     UnitImportRequest,
     UnitResponse,
)
from .parameter_set import (
     ParameterSetCreate,
     ParameterSetUpdate,
     ParameterSetResponse,
     CloneRequest,
     FloorCurveRequest,
)
from .adjustment import (
     AdjustmentRequest,
     AdjustmentResponse,
     AdjustmentHistoryResponse,
)
from .recalculation import RecalcResultResponse, ImpactResponse

__all__ = [
     "DevelopmentCreate",
     "DevelopmentUpdate",
     "DevelopmentResponse",
     "VgvSummaryResponse",
     "UnitCreate",
     "UnitUpdate",
     "UnitImportRequest",
     "UnitResponse",
     "ParameterSetCreate",
     "ParameterSetUpdate",
     "ParameterSetResponse",
     "CloneRequest",
     "FloorCurveRequest",
     "AdjustmentRequest",
     "AdjustmentResponse",
     "AdjustmentHistoryResponse",
     "RecalcResultResponse",
     "ImpactResponse",
]
