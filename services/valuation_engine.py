# services/valuation_engine.py
"""
Valuation Engine - pure unit pricing.

compute_value() turns a unit snapshot, a parameter-set snapshot and a floor
curve into a monetary value. Steps, in this order:

1. Per-m² rate for the unit type (type without a rate => base 0)
2. base = private_area * rate
3. + suites/parking/storage counts * flat add-ons (missing counts => 0)
4. * solar orientation factor (no orientation => 1; a factor of 0 is legal)
5. * (1 + floor% / 100) (no floor or no row => 0%)
6. * (1 + manual adjustment% / 100), always last
7. Round half-up to cents

The engine never reads or writes the database; callers build the snapshots
from ORM rows (from_attributes) so valuations can run off the session thread.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from models.unit import SolarOrientation
from models.pricing_parameter_set import ORIENTATION_FACTOR_COLUMNS, RATE_COLUMNS
from services.exceptions import InvalidUnitError


CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
     """Convert ints/floats/strings to Decimal without binary float artefacts."""
     if isinstance(value, Decimal):
          return value
     return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
     return value.quantize(CENT, rounding=ROUND_HALF_UP)


class UnitAttributes(BaseModel):
     """Immutable view of the unit fields the engine reads."""
     model_config = ConfigDict(frozen=True, from_attributes=True)

     id: Optional[int] = None
     identifier: str = ""
     unit_type: str
     private_area: Decimal
     floor: Optional[int] = None
     suites: Optional[int] = None
     parking_simple: Optional[int] = None
     parking_double: Optional[int] = None
     parking_moto: Optional[int] = None
     storage_boxes: Optional[int] = None
     solar_orientation: Optional[SolarOrientation] = None
     manual_adjustment_percentage: Optional[float] = None

     @field_validator("solar_orientation", mode="before")
     @classmethod
     def _blank_orientation_is_unset(cls, value):
          if isinstance(value, str):
               value = value.strip().lower()
               return value or None
          return value


class PricingParameters(BaseModel):
     """Immutable view of a PricingParameterSet's rates, add-ons and factors."""
     model_config = ConfigDict(frozen=True, from_attributes=True)

     id: Optional[int] = None

     rate_studio: Optional[Decimal] = None
     rate_apartment: Optional[Decimal] = None
     rate_commercial: Optional[Decimal] = None
     rate_garden: Optional[Decimal] = None

     additional_suite: Decimal = ZERO
     additional_simple_parking: Decimal = ZERO
     additional_double_parking: Decimal = ZERO
     additional_moto_parking: Decimal = ZERO
     additional_storage_box: Decimal = ZERO

     factor_north: Decimal = ONE
     factor_south: Decimal = ONE
     factor_east: Decimal = ONE
     factor_west: Decimal = ONE
     factor_northeast: Decimal = ONE
     factor_northwest: Decimal = ONE
     factor_southeast: Decimal = ONE
     factor_southwest: Decimal = ONE

     @field_validator(
          "additional_suite",
          "additional_simple_parking",
          "additional_double_parking",
          "additional_moto_parking",
          "additional_storage_box",
          mode="before",
     )
     @classmethod
     def _missing_addon_is_zero(cls, value):
          return ZERO if value is None else value

     @field_validator(
          "factor_north",
          "factor_south",
          "factor_east",
          "factor_west",
          "factor_northeast",
          "factor_northwest",
          "factor_southeast",
          "factor_southwest",
          mode="before",
     )
     @classmethod
     def _missing_factor_is_neutral(cls, value):
          return ONE if value is None else value

     def rate_for(self, unit_type: Optional[str]) -> Optional[Decimal]:
          """Per-m² rate for a unit type, or None when the type is not priced."""
          if not unit_type:
               return None
          column = RATE_COLUMNS.get(unit_type.strip().lower())
          if column is None:
               return None
          return getattr(self, column)

     def orientation_factor(self, orientation: Optional[SolarOrientation]) -> Decimal:
          if orientation is None:
               return ONE
          return getattr(self, ORIENTATION_FACTOR_COLUMNS[SolarOrientation(orientation).value])


FloorCurve = Union[Mapping[int, float], Iterable]


def floor_curve_map(floor_curve: Optional[FloorCurve]) -> dict:
     """Normalise a floor curve (mapping or FloorValorization-like rows) to {floor: percentage}."""
     if floor_curve is None:
          return {}
     if isinstance(floor_curve, Mapping):
          return {int(floor): percentage for floor, percentage in floor_curve.items()}
     return {row.floor: row.percentage for row in floor_curve}


def percentage_multiplier(percentage) -> Decimal:
     """1 + percentage/100 as a Decimal."""
     return ONE + to_decimal(percentage) / HUNDRED


def _count(value: Optional[int]) -> Decimal:
     return Decimal(value) if value else ZERO


def compute_value(
     unit: UnitAttributes,
     params: PricingParameters,
     floor_curve: Optional[FloorCurve] = None
) -> Decimal:
     """
     Compute the market value of a unit under a parameter set.

     Missing optional inputs are neutral; the only failure is a structurally
     invalid unit.

     Raises:
          InvalidUnitError: If the unit's private area is not positive.
     """
     if unit.private_area is None or unit.private_area <= 0:
          raise InvalidUnitError(
               f"Unit {unit.identifier or unit.id} has non-positive private area ({unit.private_area})",
               identifier=unit.identifier,
          )

     rate = params.rate_for(unit.unit_type)
     value = unit.private_area * rate if rate is not None else ZERO

     value += _count(unit.suites) * params.additional_suite
     value += _count(unit.parking_simple) * params.additional_simple_parking
     value += _count(unit.parking_double) * params.additional_double_parking
     value += _count(unit.parking_moto) * params.additional_moto_parking
     value += _count(unit.storage_boxes) * params.additional_storage_box

     value *= params.orientation_factor(unit.solar_orientation)

     curve = floor_curve if isinstance(floor_curve, dict) else floor_curve_map(floor_curve)
     floor_percentage = curve.get(unit.floor, 0) if unit.floor is not None else 0
     value *= percentage_multiplier(floor_percentage)

     if unit.manual_adjustment_percentage is not None:
          value *= percentage_multiplier(unit.manual_adjustment_percentage)

     return round_money(value)


def snapshot_unit(unit) -> UnitAttributes:
     return UnitAttributes.model_validate(unit)


def snapshot_parameters(parameter_set) -> PricingParameters:
     return PricingParameters.model_validate(parameter_set)
