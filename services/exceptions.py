# services/exceptions.py
"""
Domain errors raised by the pricing services.

Routers translate these into HTTP responses; anything left uncaught is
rendered by the PricingError handler in main.py as a plain message.
"""
from typing import Optional


class PricingError(Exception):
     """Base class for pricing-domain failures."""


class NotFoundError(PricingError):
     """A referenced development, unit or parameter set does not exist."""


class InvalidUnitError(PricingError):
     """A unit violates a structural precondition (e.g. non-positive private area)."""

     def __init__(self, message: str, identifier: Optional[str] = None):
          super().__init__(message)
          self.identifier = identifier


class NoActiveParameterError(PricingError):
     """The development has no active pricing parameter set."""

     def __init__(self, development_id: int):
          super().__init__(
               f"Development {development_id} has no active pricing parameter set"
          )
          self.development_id = development_id


class ActivationTransactionError(PricingError):
     """The active-flag swap failed and was rolled back; nothing was applied."""


class PerUnitComputationError(PricingError):
     """A single unit could not be valued during a batch recalculation."""

     def __init__(self, unit_id: int, identifier: str, reason: str):
          super().__init__(f"{identifier}: {reason}")
          self.unit_id = unit_id
          self.identifier = identifier
          self.reason = reason

     def as_dict(self) -> dict:
          return {"unit_id": self.unit_id, "identifier": self.identifier, "reason": self.reason}
