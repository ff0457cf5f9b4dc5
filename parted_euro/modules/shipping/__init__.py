"""
Shipping Module

- BaseCarrier interface for all carrier implementations
- CarrierFactory for dependency injection
- SelectionPolicy decides which carriers answer a quote
- assemble_options builds the final checkout list
"""
from parted_euro.modules.shipping.carriers import CarrierFactory
from parted_euro.modules.shipping.carriers.base import BaseCarrier
from parted_euro.modules.shipping.policy import CarrierCall, SelectionDecision, SelectionPolicy
from parted_euro.modules.shipping.assembler import assemble_options

__all__ = [
    "CarrierFactory",
    "BaseCarrier",
    "CarrierCall",
    "SelectionDecision",
    "SelectionPolicy",
    "assemble_options",
]
