"""Availability use cases"""
from .create_rule import CreateAvailabilityRule
from .list_rules import ListAvailabilityRules
from .delete_rule import DeleteAvailabilityRule
from .get_availability import GetAvailability
from .dtos import (
    CreateAvailabilityRuleCommandDTO,
    AvailabilityRuleDTO,
    ListAvailabilityRulesResponseDTO,
    GetAvailabilityQueryDTO,
    WindowDTO,
    AvailabilityResponseDTO,
)

__all__ = [
    "CreateAvailabilityRule",
    "ListAvailabilityRules",
    "DeleteAvailabilityRule",
    "GetAvailability",
    "CreateAvailabilityRuleCommandDTO",
    "AvailabilityRuleDTO",
    "ListAvailabilityRulesResponseDTO",
    "GetAvailabilityQueryDTO",
    "WindowDTO",
    "AvailabilityResponseDTO",
]
