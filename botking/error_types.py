"""
Centralized error types and constants for BotKing.

Error codes are shared by the structured results returned from validation and
sync operations and by the exception hierarchy in botking.exceptions.
"""

from enum import Enum


class ErrorType(Enum):
    """Standardized error types for consistent categorization."""

    # Validation
    VALIDATION_ERROR = "validation_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_FORMAT = "invalid_format"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"

    # Resources
    RESOURCE_NOT_FOUND = "resource_not_found"
    RESOURCE_CONFLICT = "resource_conflict"

    # Artifact lifecycle
    CREATION_ERROR = "creation_error"
    CONVERSION_ERROR = "conversion_error"
    GAME_LOGIC_ERROR = "game_logic_error"

    # Persistence
    PERSISTENCE_ERROR = "persistence_error"

    # Configuration and system
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


class ErrorMessages:  # pylint: disable=too-few-public-methods
    """Standard error message strings reused across layers."""

    ALREADY_PERSISTED = "Artifact already has a persisted identity; use update instead"
    IDENTITY_REQUIRED = "Artifact has no identity; save it before updating"
    RECORD_NOT_FOUND = "Record not found"
    SLOT_OCCUPIED = "Slot is already occupied"
    INSTANCE_ALREADY_EQUIPPED = "Instance already occupies a slot"
    SLOT_INCOMPATIBLE = "Item class is not compatible with the slot"
    INSTANCE_EQUIPPED = "Instance is equipped and cannot be destroyed"
    TEMPLATE_NOT_FOUND = "Template not found"
    PLAYER_ACCOUNT_NOT_FOUND = "Player account not found"
