"""Registration domain exports"""

from .exceptions import (
    CapacityInvariantViolation,
    DuplicateRegistrationError,
    InvalidRegistrationError,
    RegistrationClosedError,
    RegistrationError,
    RegistrationNotFoundError,
)
from .models import RegistrationRecord, RegularPlayerRecord, Roster, check_positions, guest_display_name
from .service import RegistrationService, RosterEdit

__all__ = [
    "CapacityInvariantViolation",
    "DuplicateRegistrationError",
    "InvalidRegistrationError",
    "RegistrationClosedError",
    "RegistrationError",
    "RegistrationNotFoundError",
    "RegistrationRecord",
    "RegistrationService",
    "RegularPlayerRecord",
    "Roster",
    "RosterEdit",
    "check_positions",
    "guest_display_name",
]
