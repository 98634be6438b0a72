class CareHomeError(Exception):
    """Base class for every domain rejection raised by the care home engine."""

    pass


class UnauthorizedError(CareHomeError):
    """Raised when the acting staff member is unknown, has the wrong role, or fails authentication."""

    pass


class NotRosteredError(CareHomeError):
    """Raised when the acting staff member holds no shift covering the action's timestamp."""

    pass


class NotFoundError(CareHomeError):
    """Raised when a staff member, bed, resident or prescription does not exist (or a bed is vacant)."""

    pass


class BedOccupiedError(CareHomeError):
    """Raised when a resident is assigned or moved into a bed that already has an occupant."""

    pass


class ShiftRuleError(CareHomeError):
    """Raised when a shift breaks a role legality rule or overlaps another shift of the same staff member."""

    pass


class RoomGenderConflictError(CareHomeError):
    """Raised when placing a resident would mix genders within one room."""

    pass


class ComplianceError(CareHomeError):
    """Raised when the staffing compliance audit finds at least one violation."""

    def __init__(self, report):
        self.report = report
        super().__init__(report.describe())


class ValidationError(CareHomeError):
    """Raised when an input value is out of range or malformed."""

    pass


class PersistenceError(CareHomeError):
    """Raised when a snapshot cannot be written or restored."""

    pass


# Mapping of custom exceptions to HTTP status codes
CUSTOM_ERRORS = {
    UnauthorizedError: 403,
    NotRosteredError: 403,
    NotFoundError: 404,
    BedOccupiedError: 409,
    ShiftRuleError: 422,
    RoomGenderConflictError: 409,
    ComplianceError: 422,
    ValidationError: 400,
    PersistenceError: 500,
}
