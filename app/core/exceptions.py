class InventoryException(Exception):
    """Base exception for the inventory admin core"""

    pass


class ConfigurationException(InventoryException):
    """Raised when admin bootstrap settings are missing or invalid"""

    pass


class UnauthorizedException(InventoryException):
    """Raised when the caller is not authenticated"""

    pass


class NotFoundException(InventoryException):
    """Raised when resource not found"""

    pass


class ForbiddenException(InventoryException):
    """Raised on privilege gate denial or a self-protection violation"""

    pass


class ValidationException(InventoryException):
    """Raised for malformed identifiers and empty required fields"""

    pass


class StoreException(InventoryException):
    """Raised when the persistence layer fails"""

    pass


class HashingException(InventoryException):
    """Raised when a password cannot be hashed"""

    pass


class PrivilegeUpdateIncompleteException(StoreException):
    """
    Raised when name/email were updated but the superuser flag was not.

    Setting the flag is idempotent, so callers can retry that step alone.
    """

    def __init__(self, user_id, message: str = "Superuser flag was not applied"):
        super().__init__(message)
        self.user_id = user_id
