from typing import Optional, Any

class PhoneVerifyError(Exception):
    """
    Base exception for the Phone Verify application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class MissingPhoneError(PhoneVerifyError):
    """
    Raised when the request carries no phone number.
    """
    def __init__(self, message: str = "Phone required", details: Optional[Any] = None):
        super().__init__(message, code="MISSING_PHONE", status_code=400, details=details)

class InvalidPhoneError(PhoneVerifyError):
    """
    Raised when the phone number cannot be parsed as a valid number.
    """
    def __init__(self, message: str = "Phone invalid", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_PHONE", status_code=400, details=details)

class RateLimitExceededError(PhoneVerifyError):
    """
    Raised when too many verifications were issued for a phone recently.
    """
    def __init__(self, message: str = "Rate limit", details: Optional[Any] = None):
        super().__init__(message, code="RATE_LIMIT_EXCEEDED", status_code=429, details=details)

class PersistenceError(PhoneVerifyError):
    """
    Raised when the verification store is unreachable or a conflicting
    write could not be resolved by its single re-read.
    """
    def __init__(self, message: str = "Could not store verification", details: Optional[Any] = None):
        super().__init__(message, code="PERSISTENCE_FAILURE", status_code=500, details=details)

class DeliveryError(PhoneVerifyError):
    """
    Raised when the SMS provider rejects or times out on a message.
    """
    def __init__(self, message: str = "Could not deliver verification code", details: Optional[Any] = None):
        super().__init__(message, code="DELIVERY_FAILURE", status_code=502, details=details)

class VersionConflictError(Exception):
    """
    Raised by the repository when a conditional insert loses to a concurrent
    writer: (phone, version) already exists.
    """
    def __init__(self, phone: str, version: int):
        self.phone = phone
        self.version = version
        super().__init__(f"Version {version} already exists")
