"""
Error taxonomy for the RSVP data-access layer
"""


class RSVPServiceError(Exception):
    """Base exception for RSVP service errors"""

    pass


class StoreNotInitializedError(RSVPServiceError):
    """Store client is not configured or could not be created"""

    def __init__(self, message: str = "Guest store client not initialized"):
        super().__init__(message)


class StoreQueryError(RSVPServiceError):
    """A query against the backing store failed"""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class GuestNotFoundError(RSVPServiceError):
    """Guest not found"""

    def __init__(self, guest_id):
        super().__init__(f"Guest {guest_id} not found")
        self.guest_id = guest_id


class CompanionCountError(RSVPServiceError, ValueError):
    """Companion count out of range or an attempt to raise it"""

    pass
