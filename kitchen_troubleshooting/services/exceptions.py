"""
Service Layer Exceptions

Custom exceptions for the TroubleshootingService and related orchestration logic.
"""


class SessionNotFoundError(ValueError):
    """Raised when a session ID does not match any live troubleshooting session."""
    pass
