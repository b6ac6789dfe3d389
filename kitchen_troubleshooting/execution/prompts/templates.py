"""
Template name constants.

Pure constants - no I/O or file system knowledge.
"""


class Template:
    """Template name constants. Use these instead of raw strings."""

    ESCALATION_SYSTEM = "escalation_system"
    ESCALATION_REQUEST = "escalation_request"
    SAFETY_ALERT = "safety_alert"
