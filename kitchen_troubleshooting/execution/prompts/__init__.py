from .templates import Template
from .loader import render
from .escalation import build_escalation_messages, build_safety_alert

__all__ = ["Template", "render", "build_escalation_messages", "build_safety_alert"]
