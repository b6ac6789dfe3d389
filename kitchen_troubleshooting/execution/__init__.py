"""
Execution Layer - Flow Compilation and State Machine

Defines the InteractiveStep compiler, the pure flow reducer, progress
selectors and the FlowStore that owns one session's state.
"""

from kitchen_troubleshooting.execution.compiler import compile_step, compile_steps
from kitchen_troubleshooting.execution.progress import FlowProgress, get_progress
from kitchen_troubleshooting.execution.reducer import reduce_flow
from kitchen_troubleshooting.execution.store import FlowStore


__all__ = [
    "FlowProgress",
    "FlowStore",
    "compile_step",
    "compile_steps",
    "get_progress",
    "reduce_flow",
]
