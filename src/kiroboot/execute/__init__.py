"""Execution gate for the trusted installer."""

from kiroboot.execute.gate import ExecutionGate

__all__ = ["ExecutionGate"]
