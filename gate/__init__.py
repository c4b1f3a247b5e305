"""
Readiness Gate Package
Waits for validator progress and funds the deployer with bounded retries
"""

from .readiness_gate import (
    ReadinessGate,
    RetryLadder,
    GateResult,
    FundingState,
    GateError,
    ExhaustedError,
    StartupTimeoutError
)
from .progress_source import HorizonProgressSource

__all__ = [
    'ReadinessGate',
    'RetryLadder',
    'GateResult',
    'FundingState',
    'GateError',
    'ExhaustedError',
    'StartupTimeoutError',
    'HorizonProgressSource'
]
