"""Business logic services for the download gate."""

from .captcha import HumanVerificationGateway
from .gate_token import GateTokenAuthority, is_gate_token_format
from .telemetry import TelemetryRecorder

__all__ = [
    "GateTokenAuthority",
    "HumanVerificationGateway",
    "TelemetryRecorder",
    "is_gate_token_format",
]
