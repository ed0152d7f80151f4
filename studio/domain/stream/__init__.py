"""Streaming response framing and payload decoding."""

from .decoder import OperationsPayload, decode_blueprint, decode_operations, extract_json_text
from .framer import BLUEPRINT_MARKER, OPERATIONS_MARKER, Frame, PayloadKind, StreamFramer, classify

__all__ = [
    "BLUEPRINT_MARKER",
    "OPERATIONS_MARKER",
    "Frame",
    "PayloadKind",
    "StreamFramer",
    "classify",
    "OperationsPayload",
    "extract_json_text",
    "decode_blueprint",
    "decode_operations",
]
