"""
ZMQ Integration for lane guidance

Publishes pipeline results so guidance (speech/haptics) and rendering
consumers can run in their own processes.

Public API:
    - ResultBroadcaster: PUB socket for guidance values and frames
    - GuidanceMessage: Guidance message
"""

from .broadcaster import ResultBroadcaster
from .messages import GuidanceMessage

__all__ = [
    "ResultBroadcaster",
    "GuidanceMessage",
]
