"""
ZMQ Broadcaster

Publishes guidance values and annotated frames to out-of-process consumers.
"""

import json
import time
from typing import Any, Dict, Optional

import zmq

from laneguide.detection.core.models import DetectionResult
from .messages import GuidanceMessage


class ResultBroadcaster:
    """
    Publisher: Broadcasts pipeline results.

    Publishes:
    - Guidance values (topic: 'guidance')
    - Annotated JPEG frames (topic: 'frame'), optional
    """

    def __init__(self,
                 bind_url: str = "tcp://*:5570",
                 send_frames: bool = False,
                 context: Optional[zmq.Context] = None):
        """
        Initialize broadcaster.

        Args:
            bind_url: ZMQ URL to bind publisher socket
            send_frames: Also publish the annotated frame of every result
            context: ZMQ context (optional, will create if not provided)
        """
        self.bind_url = bind_url
        self.send_frames = send_frames

        self.context = context if context else zmq.Context()
        self.owns_context = context is None

        self.socket = self.context.socket(zmq.PUB)
        # Drop old messages if a consumer is slow (real-time, not buffered)
        self.socket.setsockopt(zmq.SNDHWM, 10)
        self.socket.bind(bind_url)

        self.frame_id = 0
        self.message_count = 0
        self.start_time = time.time()

    def publish(self, result: DetectionResult) -> GuidanceMessage:
        """
        Publish one pipeline result.

        Returns:
            The guidance message that was sent
        """
        self.frame_id += 1
        message = GuidanceMessage.from_result(result, self.frame_id)

        self.socket.send_multipart([
            b'guidance',
            json.dumps(message.to_dict()).encode('utf-8'),
        ])
        self.message_count += 1

        if self.send_frames and result.processed_image:
            metadata = {
                'frame_id': self.frame_id,
                'timestamp': message.timestamp,
                'jpeg_size': len(result.processed_image),
            }
            self.socket.send_multipart([
                b'frame',
                json.dumps(metadata).encode('utf-8'),
                result.processed_image,
            ])

        return message

    def close(self):
        """Close the broadcaster and cleanup resources."""
        if self.socket:
            self.socket.close()
            self.socket = None
        if self.owns_context and self.context:
            self.context.term()
            self.context = None

    def get_stats(self) -> Dict[str, Any]:
        elapsed = time.time() - self.start_time
        rate = self.message_count / elapsed if elapsed > 0 else 0

        return {
            'message_count': self.message_count,
            'rate': rate,
            'bind_url': self.bind_url,
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
