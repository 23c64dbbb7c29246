"""Session state publisher for pub/sub event publishing."""

import logging
from typing import Callable
from pubsub import pub
from ..models.session import SessionSnapshot

logger = logging.getLogger(__name__)

STATE_TOPIC = "session.state"


def log_listener_error(listener_id: str, topic_obj) -> None:
    """pypubsub listener exception handler: log and let the remaining listeners run."""
    logger.error(f"Error in state listener {listener_id} for {topic_obj.getName()}", exc_info=True)


class StatePublisher:
    """Publishes session snapshots using pubsub.pub for presentation layers."""

    def __init__(self, topic: str = STATE_TOPIC):
        """Initialize state publisher.

        Args:
            topic: Pub/sub topic name for session snapshots
        """
        self.topic = topic
        pub.setListenerExcHandler(log_listener_error)
        logger.info(f"StatePublisher initialized with topic: {topic}")

    def publish_snapshot(self, snapshot: SessionSnapshot) -> None:
        """Publish a session snapshot to the pub/sub topic.

        A failing listener is logged by log_listener_error and the remaining
        listeners still receive the snapshot. Nothing propagates to the
        caller, which may be an engine event handler.

        Args:
            snapshot: SessionSnapshot to publish
        """
        try:
            pub.sendMessage(self.topic, snapshot=snapshot)
        except Exception as e:
            logger.error(f"Error publishing to {self.topic}: {e}", exc_info=True)
            return
        logger.debug(f"Published snapshot: {snapshot.status.value} ({snapshot.session_id})")

    def subscribe(self, listener: Callable[[SessionSnapshot], None]) -> None:
        """Subscribe a listener taking a single `snapshot` argument."""
        pub.subscribe(listener, self.topic)

    def unsubscribe(self, listener: Callable[[SessionSnapshot], None]) -> None:
        try:
            pub.unsubscribe(listener, self.topic)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")
