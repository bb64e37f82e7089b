"""
Signals for post status changes.
"""
import logging

from django.dispatch import Signal, receiver

from .realtime import STATUS_UPDATE, relay

logger = logging.getLogger(__name__)

# Sent with: post (PostRecord), previous_status (str), updated_by (int)
post_status_changed = Signal()


class SignalStatusNotifier:
    """Notification channel backed by the ``post_status_changed`` signal."""

    def status_changed(self, post, previous_status, updated_by):
        post_status_changed.send(
            sender=self.__class__,
            post=post,
            previous_status=previous_status,
            updated_by=updated_by,
        )


@receiver(post_status_changed)
def broadcast_status_change(sender, post, previous_status, updated_by, **kwargs):
    """
    Push the new status to every connected client.
    Payload mirrors what clients emit themselves on ``status-changed``.
    """
    logger.info(
        "Post %s status %s -> %s by user %s",
        post.id, previous_status, post.status, updated_by
    )
    relay.broadcast(STATUS_UPDATE, {
        'postId': post.id,
        'status': post.status,
        'previousStatus': previous_status,
        'updatedBy': updated_by,
    })
