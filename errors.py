class PersistenceError(Exception):
    """The booking store could not write the collection."""


class NotificationError(Exception):
    """A webhook call failed or timed out. Never leaves the dispatcher."""

    def __init__(self, channel, reason):
        super().__init__(f"{channel} notification failed: {reason}")
        self.channel = channel
        self.reason = reason
