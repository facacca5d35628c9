"""
Message Audit Bot - Access Gate
===============================

Optional restriction of reporting to a single privileged user.
"""

from typing import Optional

from src.core.logger import logger


class AccessGate:
    """
    Decides whose messages are reported.

    DESIGN:
        With a privileged user configured, only that user's messages are
        reported. Without one the gate is open and a warning is logged
        once, when the gate is created.
    """

    def __init__(self, privileged_user_id: Optional[int]) -> None:
        self.privileged_user_id = privileged_user_id

        if privileged_user_id is None:
            logger.warning("Privileged User Not Configured", [
                ("Variable", "PRIVILEGED_USER_ID"),
                ("Fallback", "Reporting messages from all users"),
            ])

    @property
    def enabled(self) -> bool:
        return self.privileged_user_id is not None

    def allows(self, user_id: Optional[int]) -> bool:
        """Check whether messages from this author should be reported."""
        if not self.enabled:
            return True
        return user_id == self.privileged_user_id


__all__ = ["AccessGate"]
