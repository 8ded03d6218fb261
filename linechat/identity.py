from __future__ import annotations

import logging

from linechat.models import RenameNotice

logger = logging.getLogger(__name__)


class SessionIdentity:
    """Who the local participant is, as requested locally and as confirmed by the server.

    A rename request takes effect locally at once but stays pending until the
    server reports a rename away from a name we hold: the confirmed name or the
    latest request. That notice is authoritative and replaces the pending
    request whatever its ``to`` side says. Before anything is confirmed the
    server still knows us by a name it picked, so an echo onto the pending
    request is accepted as confirmation regardless of its ``from`` side.
    """

    def __init__(self, confirmed: str | None = None):
        self.confirmed = confirmed
        self.pending: str | None = None

    def current(self) -> str | None:
        return self.pending or self.confirmed

    def request_rename(self, new_name: str) -> None:
        if new_name == self.current():
            return
        self.pending = None if new_name == self.confirmed else new_name
        logger.debug("Requested nickname %s", new_name)

    def observe_rename(self, event: RenameNotice) -> bool:
        """Reconcile against a server rename notice; returns True when it concerned us."""
        if self.confirmed is None and self.pending is not None:
            if event.to == self.pending:
                self._confirm(event.to)
                return True
        claimed = {name for name in (self.confirmed, self.current()) if name}
        if event.from_ not in claimed:
            return False
        if self.pending is not None and self.pending != event.to:
            logger.info(
                "Server renamed %s to %s; dropping requested nickname %s",
                event.from_,
                event.to,
                self.pending,
            )
        self._confirm(event.to)
        return True

    def _confirm(self, name: str) -> None:
        self.confirmed = name
        self.pending = None

    def is_self(self, identity: str) -> bool:
        current = self.current()
        return current is not None and identity == current
