from __future__ import annotations

import logging
from collections.abc import Iterable

from linechat.models import (
    ChatMessage,
    ClassifiedEvent,
    JoinNotice,
    LeaveNotice,
    MembershipSnapshot,
    RenameNotice,
)

logger = logging.getLogger(__name__)


class PresenceSet:
    """Identities currently believed present, rebuilt from classified events."""

    def __init__(self, members: Iterable[str] = ()):
        self._members: frozenset[str] = frozenset(m for m in members if m)

    def apply_event(self, event: ClassifiedEvent) -> bool:
        """Apply one event; returns True when membership changed."""
        before = self._members
        if isinstance(event, MembershipSnapshot):
            after = frozenset(m for m in event.members if m)
        elif isinstance(event, JoinNotice):
            after = self._with(before, event.who)
        elif isinstance(event, LeaveNotice):
            after = before - {event.who}
        elif isinstance(event, RenameNotice):
            after = self._with(before - {event.from_}, event.to)
        elif isinstance(event, ChatMessage):
            after = self._with(before, event.from_)
        else:
            return False
        # Swap in one assignment so readers never see a half-applied rename.
        self._members = after
        if after != before:
            logger.debug("Presence changed via %s: %d members", event.kind, len(after))
            return True
        return False

    @staticmethod
    def _with(members: frozenset[str], identity: str) -> frozenset[str]:
        if not identity:
            return members
        return members | {identity}

    def view(self) -> list[str]:
        return sorted(self._members)

    def clear(self) -> None:
        self._members = frozenset()

    def __contains__(self, identity: object) -> bool:
        return identity in self._members

    def __len__(self) -> int:
        return len(self._members)
