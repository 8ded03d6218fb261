"""Inbound line grammar.

Lines are matched against an ordered table of rules; the first rule that
produces an event wins. Lines starting with ``*`` are checked against their
own sub-table (rename, join, leave) before falling back to a marked system
notice. Anything nothing else claims becomes an unmarked system notice that
carries the raw text, so classification never fails.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from linechat.models import (
    ChatMessage,
    ClassifiedEvent,
    JoinNotice,
    LeaveNotice,
    MembershipSnapshot,
    RenameNotice,
    SystemNotice,
)

SYSTEM_MARKER = "*"
USERS_PREFIX = "Users: "

RENAME_RE = re.compile(r"\* (\S+) is now (\S+) \*")
JOIN_RE = re.compile(r"\* (.+) joined \*")
LEAVE_RE = re.compile(r"\* (.+) left \*")
CHAT_RE = re.compile(r"\[([^\]]+)\]")
MEMBER_SPLIT_RE = re.compile(r",\s*")


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], str], ClassifiedEvent]

    def apply(self, line: str) -> ClassifiedEvent | None:
        match = self.pattern.match(line)
        if match is None:
            return None
        return self.build(match, line)


def _rename(match: re.Match[str], line: str) -> ClassifiedEvent:
    return RenameNotice(from_=match.group(1), to=match.group(2), raw=line)


def _join(match: re.Match[str], line: str) -> ClassifiedEvent:
    return JoinNotice(who=match.group(1), raw=line)


def _leave(match: re.Match[str], line: str) -> ClassifiedEvent:
    return LeaveNotice(who=match.group(1), raw=line)


def _chat(match: re.Match[str], line: str) -> ClassifiedEvent:
    body = line[match.end() :]
    if body.startswith(" "):
        body = body[1:]
    return ChatMessage(from_=match.group(1), body=body, raw=line)


def parse_members(listing: str) -> tuple[str, ...]:
    names = (part.strip() for part in MEMBER_SPLIT_RE.split(listing))
    return tuple(dict.fromkeys(name for name in names if name))


SYSTEM_RULES: tuple[Rule, ...] = (
    Rule("rename", RENAME_RE, _rename),
    Rule("join", JOIN_RE, _join),
    Rule("leave", LEAVE_RE, _leave),
)

CHAT_RULE = Rule("chat", CHAT_RE, _chat)


class LineClassifier:
    def __init__(
        self,
        system_rules: tuple[Rule, ...] = SYSTEM_RULES,
        chat_rule: Rule = CHAT_RULE,
    ):
        self.system_rules = system_rules
        self.chat_rule = chat_rule

    def classify(self, line: str) -> ClassifiedEvent:
        if line.startswith(SYSTEM_MARKER):
            for rule in self.system_rules:
                event = rule.apply(line)
                if event is not None:
                    return event
            return SystemNotice(text=line, marked=True, raw=line)

        if line.startswith(USERS_PREFIX):
            members = parse_members(line[len(USERS_PREFIX) :])
            return MembershipSnapshot(members=members, raw=line)

        event = self.chat_rule.apply(line)
        if event is not None:
            return event
        return SystemNotice(text=line, raw=line)


_default = LineClassifier()


def classify(line: str) -> ClassifiedEvent:
    return _default.classify(line)
