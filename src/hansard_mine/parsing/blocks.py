"""Segmenting a section into one text block per logical entry.

The splitter is a two-state machine driven by a transition table::

    (IDLE,     ENTRY_START) -> OPEN   -> IN_ENTRY
    (IDLE,     OTHER)       -> IGNORE -> IDLE
    (IN_ENTRY, ENTRY_START) -> SPLIT  -> IN_ENTRY
    (IN_ENTRY, OTHER)       -> APPEND -> IN_ENTRY

``SPLIT`` closes the open block only when it is longer than the minimum
length; shorter blocks absorb the line instead.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Pattern, Sequence, Tuple
import re

DEFAULT_MIN_BLOCK_LENGTH = 50


class SplitterState(Enum):
    IDLE = "idle"
    IN_ENTRY = "in_entry"


class LineKind(Enum):
    ENTRY_START = "entry_start"
    OTHER = "other"


class Action(Enum):
    OPEN = "open"
    IGNORE = "ignore"
    SPLIT = "split"
    APPEND = "append"


TRANSITIONS: Dict[Tuple[SplitterState, LineKind], Tuple[Action, SplitterState]] = {
    (SplitterState.IDLE, LineKind.ENTRY_START): (Action.OPEN, SplitterState.IN_ENTRY),
    (SplitterState.IDLE, LineKind.OTHER): (Action.IGNORE, SplitterState.IDLE),
    (SplitterState.IN_ENTRY, LineKind.ENTRY_START): (Action.SPLIT, SplitterState.IN_ENTRY),
    (SplitterState.IN_ENTRY, LineKind.OTHER): (Action.APPEND, SplitterState.IN_ENTRY),
}

HONORIFIC_START = re.compile(
    r"^(?:Yang\s+Berhormat|Tan\s+Sri|Tuan|Puan|Dato['’]?|Datuk|Dr\.|Ir\.|Ts\.)\s+[A-Z]"
)
NUMBERED_START = re.compile(r"^\d+\.\s+")

QUESTION_START_PATTERNS: Tuple[Pattern[str], ...] = (
    NUMBERED_START,
    re.compile(r"^(?:Soalan|Question)\s+\d+", re.IGNORECASE),
    HONORIFIC_START,
)
MOTION_START_PATTERNS: Tuple[Pattern[str], ...] = (
    HONORIFIC_START,
    re.compile(r"\b(?:mencadangkan|mengusulkan)\b", re.IGNORECASE),
)
BILL_START_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"^Rang\s+Undang[- ]undang\s+\S", re.IGNORECASE),
)


def classify_line(line: str, patterns: Sequence[Pattern[str]]) -> LineKind:
    if any(pattern.search(line) for pattern in patterns):
        return LineKind.ENTRY_START
    return LineKind.OTHER


@dataclass(slots=True)
class EntryBlockSplitter:
    """Split section text into entry blocks using ``start_patterns``."""

    start_patterns: Sequence[Pattern[str]]
    min_length: int = DEFAULT_MIN_BLOCK_LENGTH
    _blocks: List[str] = field(default_factory=list, init=False, repr=False)
    _current: List[str] = field(default_factory=list, init=False, repr=False)
    _state: SplitterState = field(default=SplitterState.IDLE, init=False, repr=False)

    @property
    def state(self) -> SplitterState:
        return self._state

    def reset(self) -> None:
        self._blocks = []
        self._current = []
        self._state = SplitterState.IDLE

    def feed(self, raw_line: str) -> Action:
        """Consume one line and return the action taken."""

        line = raw_line.strip()
        kind = classify_line(line, self.start_patterns)
        action, next_state = TRANSITIONS[(self._state, kind)]
        if action is Action.SPLIT and self._current_length() <= self.min_length:
            action = Action.APPEND
        if action is Action.OPEN:
            self._current = [line]
        elif action is Action.SPLIT:
            self._emit()
            self._current = [line]
        elif action is Action.APPEND:
            self._current.append(line)
        self._state = next_state
        return action

    def finish(self) -> List[str]:
        """Close the open block and return every emitted block."""

        if self._state is SplitterState.IN_ENTRY and self._current_length() > self.min_length:
            self._emit()
        blocks = self._blocks
        self.reset()
        return blocks

    def split(self, content: str) -> List[str]:
        self.reset()
        saw_entry = False
        for line in content.split("\n"):
            if self.feed(line) is not Action.IGNORE:
                saw_entry = True
        blocks = self.finish()
        if not saw_entry and content.strip():
            return [content.strip()]
        return blocks

    def _current_length(self) -> int:
        return len("\n".join(self._current))

    def _emit(self) -> None:
        block = "\n".join(self._current).strip()
        if block:
            self._blocks.append(block)
        self._current = []


def split_blocks(
    content: str,
    start_patterns: Sequence[Pattern[str]],
    *,
    min_length: int = DEFAULT_MIN_BLOCK_LENGTH,
) -> List[str]:
    return EntryBlockSplitter(start_patterns=start_patterns, min_length=min_length).split(content)


__all__ = [
    "Action",
    "BILL_START_PATTERNS",
    "DEFAULT_MIN_BLOCK_LENGTH",
    "EntryBlockSplitter",
    "LineKind",
    "MOTION_START_PATTERNS",
    "QUESTION_START_PATTERNS",
    "SplitterState",
    "TRANSITIONS",
    "classify_line",
    "split_blocks",
]
