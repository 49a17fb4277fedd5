"""Statement outcomes.

Executing a statement yields one of three outcomes: it completed
normally, it hit `return` (carrying the returned value), or it hit
`break`. Blocks stop at the first outcome that is not normal and hand it
to their caller; `loop` absorbs `BREAK` and a function call absorbs
`RETURN`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .types import UNIT


class Flow(Enum):
    NORMAL = 'normal'
    RETURN = 'return'
    BREAK = 'break'


@dataclass(frozen=True)
class Outcome:
    flow: Flow
    value: Any = UNIT

    @property
    def is_normal(self) -> bool:
        return self.flow is Flow.NORMAL

    @staticmethod
    def normal(value: Any = UNIT) -> 'Outcome':
        return Outcome(Flow.NORMAL, value)

    @staticmethod
    def returning(value: Any) -> 'Outcome':
        return Outcome(Flow.RETURN, value)


NORMAL = Outcome(Flow.NORMAL)
BREAK = Outcome(Flow.BREAK)
