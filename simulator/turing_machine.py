import hashlib
import json
from collections import deque
from dataclasses import dataclass
from enum import Enum

import numpy as np


class State(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    HALT = "Halt"


class Symbol(str, Enum):
    ZERO = "0"
    ONE = "1"
    BLANK = "Blank"


class Move(str, Enum):
    LEFT = "L"
    RIGHT = "R"


class StepOutcome(str, Enum):
    CONTINUED = "continued"
    HALTED = "halted"


# Ordinals used by the dense array encoding
STATE_INDEX = {state: i for i, state in enumerate(s for s in State if s is not State.HALT)}
SYMBOL_INDEX = {symbol: i for i, symbol in enumerate(Symbol)}


class InvalidMachineError(ValueError):
    """Raised when a machine cannot be constructed from the given inputs."""


@dataclass(frozen=True)
class Transition:
    write: Symbol
    move: Move
    next_state: State


@dataclass(frozen=True)
class StepEvent:
    """What an observer sees after a step: the post-step state and head cell."""

    state: State
    symbol: Symbol
    position: int
    outcome: StepOutcome
    step: int


class RuleTable:
    """Read-only lookup from (state, symbol) to a transition.

    Later entries for the same key overwrite earlier ones. Missing keys are
    allowed; they are what makes a machine halt.
    """

    def __init__(self, entries=()):
        self._rules = {}
        for state, symbol, transition in entries:
            self._rules[(state, symbol)] = transition

    @classmethod
    def from_rows(cls, rows):
        """Build from loader rows of (state, symbol, write, move, next_state)."""
        return cls(
            (state, symbol, Transition(write, move, next_state))
            for state, symbol, write, move, next_state in rows
        )

    def lookup(self, state, symbol):
        return self._rules.get((state, symbol))

    def __len__(self):
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules.items())

    def __contains__(self, key):
        return key in self._rules

    def serialize(self):
        """Dense (write, dir_bit, next_state) rows, state-major; -1 marks a halt."""
        arr = np.full((len(STATE_INDEX) * len(SYMBOL_INDEX), 3), -1, dtype=np.int32)
        arr[:, 1] = 0
        for state, row_base in STATE_INDEX.items():
            for symbol, offset in SYMBOL_INDEX.items():
                transition = self.lookup(state, symbol)
                if transition is None:
                    continue
                dir_bit = 0 if transition.move is Move.LEFT else 1
                next_state = -1 if transition.next_state is State.HALT else STATE_INDEX[transition.next_state]
                arr[row_base * len(SYMBOL_INDEX) + offset] = (
                    SYMBOL_INDEX[transition.write],
                    dir_bit,
                    next_state,
                )
        return arr

    def ruleset_hash(self):
        """Hash the serialized rule table deterministically."""
        rules_json = json.dumps(self.serialize().tolist(), sort_keys=True)
        return hashlib.sha256(rules_json.encode("utf-8")).hexdigest()


class TuringMachine:
    def __init__(self, rules: RuleTable, initial_state: State, initial_tape, observers=()):
        tape = deque(initial_tape)
        if not tape:
            raise InvalidMachineError("Initial tape must contain at least one cell.")
        self.rules = rules
        self._state = initial_state
        self._tape = tape
        self._position = 0
        self.steps = 0
        self.observers = list(observers)

    @property
    def state(self) -> State:
        return self._state

    @property
    def position(self) -> int:
        return self._position

    @property
    def tape(self):
        return tuple(self._tape)

    @property
    def symbol(self) -> Symbol:
        return self._tape[self._position]

    @property
    def halted(self) -> bool:
        return self._state is State.HALT

    def _event(self, outcome):
        return StepEvent(self._state, self.symbol, self._position, outcome, self.steps)

    def step(self) -> StepEvent:
        if self.halted:
            return self._event(StepOutcome.HALTED)

        transition = self.rules.lookup(self._state, self.symbol)
        if transition is None:
            self._state = State.HALT
            event = self._event(StepOutcome.HALTED)
        else:
            self._tape[self._position] = transition.write
            self._state = transition.next_state
            if transition.move is Move.LEFT:
                if self._position == 0:
                    self._tape.appendleft(Symbol.BLANK)
                else:
                    self._position -= 1
            elif transition.move is Move.RIGHT:
                self._position += 1
                if self._position == len(self._tape):
                    self._tape.append(Symbol.BLANK)
            else:
                raise AssertionError(f"Unknown move {transition.move!r}")
            self.steps += 1
            event = self._event(StepOutcome.HALTED if self.halted else StepOutcome.CONTINUED)

        assert 0 <= self._position < len(self._tape), "head position left the tape"

        for observer in self.observers:
            observer.on_step(event)
        return event

    def run(self) -> int:
        """Step until halted. Returns the number of transitions applied."""
        start = self.steps
        while not self.halted:
            self.step()
        self.notify_halt()
        return self.steps - start

    def notify_halt(self):
        event = self._event(StepOutcome.HALTED)
        for observer in self.observers:
            observer.on_halt(event)
