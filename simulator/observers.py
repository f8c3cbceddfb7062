from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from rich.console import Console

from simulator.turing_machine import StepEvent, Symbol


class MachineObserver(ABC):
    """
    Consumer of machine notifications.
    The machine must be able to run with no observers attached.
    """

    @abstractmethod
    def on_step(self, event: StepEvent) -> None: ...

    @abstractmethod
    def on_halt(self, event: StepEvent) -> None: ...


@dataclass
class RecordingObserver(MachineObserver):
    """Keeps every notification in memory, for tests and replay comparisons."""

    steps: list = field(default_factory=list)
    halts: list = field(default_factory=list)

    def on_step(self, event):
        self.steps.append(event)

    def on_halt(self, event):
        self.halts.append(event)

    def observations(self):
        return [(e.state, e.symbol) for e in self.steps]


def symbol_char(symbol):
    return "_" if symbol is Symbol.BLANK else symbol.value


class ConsoleObserver(MachineObserver):
    def __init__(self, console=None, machine=None, window=10):
        self.console = console or Console()
        # When set, a window of the tape around the head is shown after each step
        self.machine = machine
        self.window = window

    def on_step(self, event):
        self.console.print(
            f"Current state: {event.state.name.title()}, Current symbol: {event.symbol.name.title()}",
            highlight=False,
        )
        if self.machine is not None:
            self.visualize()

    def on_halt(self, event):
        self.console.print("[bold green]The Turing machine has halted.[/bold green]")

    def visualize(self):
        """Display a small window around the head."""
        tape = self.machine.tape
        head = self.machine.position
        start = max(0, head - self.window)
        end = min(len(tape), head + self.window + 1)

        tape_str = " ".join(symbol_char(s) for s in tape[start:end])
        head_str = " ".join("^" if pos == head else " " for pos in range(start, end))
        self.console.print(tape_str, highlight=False)
        self.console.print(head_str.rstrip(), highlight=False)
