import json
import os
from datetime import datetime, timezone

from simulator.observers import MachineObserver


class JSONLogger(MachineObserver):
    """Writes machine steps and run summaries as JSON lines."""

    def __init__(self, output_directory="logs/", log_file_prefix="turing_", batch_size=1000):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        self.batch_size = batch_size
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()
        self._pending = []

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def log(self, entry: dict):
        """Log a single entry to the main log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")

    def log_batch(self, entries: list):
        """Log a batch of entries to the main log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def flush(self):
        if self._pending:
            self.log_batch(self._pending)
            self._pending = []

    def on_step(self, event):
        self._pending.append({
            "event": "step",
            "step": event.step,
            "state": event.state.value,
            "symbol": event.symbol.value,
            "position": event.position,
            "outcome": event.outcome.value,
        })
        if len(self._pending) >= self.batch_size:
            self.flush()

    def on_halt(self, event):
        self.flush()

    def log_summary(self, machine):
        """Log the outcome of a run (halted or not, steps, final tape)."""
        self.flush()
        self.log({
            "event": "summary",
            "ruleset_hash": machine.rules.ruleset_hash(),
            "steps": machine.steps,
            "halted": machine.halted,
            "final_state": machine.state.value,
            "position": machine.position,
            "tape": [symbol.value for symbol in machine.tape],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })
