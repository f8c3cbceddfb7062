from pathlib import Path

from simulator.turing_machine import Move, RuleTable, State, Symbol

NUM_FIELDS = 5


class RuleParseError(ValueError):
    """Raised when a rule file fails validation. The whole load is rejected."""

    def __init__(self, source, line_number, message):
        super().__init__(f"{source}:{line_number}: {message}")
        self.source = source
        self.line_number = line_number


def _parse_enum(enum_cls, token, kind):
    try:
        return enum_cls(token)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Unknown {kind} token {token!r} (expected one of: {allowed})") from None


def parse_state(token):
    return _parse_enum(State, token.strip(), "state")


def parse_symbol(token):
    return _parse_enum(Symbol, token.strip(), "symbol")


def parse_move(token):
    return _parse_enum(Move, token.strip(), "move")


def parse_rule_line(line):
    """Parse 'state, symbol, write, move, next_state'. Blank and '#' lines give None."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    parts = stripped.split(",")
    if len(parts) != NUM_FIELDS:
        raise ValueError(f"Expected {NUM_FIELDS} comma-separated fields, got {len(parts)}")

    state = parse_state(parts[0])
    if state is State.HALT:
        raise ValueError("Rules cannot start from the Halt state")

    return (
        state,
        parse_symbol(parts[1]),
        parse_symbol(parts[2]),
        parse_move(parts[3]),
        parse_state(parts[4]),
    )


def parse_rules(lines, source="<string>"):
    rows = []
    for line_number, line in enumerate(lines, start=1):
        try:
            row = parse_rule_line(line)
        except ValueError as e:
            raise RuleParseError(source, line_number, str(e)) from e
        if row is not None:
            rows.append(row)
    return rows


def load_rules(path):
    """Load a rule file into a RuleTable."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        rows = parse_rules(f, source=str(path))

    return RuleTable.from_rows(rows)


def parse_tape(text):
    """Parse an initial tape from '0100', '0,1,Blank' or a list of tokens."""
    if isinstance(text, str):
        text = text.strip()
        if "," in text:
            tokens = text.split(",")
        elif all(ch in "01" for ch in text):
            tokens = list(text)
        else:
            tokens = [text]
    else:
        tokens = list(text)

    tape = [parse_symbol(token) for token in tokens if str(token).strip()]
    if not tape:
        raise ValueError("Initial tape must contain at least one symbol.")
    return tape
