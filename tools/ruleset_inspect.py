import argparse

from rich.console import Console
from rich.table import Table

from simulator.turing_machine import STATE_INDEX, SYMBOL_INDEX, Move, State
from tools.rules_loader import load_rules

STATES = list(STATE_INDEX)
SYMBOLS = list(SYMBOL_INDEX)


def format_action(row):
    """Compact busy-beaver notation for one serialized row, e.g. '1RB'."""
    write, dir_bit, next_state = (int(v) for v in row)
    if write == -1:
        return "HALT"
    move = Move.LEFT if dir_bit == 0 else Move.RIGHT
    next_label = State.HALT.value if next_state == -1 else STATES[next_state].value
    return f"{SYMBOLS[write].value}{move.value}{next_label}"


def transition_rows(rules):
    """One row of actions per non-halt state, one column per symbol."""
    arr = rules.serialize()
    rows = []
    for state, row_base in STATE_INDEX.items():
        base = row_base * len(SYMBOLS)
        rows.append((state, [format_action(arr[base + i]) for i in range(len(SYMBOLS))]))
    return rows


def build_table(rules):
    table = Table(title="Transition Table", show_header=True, header_style="bold magenta")
    table.add_column("State", justify="center")
    for symbol in SYMBOLS:
        table.add_column(symbol.value, justify="center")

    for state, actions in transition_rows(rules):
        cells = [f"[red]{a}[/red]" if a == "HALT" else a for a in actions]
        table.add_row(state.value, *cells)
    return table


def latex_table(rules):
    lines = [r"\begin{array}{c|" + "c" * len(SYMBOLS) + "}"]
    lines.append("State/Symbol & " + " & ".join(f"\\text{{{s.value}}}" for s in SYMBOLS) + r" \\ \hline")
    for state, actions in transition_rows(rules):
        lines.append(" & ".join([state.value] + actions) + r" \\")
    lines.append(r"\end{array}")
    return "\n".join(lines)


def print_ruleset(rules, console=None, latex=False):
    console = console or Console()
    console.print(build_table(rules))
    console.print(f"{len(rules)} rules, hash {rules.ruleset_hash()[:12]}", highlight=False)
    if latex:
        console.print("\n=== LaTeX Table ===")
        console.print(latex_table(rules), markup=False, highlight=False)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Rule Table Inspector")
    parser.add_argument("--rules", default="rules.txt", help="Path to the rule file")
    parser.add_argument("--latex", action="store_true", help="Also print a LaTeX array")
    args = parser.parse_args(argv)

    print_ruleset(load_rules(args.rules), latex=args.latex)


if __name__ == "__main__":
    main()
