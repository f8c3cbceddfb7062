# app.py

import argparse
import sys

from rich.console import Console
from rich.markup import escape

from config.config_loader import load_config, validate_config
from logger.logger import JSONLogger
from simulator.observers import ConsoleObserver
from simulator.turing_machine import TuringMachine
from tools.rules_loader import load_rules, parse_state, parse_tape
from tools.ruleset_inspect import print_ruleset
from tools.simulate import simulate

console = Console()


# === Utilities ===
def apply_overrides(config, args):
    """CLI flags win over the config file."""
    overrides = {
        "rules_file": args.rules,
        "initial_tape": args.tape,
        "initial_state": args.state,
        "max_steps": args.max_steps,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    if args.quiet:
        config["log_steps"] = False
    if args.show_tape:
        config["show_tape"] = True
    if args.log:
        config["write_log"] = True
    return config


def build_machine(config, rules, out=None):
    machine = TuringMachine(
        rules,
        parse_state(config["initial_state"]),
        parse_tape(config["initial_tape"]),
    )
    if config["log_steps"]:
        observer = ConsoleObserver(console=out or console)
        if config["show_tape"]:
            observer.machine = machine
        machine.observers.append(observer)
    return machine


def plural(count, word):
    return f"{count:,} {word}" if count == 1 else f"{count:,} {word}s"


def format_tape(machine):
    return ",".join(symbol.value for symbol in machine.tape)


# === Run ===
def run(config, out=None):
    out = out or console
    rules = load_rules(config["rules_file"])
    print_ruleset(rules, console=out)

    machine = build_machine(config, rules, out=out)

    json_logger = None
    if config["write_log"]:
        json_logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
        machine.observers.append(json_logger)

    steps, halted = simulate(machine, max_steps=config["max_steps"])

    if json_logger is not None:
        json_logger.log_summary(machine)

    if halted:
        out.print(f"[green]Halted after {plural(steps, 'step')}.[/green] Final tape: {format_tape(machine)}", highlight=False)
    else:
        out.print(
            f"[yellow]Did not halt within {plural(config['max_steps'], 'step')}.[/yellow] "
            f"State: {machine.state.value}, tape: {format_tape(machine)}",
            highlight=False,
        )
    return machine


def main(argv=None):
    parser = argparse.ArgumentParser(description="Deterministic single-tape Turing machine simulator")
    parser.add_argument("--config", help="Path to a JSON run configuration")
    parser.add_argument("--rules", help="Rule file (state, symbol, write, move, next_state per line)")
    parser.add_argument("--tape", help="Initial tape, e.g. 0100 or 0,1,Blank")
    parser.add_argument("--state", help="Initial state (A, B, C)")
    parser.add_argument("--max-steps", type=int, dest="max_steps", help="Stop after this many steps (0 = no limit)")
    parser.add_argument("--inspect", action="store_true", help="Print the rule table and exit")
    parser.add_argument("--quiet", action="store_true", help="Do not print every step")
    parser.add_argument("--show-tape", action="store_true", dest="show_tape", help="Print the tape around the head after each step")
    parser.add_argument("--log", action="store_true", help="Write steps and a summary as JSON lines")
    args = parser.parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
        validate_config(config)
        if args.inspect:
            print_ruleset(load_rules(config["rules_file"]), console=console, latex=True)
            return 0
        run(config)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
