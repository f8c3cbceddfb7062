import pytest

from simulator.observers import RecordingObserver
from simulator.turing_machine import (
    InvalidMachineError,
    Move,
    RuleTable,
    State,
    StepOutcome,
    Symbol,
    Transition,
    TuringMachine,
)

A, B, C, HALT = State.A, State.B, State.C, State.HALT
ZERO, ONE, BLANK = Symbol.ZERO, Symbol.ONE, Symbol.BLANK
L, R = Move.LEFT, Move.RIGHT


def make_table(*rows):
    return RuleTable.from_rows(rows)


def bouncing_table():
    """Walks right writing ones, then walks back left over them, then halts on blank."""
    return make_table(
        (A, ZERO, ONE, R, A),
        (A, BLANK, ONE, L, B),
        (B, ONE, ONE, L, B),
        (B, ZERO, ZERO, L, C),
        (C, ONE, ZERO, R, C),
    )


def test_single_step_writes_moves_right_and_grows_tape():
    machine = TuringMachine(make_table((A, ZERO, ONE, R, B)), A, [ZERO])

    event = machine.step()

    assert machine.tape == (ONE, BLANK)
    assert machine.position == 1
    assert machine.state is B
    assert event.outcome is StepOutcome.CONTINUED
    assert (event.state, event.symbol) == (B, BLANK)


def test_left_edge_growth_keeps_head_at_new_first_cell():
    machine = TuringMachine(make_table((A, ZERO, ZERO, L, A)), A, [ZERO])

    machine.step()

    assert machine.tape == (BLANK, ZERO)
    assert machine.position == 0
    assert machine.state is A


def test_left_move_inside_tape_decrements_position():
    table = make_table((A, ZERO, ONE, R, B), (B, ZERO, ZERO, L, A))
    machine = TuringMachine(table, A, [ZERO, ZERO])

    machine.step()
    machine.step()

    assert machine.position == 0
    assert machine.tape == (ONE, ZERO)
    assert machine.state is A


def test_full_run_halts_on_undefined_transition_mid_run():
    table = make_table((A, ZERO, ONE, R, B), (B, ONE, ZERO, R, HALT))
    machine = TuringMachine(table, A, [ZERO, ZERO])

    steps = machine.run()

    assert steps == 1
    assert machine.state is HALT
    assert machine.tape == (ONE, ZERO)
    assert machine.position == 1


def test_missing_rule_halts_without_writing():
    machine = TuringMachine(make_table((A, ONE, ZERO, R, A)), A, [ZERO, ONE])

    event = machine.step()

    assert event.outcome is StepOutcome.HALTED
    assert machine.state is HALT
    assert machine.tape == (ZERO, ONE)
    assert machine.position == 0
    assert machine.steps == 0


def test_explicit_transition_into_halt_is_applied():
    machine = TuringMachine(make_table((A, ZERO, ONE, L, HALT)), A, [ZERO])

    event = machine.step()

    assert event.outcome is StepOutcome.HALTED
    assert machine.tape == (BLANK, ONE)
    assert machine.steps == 1
    assert machine.run() == 0


def test_step_after_halt_is_a_no_op():
    recorder = RecordingObserver()
    machine = TuringMachine(RuleTable(), A, [ONE], observers=[recorder])
    machine.step()
    assert machine.halted
    tape, position = machine.tape, machine.position

    for _ in range(3):
        event = machine.step()
        assert event.outcome is StepOutcome.HALTED

    assert machine.state is HALT
    assert machine.tape == tape
    assert machine.position == position
    assert len(recorder.steps) == 1


def test_starting_in_halt_runs_zero_steps():
    recorder = RecordingObserver()
    machine = TuringMachine(bouncing_table(), HALT, [ZERO], observers=[recorder])

    assert machine.run() == 0
    assert recorder.steps == []
    assert len(recorder.halts) == 1
    assert machine.tape == (ZERO,)


def test_empty_tape_is_rejected():
    with pytest.raises(InvalidMachineError):
        TuringMachine(bouncing_table(), A, [])


def test_position_stays_valid_and_tape_never_shrinks():
    machine = TuringMachine(bouncing_table(), A, [ZERO, ZERO, ZERO])

    previous_length = len(machine.tape)
    for _ in range(50):
        if machine.halted:
            break
        machine.step()
        assert 0 <= machine.position < len(machine.tape)
        assert len(machine.tape) >= previous_length
        previous_length = len(machine.tape)

    assert machine.halted


def test_repeated_runs_produce_identical_observations():
    table = bouncing_table()

    def observe():
        recorder = RecordingObserver()
        TuringMachine(table, A, [ZERO, ZERO, ZERO], observers=[recorder]).run()
        return recorder.observations()

    first = observe()
    assert first
    assert observe() == first


def test_run_notifies_every_step_then_halt():
    recorder = RecordingObserver()
    machine = TuringMachine(bouncing_table(), A, [ZERO, ZERO], observers=[recorder])

    steps = machine.run()

    # the final failed lookup is observed too
    assert len(recorder.steps) == steps + 1
    assert [e.step for e in recorder.steps[:steps]] == list(range(1, steps + 1))
    assert recorder.steps[-1].outcome is StepOutcome.HALTED
    assert len(recorder.halts) == 1
    assert recorder.halts[0].state is HALT


def test_rule_table_can_be_shared_between_machines():
    table = bouncing_table()
    first = TuringMachine(table, A, [ZERO])
    second = TuringMachine(table, A, [ZERO, ZERO])

    first.run()

    assert second.tape == (ZERO, ZERO)
    assert second.state is A
    assert len(table) == 5


def test_rule_table_later_duplicate_wins():
    table = RuleTable([
        (A, ZERO, Transition(ONE, R, B)),
        (A, ZERO, Transition(ZERO, L, C)),
    ])

    assert len(table) == 1
    assert table.lookup(A, ZERO) == Transition(ZERO, L, C)
    assert table.lookup(A, ONE) is None
    assert (A, ZERO) in table
    assert list(table) == [((A, ZERO), Transition(ZERO, L, C))]


def test_serialize_encodes_missing_rules_as_halt_rows():
    table = make_table((A, ZERO, ONE, R, B), (C, BLANK, ZERO, L, HALT))

    arr = table.serialize()

    assert arr.shape == (9, 3)
    assert arr[0].tolist() == [1, 1, 1]
    assert arr[1].tolist() == [-1, 0, -1]
    assert arr[8].tolist() == [0, 0, -1]


def test_ruleset_hash_depends_only_on_rules():
    first = make_table((A, ZERO, ONE, R, B), (B, ONE, ZERO, R, A))
    second = make_table((B, ONE, ZERO, R, A), (A, ZERO, ONE, R, B))
    other = make_table((A, ZERO, ONE, L, B))

    assert first.ruleset_hash() == second.ruleset_hash()
    assert first.ruleset_hash() != other.ruleset_hash()
