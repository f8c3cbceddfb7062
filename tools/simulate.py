def simulate(machine, max_steps=0):
    """Run a machine, optionally under an external step limit.

    Returns (steps, halted) where steps counts transitions applied by this
    call. With max_steps == 0 the machine runs until it halts, which may be
    never.
    """
    if max_steps == 0:
        steps = machine.run()
        return steps, True

    start = machine.steps
    while not machine.halted and machine.steps - start < max_steps:
        machine.step()

    # The halting lookup applies no transition, so it does not count against the limit
    if not machine.halted and machine.rules.lookup(machine.state, machine.symbol) is None:
        machine.step()

    if machine.halted:
        machine.notify_halt()
    return machine.steps - start, machine.halted
