"""
Test helpers shared across poll-core test modules.
"""


class ScriptedOperation:
    """Operation returning a fixed script of outcomes, counting calls."""

    def __init__(self, *outcomes, clock=None, step=0.0):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.clock = clock
        self.step = step

    def __call__(self):
        self.calls += 1
        if self.clock is not None and self.step:
            self.clock.advance(self.step)
        if self.calls <= len(self.outcomes):
            outcome = self.outcomes[self.calls - 1]
        else:
            outcome = self.outcomes[-1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
