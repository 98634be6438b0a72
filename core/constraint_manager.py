from typing import Callable
from core.entities import Shift
from core.state import CareHomeState
from exceptions.custom_errors import ShiftRuleError


class ConstraintManager:
    def __init__(self, state: CareHomeState):
        self.state = state
        self.rules: list[Callable] = []

    def add_rule(self, rule_func: Callable, condition: bool = True):
        """Register a rule with optional enablement condition."""
        if condition:
            self.rules.append(rule_func)

    def apply_all(self, shift: Shift):
        """Apply all registered rules in order; the first violation wins."""
        for rule in self.rules:
            message = rule(shift, self.state)
            if message:
                raise ShiftRuleError(message)
