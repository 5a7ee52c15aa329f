"""Evaluation mode: how the operator wants to watch evaluation. Owned by a Session and shared across every file and
prompt of that session; only #eager/#lazy and #deep/#shallow change it.
"""

from dataclasses import dataclass


@dataclass
class EvaluationMode:
    eager: bool = False  # evaluate arguments before substituting them
    deep: bool = False   # evaluate inside λ-abstractions

    def describe_strategy(self):
        return "eagerly" if self.eager else "lazily"

    def describe_scope(self):
        return "deeply" if self.deep else "shallowly"
