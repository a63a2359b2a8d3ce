from .interface import StepperInterface
from .dp_stepper import CellState, CellStep, DPStepper
from .backtrack import BacktrackDecision, BacktrackStepper, build_decisions
from .greedy import FractionalStepper, GreedyPlan, PlanEntry, RowState, compute_plan
from .autoplay import AutoPlayer
from .session import KnapsackSession, SessionView, TARGETS

__all__ = [
    "StepperInterface",
    "CellState",
    "CellStep",
    "DPStepper",
    "BacktrackDecision",
    "BacktrackStepper",
    "build_decisions",
    "FractionalStepper",
    "GreedyPlan",
    "PlanEntry",
    "RowState",
    "compute_plan",
    "AutoPlayer",
    "KnapsackSession",
    "SessionView",
    "TARGETS",
]
