"""Adaptive proximity search: session state, decision policies and the loop."""

from pyflexnotify.search.loop import SearchLoop
from pyflexnotify.search.policy import (
    Decision,
    DecisionKind,
    MatchPolicy,
    RadiusLadderPolicy,
    SingleShotPolicy,
    next_ladder_radius,
)
from pyflexnotify.search.session import SearchSession, SearchState, StopReason, validate_search_params

__all__ = [
    "Decision",
    "DecisionKind",
    "MatchPolicy",
    "RadiusLadderPolicy",
    "SearchLoop",
    "SearchSession",
    "SearchState",
    "SingleShotPolicy",
    "StopReason",
    "next_ladder_radius",
    "validate_search_params",
]
