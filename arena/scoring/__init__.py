"""
Per-sport scoring: score records, the transition engine and the
winning-condition evaluator.

Usage:
    from arena.scoring import Sport, apply_action, evaluate_score

    score = apply_action(Sport.CRICKET, None, "runs", "teamA", {"runs": 2})
    outcome = evaluate_score(Sport.CRICKET, score.to_dict())
"""

from arena.scoring.outcomes import DRAW, Outcome, evaluate, evaluate_score
from arena.scoring.records import (
    INDIVIDUAL_SPORTS,
    SCORE_TYPES,
    ScoreRecord,
    Sport,
    load_score,
    materialize_default,
    side_labels,
)
from arena.scoring.transitions import (
    ACTIONS,
    SYNC_SCORE,
    InvalidAction,
    apply_action,
    is_known_action,
)

__all__ = [
    "ACTIONS",
    "DRAW",
    "INDIVIDUAL_SPORTS",
    "SCORE_TYPES",
    "SYNC_SCORE",
    "InvalidAction",
    "Outcome",
    "ScoreRecord",
    "Sport",
    "apply_action",
    "evaluate",
    "evaluate_score",
    "is_known_action",
    "load_score",
    "materialize_default",
    "side_labels",
]
