"""
Set and game based sports: volleyball, badminton, table tennis.

Validates:
1. Incremental points and set/game completion with history
2. Score snapshots replace the current tally (syncScore and legacy "point")
3. Serve only accepts the sport's own side labels
"""

import pytest

from arena.scoring import SYNC_SCORE, InvalidAction, Sport, apply_action
from arena.scoring.records import RallyScore, VolleyballScore


def play(sport, actions, score=None):
    for action, side, details in actions:
        score = apply_action(sport, score, action, side, details)
    return score


class TestVolleyball:
    def test_point_increments_by_one(self):
        score = play(Sport.VOLLEYBALL, [("point", "teamA", {}), ("point", "teamA", {}), ("point", "teamB", {})])
        assert isinstance(score, VolleyballScore)
        assert score.team_a.points == 2
        assert score.team_b.points == 1

    def test_set_completion_records_history_and_resets(self):
        score = play(Sport.VOLLEYBALL, [("point", "teamA", {})] * 3 + [("point", "teamB", {}), ("set", "teamA", {})])
        assert score.set_scores == [{"teamA": 3, "teamB": 1}]
        assert score.team_a.sets == 1
        assert score.team_b.sets == 0
        assert score.current_set == 2
        assert score.team_a.points == 0
        assert score.team_b.points == 0

    def test_serve(self):
        score = play(Sport.VOLLEYBALL, [("serve", None, {"serving": "teamB"})])
        assert score.serving == "teamB"

    def test_serve_with_player_label_rejected(self):
        with pytest.raises(InvalidAction):
            play(Sport.VOLLEYBALL, [("serve", None, {"serving": "playerB"})])

    def test_game_is_not_a_volleyball_action(self):
        score = play(Sport.VOLLEYBALL, [("point", "teamA", {})])
        assert apply_action(Sport.VOLLEYBALL, score, "game", "teamA", {}) is score


class TestScoreSnapshot:
    def test_sync_replaces_points(self):
        score = play(Sport.VOLLEYBALL, [("point", "teamA", {})] * 5)
        score = apply_action(Sport.VOLLEYBALL, score, SYNC_SCORE, None, {"teamA": 12, "teamB": 14})
        assert score.team_a.points == 12
        assert score.team_b.points == 14
        assert score.team_a.sets == 0

    def test_legacy_point_with_snapshot_is_a_sync(self):
        score = apply_action(
            Sport.VOLLEYBALL,
            None,
            "point",
            "teamA",
            {"teamA": {"points": 20, "sets": 1}, "teamB": {"points": 18, "sets": 1}, "currentSet": 3},
        )
        assert score.team_a.points == 20
        assert score.team_a.sets == 1
        assert score.team_b.sets == 1
        assert score.current_set == 3

    def test_badminton_snapshot_accepts_team_labels(self):
        score = apply_action(Sport.BADMINTON, None, SYNC_SCORE, None, {"teamA": 7, "teamB": 9})
        assert score.player_a.points == 7
        assert score.player_b.points == 9

    def test_sync_requires_both_sides(self):
        with pytest.raises(InvalidAction):
            apply_action(Sport.TABLE_TENNIS, None, SYNC_SCORE, None, {"playerA": 3})

    def test_sync_rejects_non_numeric_points(self):
        with pytest.raises(InvalidAction):
            apply_action(Sport.VOLLEYBALL, None, SYNC_SCORE, None, {"teamA": "lots", "teamB": 1})

    def test_badminton_snapshot_maps_team_serving_label(self):
        score = apply_action(
            Sport.BADMINTON, None, SYNC_SCORE, None, {"playerA": 3, "playerB": 2, "serving": "teamB"}
        )
        assert score.serving == "playerB"

    def test_volleyball_snapshot_maps_player_serving_label(self):
        score = apply_action(Sport.VOLLEYBALL, None, SYNC_SCORE, None, {"teamA": 1, "teamB": 0, "serving": "playerB"})
        assert score.serving == "teamB"

    @pytest.mark.parametrize("serving", ["teamC", None, ""])
    def test_snapshot_rejects_unknown_serving(self, serving):
        with pytest.raises(InvalidAction):
            apply_action(Sport.TABLE_TENNIS, None, SYNC_SCORE, None, {"playerA": 3, "playerB": 2, "serving": serving})


class TestBadmintonAndTableTennis:
    @pytest.mark.parametrize("sport", [Sport.BADMINTON, Sport.TABLE_TENNIS])
    def test_game_completion(self, sport):
        score = play(sport, [("point", "playerB", {})] * 4 + [("point", "playerA", {}), ("game", "playerB", {})])
        assert isinstance(score, RallyScore)
        assert score.game_scores == [{"playerA": 1, "playerB": 4}]
        assert score.player_b.games == 1
        assert score.current_game == 2
        assert score.player_a.points == 0

    def test_team_label_scores_for_matching_player(self):
        score = play(Sport.BADMINTON, [("point", "teamB", {})])
        assert score.player_b.points == 1

    def test_default_serving_is_player_a(self):
        score = play(Sport.TABLE_TENNIS, [("point", "playerA", {})])
        assert score.serving == "playerA"

    def test_serve_with_team_label_rejected(self):
        with pytest.raises(InvalidAction):
            play(Sport.BADMINTON, [("serve", None, {"serving": "teamA"})])

    def test_wire_shape(self):
        data = play(Sport.TABLE_TENNIS, [("point", "playerA", {}), ("game", "playerA", {})]).to_dict()
        assert data["playerA"] == {"points": 0, "games": 1}
        assert data["currentGame"] == 2
        assert data["gameScores"] == [{"playerA": 1, "playerB": 0}]
