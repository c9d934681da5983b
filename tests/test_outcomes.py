"""
Winning-condition evaluator.

Validates:
1. Each sport's conclusion rule, winner and reason
2. Match settings override best-of totals
3. No score record (or unknown sport) never concludes
4. Evaluation is a pure function: same input, same outcome
"""

from types import SimpleNamespace

import pytest

from arena.scoring import DRAW, Outcome, Sport, evaluate, evaluate_score, materialize_default


def score_of(sport, **changes):
    data = materialize_default(sport).to_dict()
    data.update(changes)
    return data


class TestCricket:
    def test_overs_completed_team_a_ahead(self):
        data = score_of(Sport.CRICKET, overs=20, teamA={"runs": 150, "wickets": 3}, teamB={"runs": 140, "wickets": 5})
        assert evaluate_score("cricket", data) == Outcome("teamA", "Overs completed")

    def test_overs_completed_tie_goes_to_team_b(self):
        data = score_of(Sport.CRICKET, overs=20, teamA={"runs": 120, "wickets": 3}, teamB={"runs": 120, "wickets": 5})
        assert evaluate_score("cricket", data) == Outcome("teamB", "Overs completed")

    def test_all_out_other_side_wins(self):
        data = score_of(Sport.CRICKET, overs=12, teamA={"runs": 80, "wickets": 10})
        assert evaluate_score("cricket", data) == Outcome("teamB", "All wickets taken")

    def test_team_b_all_out(self):
        data = score_of(Sport.CRICKET, overs=12, teamB={"runs": 80, "wickets": 10})
        assert evaluate_score("cricket", data) == Outcome("teamA", "All wickets taken")

    def test_in_progress(self):
        data = score_of(Sport.CRICKET, overs=19, balls=5)
        assert evaluate_score("cricket", data) is None


class TestFootball:
    def test_full_time_winner(self):
        data = score_of(Sport.FOOTBALL, time=90, teamA={"goals": 2}, teamB={"goals": 1})
        assert evaluate_score("football", data) == Outcome("teamA", "Full time")

    def test_full_time_draw(self):
        data = score_of(Sport.FOOTBALL, time=95)
        assert evaluate_score("football", data) == Outcome(DRAW, "Full time")

    def test_before_full_time(self):
        assert evaluate_score("football", score_of(Sport.FOOTBALL, time=89)) is None


class TestBasketball:
    def test_final_quarter_with_clock_at_threshold(self):
        data = score_of(Sport.BASKETBALL, quarter=4, time=12, teamB={"points": 90, "fouls": 0})
        assert evaluate_score("basketball", data) == Outcome("teamB", "Game completed")

    def test_default_clock_in_final_quarter_concludes(self):
        # The clock is in seconds but the threshold is 12
        data = score_of(Sport.BASKETBALL, quarter=4)
        assert evaluate_score("basketball", data) == Outcome(DRAW, "Game completed")

    def test_final_seconds_do_not_conclude(self):
        data = score_of(Sport.BASKETBALL, quarter=4, time=11)
        assert evaluate_score("basketball", data) is None

    def test_earlier_quarter(self):
        assert evaluate_score("basketball", score_of(Sport.BASKETBALL, quarter=3)) is None


class TestSetSports:
    def test_volleyball_default_best_of_three(self):
        data = score_of(Sport.VOLLEYBALL, teamA={"points": 0, "sets": 2})
        assert evaluate_score("volleyball", data) == Outcome("teamA", "Best of 3 sets completed")

    def test_volleyball_best_of_five_from_settings(self):
        data = score_of(Sport.VOLLEYBALL, teamB={"points": 0, "sets": 2})
        assert evaluate_score("volleyball", data, {"totalSets": 5}) is None
        data = score_of(Sport.VOLLEYBALL, teamB={"points": 0, "sets": 3})
        assert evaluate_score("volleyball", data, {"totalSets": 5}) == Outcome("teamB", "Best of 5 sets completed")

    def test_zero_total_falls_back_to_default(self):
        data = score_of(Sport.VOLLEYBALL, teamA={"points": 0, "sets": 2})
        assert evaluate_score("volleyball", data, {"totalSets": 0}) == Outcome("teamA", "Best of 3 sets completed")

    def test_badminton_default_best_of_three(self):
        data = score_of(Sport.BADMINTON, playerB={"points": 0, "games": 2})
        assert evaluate_score("badminton", data) == Outcome("playerB", "Best of 3 games completed")

    def test_table_tennis_default_best_of_five(self):
        data = score_of(Sport.TABLE_TENNIS, playerA={"points": 0, "games": 2})
        assert evaluate_score("table-tennis", data) is None
        data = score_of(Sport.TABLE_TENNIS, playerA={"points": 0, "games": 3})
        assert evaluate_score("table-tennis", data) == Outcome("playerA", "Best of 5 games completed")


class TestChess:
    @pytest.mark.parametrize("result,winner", [
        ("1-0", "teamA"),
        ("0-1", "teamB"),
        ("1/2-1/2", DRAW),
        ("teamA", "teamA"),
        ("teamB", "teamB"),
        ("draw", DRAW),
    ])
    def test_results(self, result, winner):
        data = score_of(Sport.CHESS, result=result)
        assert evaluate_score("chess", data) == Outcome(winner, "Game concluded")

    @pytest.mark.parametrize("result", [None, "ongoing"])
    def test_not_concluded(self, result):
        assert evaluate_score("chess", score_of(Sport.CHESS, result=result)) is None


class TestEdgeCases:
    @pytest.mark.parametrize("sport", [s.value for s in Sport])
    def test_no_score_record_never_concludes(self, sport):
        assert evaluate_score(sport, None) is None

    def test_unknown_sport(self):
        assert evaluate_score("curling", {"points": 3}) is None

    def test_evaluate_reads_match_fields(self):
        match = SimpleNamespace(
            sport="volleyball",
            score=score_of(Sport.VOLLEYBALL, teamA={"points": 0, "sets": 3}),
            match_settings={"totalSets": 5},
        )
        assert evaluate(match) == Outcome("teamA", "Best of 5 sets completed")

    def test_evaluation_is_repeatable(self):
        data = score_of(Sport.FOOTBALL, time=90, teamB={"goals": 1})
        assert evaluate_score("football", data) == evaluate_score("football", data)
