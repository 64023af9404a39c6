from datetime import datetime, timezone

from cricketmanager.controllers.scheduling import (
    MatchScheduler,
    PairingHistory,
    ResultRecorder,
)
from cricketmanager.models import ErrorKind, Match, MatchStatus, Ref, Team, Tournament

SLOT = datetime(2026, 5, 2, 10, 0)


def _tournament(*team_ids, title="City League"):
    return Tournament(
        id="tour1",
        title=title,
        max_teams=8,
        teams=[Ref(t, Team(t, f"Team {t.upper()}")) for t in team_ids],
    )


def _match(match_id, x, y, status=MatchStatus.SCHEDULED, when=SLOT, winner=None):
    return Match(
        match_id,
        Ref("tour1"),
        Ref(x),
        Ref(y),
        match_date=when,
        status=status,
        winner=Ref(winner) if winner else None,
    )


# ========== Fixtures ==========


def test_fixture_between_roster_teams():
    outcome = MatchScheduler().validate_fixture(
        _tournament("a", "b"), [], "a", {"_id": "b"}, "2026-05-02T10:00:00", final=True
    )
    assert outcome
    assert outcome.value.to_payload() == {
        "tournamentId": "tour1",
        "opponentX": "a",
        "opponentY": "b",
        "matchDate": "2026-05-02T10:00:00",
        "semifinal": False,
        "final": True,
    }


def test_self_match_is_rejected_before_anything_else():
    outcome = MatchScheduler().validate_fixture(_tournament(), [], "a", "a", SLOT)
    assert outcome.kind == ErrorKind.SELF_MATCH


def test_empty_roster_has_no_teams_available():
    outcome = MatchScheduler().validate_fixture(_tournament(), [], "a", "b", SLOT)
    assert outcome.kind == ErrorKind.NO_TEAMS_AVAILABLE


def test_opponent_outside_roster():
    outcome = MatchScheduler().validate_fixture(_tournament("a", "b"), [], "a", "c", SLOT)
    assert outcome.kind == ErrorKind.INVALID_REFERENCE


def test_missing_opponent_or_date():
    scheduler = MatchScheduler()
    tournament = _tournament("a", "b")
    assert scheduler.validate_fixture(tournament, [], "a", None, SLOT).kind == (
        ErrorKind.VALIDATION_FAILED
    )
    assert scheduler.validate_fixture(tournament, [], "a", "b", "").kind == (
        ErrorKind.VALIDATION_FAILED
    )


def test_slot_conflict_for_booked_team():
    tournament = _tournament("a", "b", "c", "d")
    matches = [_match("m1", "a", "b")]
    outcome = MatchScheduler().validate_fixture(tournament, matches, "c", "a", SLOT)
    assert outcome.kind == ErrorKind.SLOT_CONFLICT
    assert "Team A" in outcome.error.detail

    # A different slot, or a finished match in the same slot, is fine
    assert MatchScheduler().validate_fixture(
        tournament, matches, "c", "a", datetime(2026, 5, 2, 14, 0)
    )
    finished = [_match("m1", "a", "b", status=MatchStatus.ABANDONED)]
    assert MatchScheduler().validate_fixture(tournament, finished, "c", "a", SLOT)


def test_slot_conflict_across_utc_and_naive_times():
    tournament = _tournament("a", "b", "c")
    matches = [_match("m1", "a", "b")]
    outcome = MatchScheduler().validate_fixture(
        tournament, matches, "c", "a", "2026-05-02T10:00:00Z"
    )
    assert outcome.kind == ErrorKind.SLOT_CONFLICT

    utc_slot = datetime(2026, 5, 2, 10, 0, tzinfo=timezone.utc)
    aware = [_match("m1", "a", "b", when=utc_slot)]
    outcome = MatchScheduler().validate_fixture(
        tournament, aware, "c", "b", "2026-05-02T15:30:00+05:30"
    )
    assert outcome.kind == ErrorKind.SLOT_CONFLICT


def test_slot_conflicts_can_be_disabled():
    tournament = _tournament("a", "b", "c")
    matches = [_match("m1", "a", "b")]
    scheduler = MatchScheduler(enforce_slot_conflicts=False)
    assert scheduler.validate_fixture(tournament, matches, "c", "a", SLOT)


# ========== Pairings ==========


def test_pairing_history_counts_meetings():
    history = PairingHistory.from_matches(
        [
            _match("m1", "a", "b", status=MatchStatus.COMPLETED, winner="a"),
            _match("m2", "b", "a"),
            _match("m3", "a", "c", status=MatchStatus.ABANDONED),
        ]
    )
    assert history.meeting_count("b", "a") == 2
    assert history.have_played("a", "b")
    assert not history.have_played("a", "c")
    assert history.has_open_fixture("a", "b")
    assert history.matches_played["a"] == 2
    assert history.slot_taken("b", SLOT)
    assert not history.slot_taken("c", SLOT)


def test_propose_pairings_prefers_new_opponents():
    tournament = _tournament("a", "b", "c", "d")
    matches = [
        _match("m1", "a", "b", status=MatchStatus.COMPLETED, winner="a"),
        _match("m2", "c", "d", status=MatchStatus.COMPLETED, winner="d"),
    ]
    outcome = MatchScheduler().propose_pairings(tournament, matches)
    assert outcome.value == [("a", "c"), ("b", "d")]


def test_propose_pairings_first_round_follows_roster_order():
    outcome = MatchScheduler().propose_pairings(_tournament("a", "b", "c", "d", "e"), [])
    assert outcome.value == [("a", "b"), ("c", "d")]
    limited = MatchScheduler().propose_pairings(_tournament("a", "b", "c", "d"), [], limit=1)
    assert limited.value == [("a", "b")]


def test_propose_pairings_skips_pending_fixtures():
    outcome = MatchScheduler().propose_pairings(_tournament("a", "b"), [_match("m1", "a", "b")])
    assert outcome.value == []


def test_propose_pairings_needs_teams():
    outcome = MatchScheduler().propose_pairings(_tournament(), [])
    assert outcome.kind == ErrorKind.NO_TEAMS_AVAILABLE


def test_status_transitions():
    scheduler = MatchScheduler()
    assert scheduler.check_transition(_match("m1", "a", "b"), "live").value == MatchStatus.LIVE
    live = _match("m1", "a", "b", status=MatchStatus.LIVE)
    assert scheduler.check_transition(live, MatchStatus.ABANDONED)
    assert not scheduler.check_transition(live, "scheduled")
    assert not scheduler.check_transition(live, "paused")
    done = _match("m1", "a", "b", status=MatchStatus.COMPLETED, winner="a")
    assert not scheduler.check_transition(done, "abandoned")


# ========== Results ==========


def test_result_for_either_opponent():
    recorder = ResultRecorder()
    match = _match("m1", "a", "b")
    outcome = recorder.validate_result(match, "b", won_by_wicket=4)
    assert outcome.value.to_payload() == {
        "status": "completed",
        "winner": "b",
        "won_by_run": None,
        "won_by_wicket": 4,
    }
    assert recorder.validate_result(match, Team("a", "A"), won_by_run=23)
    assert recorder.validate_result(match, "a")


def test_winner_must_have_played():
    recorder = ResultRecorder()
    outcome = recorder.validate_result(_match("m1", "a", "b"), "c", won_by_run=5)
    assert outcome.kind == ErrorKind.INVALID_WINNER
    assert recorder.validate_result(_match("m1", "a", "b"), None).kind == ErrorKind.INVALID_WINNER


def test_result_margins():
    recorder = ResultRecorder()
    match = _match("m1", "a", "b")
    assert not recorder.validate_result(match, "a", won_by_run=5, won_by_wicket=2)
    assert not recorder.validate_result(match, "a", won_by_run=-1)
    assert not recorder.validate_result(match, "a", won_by_wicket=11)
    assert recorder.validate_result(match, "a", won_by_wicket=10)
    assert not recorder.validate_result(match, "a", won_by_run=2.5)


def test_result_for_final_match_is_rejected():
    recorder = ResultRecorder()
    done = _match("m1", "a", "b", status=MatchStatus.COMPLETED, winner="a")
    assert recorder.validate_result(done, "b").kind == ErrorKind.VALIDATION_FAILED
    # The winner check comes first
    assert recorder.validate_result(done, "z").kind == ErrorKind.INVALID_WINNER
