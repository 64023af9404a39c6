from datetime import date, datetime

from cricketmanager.controllers.browse import (
    dashboard_stats,
    display_status,
    filter_tournaments,
    is_active_tournament,
    match_stage,
    match_title,
    matches_for_tournament,
    result_summary,
    search_organizers,
    search_teams,
    sort_matches,
    upcoming_tournaments,
)
from cricketmanager.models import (
    Account,
    Location,
    Match,
    MatchStatus,
    Ref,
    Team,
    Tournament,
)

TEAMS = {
    "a": Team("a", "{junk}Pune Warriors"),
    "b": Team("b", "Delhi Giants"),
}


def _tournament(tid, status, start, city="Pune", title=None, teams=0, end=None):
    return Tournament(
        id=tid,
        title=title or f"{city} Cup {tid}",
        max_teams=8,
        status=status,
        start_date=start,
        end_date=end,
        location=Location(city=city),
        teams=[Ref(f"{tid}-{i}") for i in range(teams)],
    )


def _match(mid, status=MatchStatus.SCHEDULED, when=None, created=None, **extra):
    return Match(
        mid,
        Ref(extra.pop("tournament", "tour1")),
        Ref("a"),
        Ref("b"),
        match_date=when,
        status=status,
        created_at=created,
        **extra,
    )


TOURNAMENTS = [
    _tournament("t1", "completed", date(2026, 1, 1), end=date(2026, 1, 5)),
    _tournament("t2", "open", date(2026, 6, 1), city="Mumbai", teams=3),
    _tournament("t3", "upcoming", date(2026, 3, 1), teams=2),
    _tournament("t4", "ongoing", None, city="Delhi", end=date(2026, 2, 1)),
    _tournament("t5", "completed", date(2026, 2, 1), end=date(2026, 2, 3)),
]


def _ids(items):
    return [item.id for item in items]


def test_filter_all_sorts_by_start_date_missing_last():
    assert _ids(filter_tournaments(TOURNAMENTS)) == ["t1", "t5", "t3", "t2", "t4"]


def test_filter_upcoming_tab_includes_open():
    assert _ids(filter_tournaments(TOURNAMENTS, "upcoming")) == ["t3", "t2"]


def test_filter_completed_tab_latest_first():
    assert _ids(filter_tournaments(TOURNAMENTS, "completed")) == ["t5", "t1"]


def test_undated_tournaments_sort_last_on_every_tab():
    undated = _tournament("t6", "completed", None)
    tournaments = TOURNAMENTS + [undated]
    assert _ids(filter_tournaments(tournaments, "completed")) == ["t5", "t1", "t6"]
    assert _ids(filter_tournaments(tournaments))[-2:] == ["t4", "t6"]


def test_filter_query_matches_title_or_city():
    assert _ids(filter_tournaments(TOURNAMENTS, query="mumBAI")) == ["t2"]
    assert _ids(filter_tournaments(TOURNAMENTS, "ongoing", query="delhi")) == ["t4"]
    assert filter_tournaments(TOURNAMENTS, query="chennai") == []


def test_upcoming_tournaments_hides_completed():
    assert _ids(upcoming_tournaments(TOURNAMENTS)) == ["t3", "t2", "t4"]


def test_is_active_tournament():
    today = date(2026, 1, 3)
    assert is_active_tournament(TOURNAMENTS[0], today)
    assert not is_active_tournament(TOURNAMENTS[0], date(2026, 1, 6))
    assert is_active_tournament(TOURNAMENTS[3], date(2030, 1, 1))
    assert not is_active_tournament(TOURNAMENTS[1], today)


def test_match_labels():
    assert display_status(_match("m1")) == "upcoming"
    assert display_status(_match("m1", MatchStatus.LIVE)) == "live"
    assert display_status(_match("m1", MatchStatus.ABANDONED)) == "completed"
    assert match_stage(_match("m1", final=True, semifinal=True)) == "Final"
    assert match_stage(_match("m1", semifinal=True)) == "Semi-Final"
    assert match_stage(_match("m1")) == "League"
    assert match_title(_match("m1"), TEAMS.get) == "Pune Warriors vs Delhi Giants"
    assert match_title(_match("m1")) == "TBD vs TBD"


def test_result_summary():
    lookup = TEAMS.get
    won_by_runs = _match("m1", MatchStatus.COMPLETED, winner=Ref("a"), won_by_run=23)
    assert result_summary(won_by_runs, lookup) == "Pune Warriors won by 23 runs"
    one_wicket = _match("m1", MatchStatus.COMPLETED, winner=Ref("b"), won_by_wicket=1)
    assert result_summary(one_wicket, lookup) == "Delhi Giants won by 1 wicket"
    plain = _match("m1", MatchStatus.COMPLETED, winner=Ref("b"))
    assert result_summary(plain, lookup) == "Delhi Giants won"
    assert result_summary(_match("m1", MatchStatus.ABANDONED)) == "Match abandoned"
    assert result_summary(_match("m1")) is None


def test_sort_matches():
    early = _match("early", when=datetime(2026, 5, 1, 10))
    late = _match("late", when=datetime(2026, 5, 3, 10))
    tie_old = _match("tie-old", when=datetime(2026, 5, 2, 10), created=datetime(2026, 1, 1))
    tie_new = _match("tie-new", when=datetime(2026, 5, 2, 10), created=datetime(2026, 1, 2))
    matches = [late, tie_new, early, tie_old]
    assert _ids(sort_matches(matches)) == ["early", "tie-old", "tie-new", "late"]
    assert _ids(sort_matches(matches, "completed")) == ["late", "tie-new", "tie-old", "early"]


def test_matches_for_tournament():
    matches = [_match("m1"), _match("m2", tournament="other")]
    assert _ids(matches_for_tournament(matches, "tour1")) == ["m1"]


def test_search_teams_and_organizers():
    assert _ids(search_teams(TEAMS.values(), "warriors")) == ["a"]
    assert _ids(search_teams(TEAMS.values(), "junk")) == []
    assert len(search_teams(TEAMS.values())) == 2

    accounts = [
        Account("o1", "Asha Rao", "asha@example.com", city="Pune"),
        Account("o2", "Vikram Das", "vikram@cricket.in"),
    ]
    assert _ids(search_organizers(accounts, "PUNE")) == ["o1"]
    assert _ids(search_organizers(accounts, "cricket.in")) == ["o2"]
    assert _ids(search_organizers(accounts, "das")) == ["o2"]


def test_dashboard_stats():
    matches = [
        _match("m1"),
        _match("m2", MatchStatus.COMPLETED, winner=Ref("a")),
        _match("m3", MatchStatus.COMPLETED, winner=Ref("b")),
    ]
    stats = dashboard_stats(TOURNAMENTS, TEAMS.values(), matches, today=date(2026, 1, 3))
    assert stats["tournaments"] == 5
    assert stats["active_tournaments"] == 3
    assert stats["teams"] == 2
    assert stats["registered_teams"] == 5
    assert stats["matches"] == 3
    assert stats["matches_by_status"] == {
        "scheduled": 1,
        "live": 0,
        "completed": 2,
        "abandoned": 0,
    }
