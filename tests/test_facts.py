"""
Tests for fact parsing and the fact provider.

Network calls are replaced with canned TheSportsDB payloads.
"""
import threading

import pytest
import requests

from lane_rush.gameplay import facts as facts_module
from lane_rush.gameplay.facts import (
    Fact, FactProvider, Sport, FALLBACK_FACTS,
    facts_from_teams, facts_from_leagues, fetch_sports_facts,
)

SOCCER_TEAMS = {"teams": [
    {"idTeam": "133604", "strTeam": "Arsenal", "strLeague": "English Premier League",
     "strCountry": "England", "strStadium": "Emirates Stadium"},
    {"idTeam": "133602", "strTeam": "Liverpool", "strLeague": None,
     "strCountry": "England", "strStadium": ""},
]}
BASEBALL_TEAMS = {"teams": [
    {"idTeam": "135267", "strTeam": "Boston Red Sox", "strLeague": "MLB"},
]}
LEAGUES = {"leagues": [
    {"idLeague": "4387", "strLeague": "NBA", "strSport": "Basketball", "strCountry": "USA"},
    {"idLeague": "4328", "strLeague": "English Premier League", "strSport": "Soccer"},
    {"idLeague": "4408", "strLeague": "EuroLeague", "strSport": "Basketball"},
]}


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Server Error")

    def json(self):
        return self.payload


class FakeSportsDB:
    """Routes requests.get calls to canned payloads and counts them."""

    def __init__(self, soccer=SOCCER_TEAMS, baseball=BASEBALL_TEAMS, leagues=LEAGUES, fail=None):
        self.soccer = soccer
        self.baseball = baseball
        self.leagues = leagues
        self.fail = fail
        self.calls = []

    def __call__(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.fail is not None:
            raise self.fail
        if url.endswith("all_leagues.php"):
            return FakeResponse(self.leagues)
        if params and params.get("l") == "MLB":
            return FakeResponse(self.baseball)
        return FakeResponse(self.soccer)


@pytest.fixture
def sportsdb(monkeypatch):
    fake = FakeSportsDB()
    monkeypatch.setattr(facts_module.requests, "get", fake)
    return fake


class TestParsing:
    """Tests for turning API payloads into facts."""

    def test_team_facts(self):
        facts = facts_from_teams(SOCCER_TEAMS["teams"], Sport.SOCCER)

        assert [f.title for f in facts] == ["Arsenal", "Liverpool"]
        assert facts[0].id == "soccer-team-133604"
        assert facts[0].subtitle == "English Premier League • England • Emirates Stadium"
        assert facts[1].subtitle == "England"
        assert facts[0].emoji == "⚽"

    def test_teams_missing_id_or_name_skipped(self):
        teams = [{"idTeam": "1"}, {"strTeam": "Nameless"}, {"idTeam": "2", "strTeam": "Ok"}, "junk"]
        facts = facts_from_teams(teams, Sport.BASEBALL)
        assert [f.title for f in facts] == ["Ok"]
        assert facts[0].subtitle is None

    def test_teams_capped(self):
        teams = [{"idTeam": str(n), "strTeam": f"Team {n}"} for n in range(100)]
        assert len(facts_from_teams(teams, Sport.SOCCER)) == 40

    def test_only_basketball_leagues(self):
        facts = facts_from_leagues(LEAGUES["leagues"])

        assert [f.title for f in facts] == ["NBA", "EuroLeague"]
        assert facts[0].subtitle == "Country: USA"
        assert facts[1].subtitle is None
        assert all(f.category == Sport.BASKETBALL for f in facts)

    def test_leagues_capped(self):
        leagues = [{"idLeague": str(n), "strLeague": f"L{n}", "strSport": "Basketball"}
                   for n in range(100)]
        assert len(facts_from_leagues(leagues)) == 60

    def test_describe(self):
        assert Fact("x", Sport.SOCCER, "⚽", "#fff", "Title", "Sub").describe() == "Title - Sub"
        assert Fact("x", Sport.SOCCER, "⚽", "#fff", "Title").describe() == "Title"


class TestFetch:
    """Tests for fetching the combined pool."""

    def test_combines_sports_in_order(self, sportsdb):
        facts = fetch_sports_facts("http://example.test", timeout=2.0)

        assert [f.category for f in facts] == [
            Sport.SOCCER, Sport.SOCCER, Sport.BASKETBALL, Sport.BASKETBALL, Sport.BASEBALL,
        ]
        assert all(call[2] == 2.0 for call in sportsdb.calls)
        assert len(sportsdb.calls) == 3

    def test_null_lists_tolerated(self, monkeypatch):
        monkeypatch.setattr(facts_module.requests, "get",
                            FakeSportsDB(soccer={"teams": None}, baseball={}))
        facts = fetch_sports_facts("http://example.test")
        assert [f.title for f in facts] == ["NBA", "EuroLeague"]

    def test_non_object_payload_rejected(self, monkeypatch):
        monkeypatch.setattr(facts_module.requests, "get", FakeSportsDB(soccer=["not", "a", "dict"]))
        with pytest.raises(ValueError):
            fetch_sports_facts("http://example.test")


class TestFactProvider:
    """Tests for the cached pool."""

    def test_fallback_until_loaded(self):
        provider = FactProvider()
        assert provider.facts == FALLBACK_FACTS
        assert not provider.is_loaded
        assert not provider.is_loading

    def test_load_success(self, sportsdb):
        provider = FactProvider(base_url="http://example.test")

        facts = provider.load()

        assert len(facts) == 5
        assert provider.facts == facts
        assert provider.is_loaded
        assert provider.error is None
        assert provider.status_hint() == "Collect ⚽🏀⚾ items for power-ups + facts."

    def test_loads_only_once(self, sportsdb):
        provider = FactProvider(base_url="http://example.test")
        provider.load()
        provider.load()
        provider.load_in_background()

        assert len(sportsdb.calls) == 3

    def test_failure_uses_fallback(self, monkeypatch):
        monkeypatch.setattr(facts_module.requests, "get",
                            FakeSportsDB(fail=requests.ConnectionError("offline")))
        provider = FactProvider(base_url="http://example.test")

        assert provider.load() == FALLBACK_FACTS
        assert provider.is_loaded
        assert provider.error == "offline"
        assert provider.status_hint() == "Sports API unavailable (offline). Using fallback facts."

    def test_http_error_uses_fallback(self, monkeypatch):
        def failing_get(url, params=None, timeout=None):
            return FakeResponse({}, status=503)

        monkeypatch.setattr(facts_module.requests, "get", failing_get)
        provider = FactProvider(base_url="http://example.test")

        assert provider.load() == FALLBACK_FACTS
        assert "503" in provider.error

    def test_empty_result_uses_fallback_without_error(self, monkeypatch):
        monkeypatch.setattr(facts_module.requests, "get",
                            FakeSportsDB(soccer={}, baseball={}, leagues={}))
        provider = FactProvider(base_url="http://example.test")

        assert provider.load() == FALLBACK_FACTS
        assert provider.error is None

    def test_background_load(self, sportsdb):
        provider = FactProvider(base_url="http://example.test")

        provider.load_in_background()
        provider.wait(timeout=5.0)

        assert provider.is_loaded
        assert len(provider.facts) == 5
        assert not provider.is_loading

    def test_loading_hint(self):
        provider = FactProvider()
        provider._fetching = True   # load in flight
        assert provider.is_loading
        assert provider.status_hint() == "Loading sports facts..."

    def test_concurrent_load_fetches_once(self, monkeypatch):
        """A direct load while a background load is in flight waits for it."""
        gate = threading.Event()
        calls = []

        def slow_fetch(base_url, timeout):
            calls.append(base_url)
            gate.wait(timeout=5.0)
            return facts_from_leagues(LEAGUES["leagues"])

        monkeypatch.setattr(facts_module, "fetch_sports_facts", slow_fetch)
        provider = FactProvider(base_url="http://example.test")

        provider.load_in_background()
        results = []
        caller = threading.Thread(target=lambda: results.append(provider.load()))
        caller.start()
        gate.set()
        caller.join(timeout=5.0)

        assert provider.wait(timeout=5.0)
        assert len(calls) == 1
        assert results == [provider.facts]
        assert [f.title for f in provider.facts] == ["NBA", "EuroLeague"]

    def test_wait_without_load(self):
        assert FactProvider().wait(timeout=0.01) is False
        assert FactProvider.static(FALLBACK_FACTS).wait() is True

    def test_hint_lists_available_sports(self):
        basketball_only = [f for f in FALLBACK_FACTS if f.category == Sport.BASKETBALL]
        assert FactProvider.static(basketball_only).status_hint() == (
            "Collect 🏀 items for power-ups + facts."
        )
        assert FactProvider.static([]).status_hint() == (
            "No sports facts available. Dodge to survive."
        )

    def test_static_pool(self):
        provider = FactProvider.static([])
        assert provider.facts == ()
        assert provider.is_loaded

    def test_by_category(self):
        groups = FactProvider.static(FALLBACK_FACTS).by_category()
        assert set(groups) == set(Sport)
        assert all(len(v) == 1 for v in groups.values())
