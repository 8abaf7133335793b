"""
Sports facts carried by collectible items.

The simulation treats facts as opaque payloads. This module owns where they
come from: a remote pool loaded at most once per process, with a small
built-in fallback so gameplay never runs dry.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.thesportsdb.com/api/v1/json/3"

MAX_TEAMS_PER_LEAGUE = 40
MAX_BASKETBALL_LEAGUES = 60


class Sport(Enum):
    """Fact categories."""
    SOCCER = "soccer"
    BASKETBALL = "basketball"
    BASEBALL = "baseball"


@dataclass(frozen=True)
class Fact:
    """A display-only record shown when an item is collected."""
    id: str
    category: Sport
    emoji: str
    color: str
    title: str
    subtitle: Optional[str] = None

    def describe(self) -> str:
        """One-line text for toasts."""
        if self.subtitle:
            return f"{self.title} - {self.subtitle}"
        return self.title


SPORT_STYLE = {
    Sport.SOCCER: ("⚽", "#22c55e"),
    Sport.BASKETBALL: ("🏀", "#f97316"),
    Sport.BASEBALL: ("⚾", "#60a5fa"),
}


FALLBACK_FACTS: Tuple[Fact, ...] = (
    Fact(
        id="fallback-soccer-1",
        category=Sport.SOCCER,
        emoji="⚽",
        color="#22c55e",
        title="Soccer",
        subtitle="Trivia boost: quick feet, quick points.",
    ),
    Fact(
        id="fallback-basketball-1",
        category=Sport.BASKETBALL,
        emoji="🏀",
        color="#f97316",
        title="Basketball",
        subtitle="League facts keep your score climbing.",
    ),
    Fact(
        id="fallback-baseball-1",
        category=Sport.BASEBALL,
        emoji="⚾",
        color="#60a5fa",
        title="Baseball",
        subtitle="Collect teams to power up your run.",
    ),
)


# =============================================================================
# PARSING
# =============================================================================

def facts_from_teams(teams: Sequence[Dict[str, Any]], sport: Sport) -> List[Fact]:
    """Build facts from a TheSportsDB team list. Teams without id or name are skipped."""
    emoji, color = SPORT_STYLE[sport]
    facts: List[Fact] = []
    for team in teams:
        if not isinstance(team, dict):
            continue
        team_id = team.get("idTeam")
        name = team.get("strTeam")
        if not team_id or not name:
            continue

        details = [team.get("strLeague"), team.get("strCountry"), team.get("strStadium")]
        subtitle = " • ".join(str(d) for d in details if d) or None

        facts.append(Fact(
            id=f"{sport.value}-team-{team_id}",
            category=sport,
            emoji=emoji,
            color=color,
            title=str(name),
            subtitle=subtitle,
        ))
        if len(facts) >= MAX_TEAMS_PER_LEAGUE:
            break
    return facts


def facts_from_leagues(leagues: Sequence[Dict[str, Any]]) -> List[Fact]:
    """Build basketball facts from the all-leagues listing."""
    emoji, color = SPORT_STYLE[Sport.BASKETBALL]
    facts: List[Fact] = []
    for league in leagues:
        if not isinstance(league, dict):
            continue
        if not league.get("idLeague") or not league.get("strLeague"):
            continue
        if league.get("strSport") != "Basketball":
            continue

        country = league.get("strCountry")
        facts.append(Fact(
            id=f"basketball-league-{league['idLeague']}",
            category=Sport.BASKETBALL,
            emoji=emoji,
            color=color,
            title=str(league["strLeague"]),
            subtitle=f"Country: {country}" if country else None,
        ))
        if len(facts) >= MAX_BASKETBALL_LEAGUES:
            break
    return facts


def _list_field(payload: Any, key: str) -> List[Dict[str, Any]]:
    """Pull a list out of a JSON object, tolerating null or missing keys."""
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object with '{key}'")
    value = payload.get(key)
    return value if isinstance(value, list) else []


def fetch_json(url: str, timeout: float, params: Optional[Dict[str, str]] = None) -> Any:
    """GET a URL and decode JSON. Raises on HTTP or decoding errors."""
    resp = requests.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def fetch_sports_facts(base_url: str = DEFAULT_BASE_URL, timeout: float = 5.0) -> List[Fact]:
    """
    Fetch soccer teams, baseball teams and basketball leagues.

    Raises requests.RequestException or ValueError on failure.
    """
    soccer = fetch_json(f"{base_url}/search_all_teams.php", timeout, {"l": "English Premier League"})
    baseball = fetch_json(f"{base_url}/search_all_teams.php", timeout, {"l": "MLB"})
    leagues = fetch_json(f"{base_url}/all_leagues.php", timeout)

    return (
        facts_from_teams(_list_field(soccer, "teams"), Sport.SOCCER)
        + facts_from_leagues(_list_field(leagues, "leagues"))
        + facts_from_teams(_list_field(baseball, "teams"), Sport.BASEBALL)
    )


# =============================================================================
# PROVIDER
# =============================================================================

class FactProvider:
    """
    Process-lifetime cache of the fact pool.

    Until a load finishes, `facts` returns the fallback pool. A load that
    fails or comes back empty also settles on the fallback. Once settled the
    pool never changes.

    Usage:
        provider = FactProvider()
        provider.load_in_background()
        session = Session(provider)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        fallback: Sequence[Fact] = FALLBACK_FACTS,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.fallback: Tuple[Fact, ...] = tuple(fallback)

        self._facts: Optional[Tuple[Fact, ...]] = None
        self.error: Optional[str] = None

        self._lock = threading.Lock()
        self._fetching = False
        self._settled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def static(cls, facts: Sequence[Fact]) -> "FactProvider":
        """A provider that is already settled on the given pool (may be empty)."""
        provider = cls(fallback=())
        provider._facts = tuple(facts)
        provider._settled.set()
        return provider

    @property
    def facts(self) -> Tuple[Fact, ...]:
        """The current pool."""
        with self._lock:
            return self._facts if self._facts is not None else self.fallback

    @property
    def is_loaded(self) -> bool:
        with self._lock:
            return self._facts is not None

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._fetching and self._facts is None

    def load(self) -> Tuple[Fact, ...]:
        """
        Fetch the pool synchronously unless it is already settled.
        If another load is in flight, wait for it instead of fetching again.
        """
        with self._lock:
            if self._facts is not None:
                return self._facts
            in_flight = self._fetching
            self._fetching = True

        if in_flight:
            self._settled.wait()
            return self.facts
        return self._fetch()

    def _fetch(self) -> Tuple[Fact, ...]:
        """Run the one fetch. Caller must have claimed `_fetching`."""
        error: Optional[str] = None
        fetched: List[Fact] = []
        try:
            fetched = fetch_sports_facts(self.base_url, self.timeout)
        except (requests.RequestException, ValueError) as e:
            error = str(e) or "Failed to load sports data"
            logger.warning(f"Sports data unavailable, using fallback facts: {error}")
        finally:
            with self._lock:
                self._facts = tuple(fetched) if fetched else self.fallback
                self.error = error
            self._settled.set()

        if fetched:
            logger.info(f"Loaded {len(fetched)} sports facts")
        return self.facts

    def load_in_background(self) -> None:
        """Start a load on a daemon thread. At most one load is ever in flight."""
        with self._lock:
            if self._facts is not None or self._fetching:
                return
            self._fetching = True
            self._thread = threading.Thread(target=self._fetch, daemon=True)
            thread = self._thread
        thread.start()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until an in-flight load settles.
        Returns True once the pool is settled.
        """
        with self._lock:
            if self._facts is not None:
                return True
            if not self._fetching:
                return False
        return self._settled.wait(timeout=timeout)

    def by_category(self) -> Dict[Sport, List[Fact]]:
        """Group the current pool by sport."""
        groups: Dict[Sport, List[Fact]] = {sport: [] for sport in Sport}
        for fact in self.facts:
            groups[fact.category].append(fact)
        return groups

    def status_hint(self) -> str:
        """Short status line for the HUD."""
        if self.is_loading:
            return "Loading sports facts..."
        if self.error:
            return f"Sports API unavailable ({self.error}). Using fallback facts."

        icons = "".join(
            SPORT_STYLE[sport][0] for sport, facts in self.by_category().items() if facts
        )
        if not icons:
            return "No sports facts available. Dodge to survive."
        return f"Collect {icons} items for power-ups + facts."
