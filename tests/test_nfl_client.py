"""
Tests for the ESPN NFL client against mocked responses.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from headtohead.adapters.external.nfl_client import (
    NFLAPIClient, NFL_TEAM_IDS, current_nfl_season, espn_date, season_year
)
from headtohead.core.exceptions import (
    PlayerNotFoundError, TeamNotFoundError, GameNotFoundError,
    InvalidSeasonError, ProviderConnectionError
)

from test_utils import mock_session, routed_session, requested_params, requested_url


def roster(team_name, *athletes):
    return {
        "team": {"displayName": team_name},
        "athletes": [{"position": "offense", "items": list(athletes)}],
    }


def athlete(athlete_id, name, position):
    first, _, last = name.partition(" ")
    return {
        "id": athlete_id, "fullName": name, "displayName": name,
        "firstName": first, "lastName": last,
        "position": {"abbreviation": position},
    }


class TestHelpers:

    def test_team_ids(self):
        assert len(NFL_TEAM_IDS) == 32
        assert 31 not in NFL_TEAM_IDS
        assert NFL_TEAM_IDS[-2:] == (33, 34)

    def test_current_season(self):
        assert current_nfl_season(datetime(2024, 8, 1)) == 2024
        assert current_nfl_season(datetime(2025, 2, 9)) == 2024
        assert current_nfl_season(datetime(2025, 6, 1)) == 2024

    def test_espn_date(self):
        assert espn_date("2024-09-08") == "20240908"
        assert espn_date("20240908") == "20240908"

    def test_season_year(self):
        assert season_year(2023) == 2023
        assert season_year(" 2023 ") == 2023

    @pytest.mark.parametrize("season", ["career", "2024-25", "24", "abc"])
    def test_season_year_rejects_labels(self, season):
        with pytest.raises(InvalidSeasonError) as exc_info:
            season_year(season)
        assert exc_info.value.league == "nfl"


class TestNFLPlayers:
    """Roster-backed search and core API stats."""

    @pytest.mark.asyncio
    async def test_search_builds_index_from_rosters(self):
        client = NFLAPIClient()
        client.session = routed_session({
            "/teams/12/roster": roster("Kansas City Chiefs", athlete("3139477", "Patrick Mahomes", "QB")),
            "/teams/2/roster": roster("Buffalo Bills", athlete("3918298", "Josh Allen", "QB")),
        })

        players = await client.search_players("mahomes")

        assert client.session.get.call_count == len(NFL_TEAM_IDS)
        assert len(players) == 1
        assert players[0].id == "3139477"
        assert players[0].position == "QB"
        assert players[0].team_name == "Kansas City Chiefs"

        # Second search is served from the index
        await client.search_players("allen")
        assert client.session.get.call_count == len(NFL_TEAM_IDS)

    @pytest.mark.asyncio
    async def test_search_caps_results(self):
        many = [athlete(str(i), f"Player Smith{i}", "LB") for i in range(30)]
        client = NFLAPIClient()
        client.session = routed_session({"/teams/1/roster": roster("Atlanta Falcons", *many)})

        players = await client.search_players("smith")

        assert len(players) == 20

    @pytest.mark.asyncio
    async def test_outage_raises_and_leaves_index_stale(self):
        client = NFLAPIClient()
        client.get_team_roster = AsyncMock(
            side_effect=ProviderConnectionError(url="https://site.api.espn.com/teams/1/roster")
        )

        with pytest.raises(ProviderConnectionError):
            await client.search_players("mahomes")
        assert client.player_index.is_fresh() is False

        # The provider recovers: the next search rebuilds the index
        client.get_team_roster = AsyncMock(
            return_value=roster("Kansas City Chiefs", athlete("3139477", "Patrick Mahomes", "QB"))
        )
        players = await client.search_players("mahomes")

        assert players[0].id == "3139477"
        assert client.player_index.is_fresh() is True

    @pytest.mark.asyncio
    async def test_partial_roster_failures_are_skipped(self):
        client = NFLAPIClient()
        client.session = routed_session({
            "/teams/12/roster": roster("Kansas City Chiefs", athlete("3139477", "Patrick Mahomes", "QB")),
        }, default_status=503)

        players = await client.search_players("mahomes")

        assert [p.id for p in players] == ["3139477"]
        assert client.player_index.is_fresh() is True

    @pytest.mark.asyncio
    async def test_concurrent_searches_share_one_index_load(self):
        client = NFLAPIClient()
        client.session = routed_session({
            "/teams/12/roster": roster("Kansas City Chiefs", athlete("3139477", "Patrick Mahomes", "QB")),
            "/teams/2/roster": roster("Buffalo Bills", athlete("3918298", "Josh Allen", "QB")),
        })

        mahomes, allen = await asyncio.gather(
            client.search_players("mahomes"),
            client.search_players("allen"),
        )

        assert client.session.get.call_count == len(NFL_TEAM_IDS)
        assert mahomes[0].id == "3139477"
        assert allen[0].id == "3918298"

    @pytest.mark.asyncio
    async def test_career_season_is_rejected_before_request(self):
        client = NFLAPIClient()
        client.session = mock_session(payload={})

        with pytest.raises(InvalidSeasonError):
            await client.get_player_stats("3139477", season="career")
        client.session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_player_stats_document(self):
        client = NFLAPIClient(core_base_url="https://core.example.test/nfl")
        client.session = mock_session(payload={
            "splits": {"categories": [{"name": "passing", "stats": [{"name": "passingYards", "value": 4183.0}]}]},
            "season": {"year": 2023},
        })

        document = await client.get_player_stats("3139477", season=2023)

        assert requested_url(client.session) == (
            "https://core.example.test/nfl/seasons/2023/types/2/athletes/3139477/statistics/0"
        )
        assert requested_params(client.session) == {"lang": "en", "region": "us"}
        assert document["playerId"] == "3139477"
        assert document["playerName"] == "Player 3139477"
        assert document["splits"]["categories"][0]["name"] == "passing"
        assert document["season"] == {"year": 2023}

    @pytest.mark.asyncio
    async def test_player_stats_use_index_name(self):
        client = NFLAPIClient()
        client.session = routed_session({
            "/teams/12/roster": roster("Kansas City Chiefs", athlete("3139477", "Patrick Mahomes", "QB")),
            "/athletes/3139477/statistics/0": {"splits": {"categories": []}},
        })

        await client.search_players("mahomes")
        document = await client.get_player_stats("3139477", season=2024)

        assert document["playerName"] == "Patrick Mahomes"
        assert document["season"] == {"year": 2024}

    @pytest.mark.asyncio
    async def test_unknown_player(self):
        client = NFLAPIClient()
        client.session = mock_session(status=404, payload={"error": {"code": 404}})

        with pytest.raises(PlayerNotFoundError) as exc_info:
            await client.get_player_stats("0", season=2024)
        assert exc_info.value.league == "nfl"


class TestNFLTeamsAndGames:

    @pytest.mark.asyncio
    async def test_get_teams(self):
        client = NFLAPIClient()
        client.session = mock_session(payload={"sports": [{"leagues": [{"teams": [
            {"team": {"id": "12", "displayName": "Kansas City Chiefs", "abbreviation": "KC", "location": "Kansas City"}},
        ]}]}]})

        teams = await client.get_teams()

        assert teams[0].id == "12"
        assert teams[0].abbreviation == "KC"
        assert teams[0].city == "Kansas City"

    @pytest.mark.asyncio
    async def test_team_info_missing(self):
        client = NFLAPIClient()
        client.session = mock_session(payload={})

        with pytest.raises(TeamNotFoundError):
            await client.get_team_info(99)

    @pytest.mark.asyncio
    async def test_schedule_with_week(self):
        client = NFLAPIClient()
        client.session = mock_session(payload={"events": [{
            "id": "401671789",
            "date": "2024-09-06T00:20Z",
            "competitions": [{
                "status": {"type": {"description": "Final"}},
                "competitors": [
                    {"homeAway": "away", "score": "20", "team": {"id": "33", "displayName": "Baltimore Ravens"}},
                    {"homeAway": "home", "score": "27", "team": {"id": "12", "displayName": "Kansas City Chiefs"}},
                ],
            }],
        }, {"id": "no-competition"}]})

        games = await client.get_schedule("2024-09-05", "2024-09-09", week=1)

        params = requested_params(client.session)
        assert params["dates"] == "20240905-20240909"
        assert params["week"] == "1"
        assert params["seasontype"] == "2"
        assert len(games) == 1
        assert games[0].home_team.name == "Kansas City Chiefs"
        assert games[0].away_score == "20"
        assert games[0].status == "Final"

    @pytest.mark.asyncio
    async def test_get_game(self):
        client = NFLAPIClient()
        client.session = mock_session(payload={"header": {
            "id": "401671789",
            "competitions": [{
                "date": "2024-09-06T00:20Z",
                "competitors": [
                    {"homeAway": "home", "score": "27", "team": {"id": "12", "displayName": "Kansas City Chiefs"}},
                    {"homeAway": "away", "score": "20", "team": {"id": "33", "displayName": "Baltimore Ravens"}},
                ],
            }],
        }})

        game = await client.get_game("401671789")

        assert requested_params(client.session) == {"event": "401671789"}
        assert game.id == "401671789"
        assert game.away_team.id == "33"
        assert game.status == "Unknown"

    @pytest.mark.asyncio
    async def test_get_game_without_header(self):
        client = NFLAPIClient()
        client.session = mock_session(payload={})

        with pytest.raises(GameNotFoundError):
            await client.get_game("1")
