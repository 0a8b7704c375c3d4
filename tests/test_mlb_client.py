"""
Tests for the MLB Stats API client against mocked responses.
"""

import pytest

from headtohead.adapters.external.mlb_client import MLBAPIClient
from headtohead.core.exceptions import PlayerNotFoundError, TeamNotFoundError, GameNotFoundError
from headtohead.domain.models.base import League

from test_utils import mock_session, routed_session, requested_params, requested_url

STATS_RESPONSE = {
    "stats": [
        {
            "type": {"displayName": "season"},
            "group": {"displayName": "hitting"},
            "splits": [{
                "season": "2023",
                "stat": {"avg": ".300", "homeRuns": 30, "ops": ".900"},
                "player": {
                    "id": 592450,
                    "fullName": "Aaron Judge",
                    "primaryPosition": {"code": "9", "name": "Outfielder", "type": "Outfielder"},
                },
            }],
        },
        {
            "type": {"displayName": "season"},
            "group": {"displayName": "fielding"},
            "splits": [],
        },
    ]
}


class TestMLBPlayers:
    """Player search and stats."""

    @pytest.mark.asyncio
    async def test_search_players(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"people": [
            {"id": 592450, "fullName": "Aaron Judge", "firstName": "Aaron", "lastName": "Judge",
             "active": True, "primaryPosition": {"abbreviation": "RF"}},
            {"fullName": "No Id"},
        ]})

        players = await client.search_players("judge")

        assert requested_params(client.session) == {"q": "judge"}
        assert len(players) == 1
        assert players[0].id == "592450"
        assert players[0].league is League.MLB
        assert players[0].position == "RF"

    @pytest.mark.asyncio
    async def test_search_no_match_is_empty(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"people": []})
        assert await client.search_players("zzz") == []

    @pytest.mark.asyncio
    async def test_season_stats_document(self):
        client = MLBAPIClient()
        client.session = mock_session(payload=STATS_RESPONSE)

        document = await client.get_player_stats(592450, season=2023)

        assert requested_url(client.session).endswith("/people/592450/stats")
        assert requested_params(client.session) == {
            "stats": "season",
            "group": "hitting,pitching,fielding",
            "gameType": "R",
            "season": "2023",
        }
        assert document["player"]["fullName"] == "Aaron Judge"
        assert document["player"]["primaryPosition"]["code"] == "9"
        assert [section["group"]["displayName"] for section in document["stats"]] == ["hitting", "fielding"]
        assert document["stats"][0]["stats"]["avg"] == ".300"
        # A group without splits becomes an empty stat dict
        assert document["stats"][1]["stats"] == {}

    @pytest.mark.asyncio
    async def test_career_stats_omit_season(self):
        client = MLBAPIClient()
        client.session = mock_session(payload=STATS_RESPONSE)

        await client.get_player_stats(592450, season="career")

        params = requested_params(client.session)
        assert params["stats"] == "career"
        assert "season" not in params

    @pytest.mark.asyncio
    async def test_unknown_player_404(self):
        client = MLBAPIClient()
        client.session = mock_session(status=404, payload={})

        with pytest.raises(PlayerNotFoundError) as exc_info:
            await client.get_player_stats(1)
        assert exc_info.value.league == "mlb"

    @pytest.mark.asyncio
    async def test_empty_stats_is_not_found(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"stats": []})

        with pytest.raises(PlayerNotFoundError):
            await client.get_player_stats(1, season=2023)

    @pytest.mark.asyncio
    async def test_missing_name_left_empty(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"stats": [
            {"type": {"displayName": "season"}, "group": {"displayName": "pitching"},
             "splits": [{"stat": {"era": "3.10"}}]}
        ]})

        document = await client.get_player_stats(77, season=2023)

        assert document["player"]["id"] == 77
        assert document["player"]["fullName"] is None


class TestMLBTeamsAndGames:
    """Teams, schedule and live feed."""

    @pytest.mark.asyncio
    async def test_get_teams(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"teams": [
            {"id": 147, "name": "New York Yankees", "abbreviation": "NYY", "locationName": "Bronx"},
        ]})

        teams = await client.get_teams()

        assert requested_params(client.session) == {"sportId": "1"}
        assert teams[0].id == "147"
        assert teams[0].display_name == "New York Yankees (NYY)"
        assert teams[0].city == "Bronx"

    @pytest.mark.asyncio
    async def test_team_info_not_found(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"teams": []})

        with pytest.raises(TeamNotFoundError):
            await client.get_team_info(9999)

    @pytest.mark.asyncio
    async def test_schedule_flattens_dates(self):
        client = MLBAPIClient()
        client.session = mock_session(payload={"dates": [
            {"games": [{
                "gamePk": 1, "gameDate": "2024-04-01T17:05:00Z",
                "status": {"detailedState": "Final"},
                "teams": {
                    "home": {"team": {"id": 147, "name": "New York Yankees"}, "score": 5},
                    "away": {"team": {"id": 111, "name": "Boston Red Sox"}, "score": 3},
                },
            }]},
            {"games": [{
                "gamePk": 2, "gameDate": "2024-04-02T17:05:00Z",
                "status": {"detailedState": "Scheduled"},
                "teams": {"home": {"team": {"id": 111}}, "away": {"team": {"id": 147}}},
            }]},
        ]})

        games = await client.get_schedule("2024-04-01", "2024-04-02", team_id=147)

        params = requested_params(client.session)
        assert params["startDate"] == "2024-04-01"
        assert params["endDate"] == "2024-04-02"
        assert params["teamId"] == "147"
        assert [game.id for game in games] == ["1", "2"]
        assert games[0].score_line == "Boston Red Sox 3 @ New York Yankees 5 (Final)"
        assert games[1].home_score is None

    @pytest.mark.asyncio
    async def test_get_game_uses_live_feed(self):
        client = MLBAPIClient(live_base_url="https://mlb.example.test/v1.1")
        client.session = routed_session({"/game/745/feed/live": {
            "gamePk": 745,
            "gameData": {
                "datetime": {"dateTime": "2024-04-01T17:05:00Z"},
                "status": {"detailedState": "Final"},
                "teams": {"home": {"id": 147, "name": "New York Yankees"},
                          "away": {"id": 111, "name": "Boston Red Sox"}},
            },
            "liveData": {"linescore": {"teams": {"home": {"runs": 4}, "away": {"runs": 2}}}},
        }})

        game = await client.get_game(745)

        assert requested_url(client.session).startswith("https://mlb.example.test/v1.1/")
        assert game.id == "745"
        assert game.home_score == 4
        assert game.away_score == 2
        assert game.status == "Final"

    @pytest.mark.asyncio
    async def test_get_game_not_found(self):
        client = MLBAPIClient()
        client.session = routed_session({})

        with pytest.raises(GameNotFoundError):
            await client.get_game(1)
