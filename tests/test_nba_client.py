"""
Tests for the stats.nba.com client against mocked result sets.
"""

import asyncio
from datetime import datetime

import pytest

from headtohead.adapters.external.nba_client import (
    NBAAPIClient, current_nba_season, normalize_season
)
from headtohead.core.exceptions import (
    PlayerNotFoundError, TeamNotFoundError, GameNotFoundError, ProviderResponseError,
    InvalidSeasonError
)

from test_utils import mock_session, routed_session, requested_params, requested_url, result_set

ALL_PLAYERS = {"resultSets": [result_set(
    "CommonAllPlayers",
    ["PERSON_ID", "DISPLAY_LAST_COMMA_FIRST", "DISPLAY_FIRST_LAST", "ROSTERSTATUS", "TEAM_NAME"],
    [
        [2544, "James, LeBron", "LeBron James", 1, "Lakers"],
        [977, "Bryant, Kobe", "Kobe Bryant", 0, None],
        [1628369, "Tatum, Jayson", "Jayson Tatum", 1, "Celtics"],
        [2000, "Bryant, Aaron", "Aaron Bryant", 1, "Nets"],
    ],
)]}

TOTALS_HEADERS = ["PLAYER_ID", "SEASON_ID", "GP", "PTS", "AST", "TOV", "REB", "FG_PCT"]
CAREER_HEADERS = ["PLAYER_ID", "GP", "PTS", "AST", "TOV", "REB", "FG_PCT"]

CAREER_STATS = {"resultSets": [
    result_set("SeasonTotalsRegularSeason", TOTALS_HEADERS, [
        [2544, "2022-23", 55, 1590, 375, 175, 457, 0.5],
        [2544, "2023-24", 71, 1822, 589, 245, 518, 0.54],
    ]),
    result_set("CareerTotalsRegularSeason", CAREER_HEADERS, [
        [2544, 1492, 40474, 11009, 5211, 11185, 0.506],
    ]),
]}


class TestSeasonHelpers:

    def test_current_season_rolls_over_in_october(self):
        assert current_nba_season(datetime(2024, 9, 30)) == "2023-24"
        assert current_nba_season(datetime(2024, 10, 1)) == "2024-25"
        assert current_nba_season(datetime(2025, 1, 15)) == "2024-25"

    def test_normalize_season(self):
        assert normalize_season(2023) == "2023-24"
        assert normalize_season("2023") == "2023-24"
        assert normalize_season("2023-24") == "2023-24"
        assert normalize_season(1999) == "1999-00"

    @pytest.mark.parametrize("season", ["abc", "23-24", "2023-25", "2023/24", ""])
    def test_normalize_rejects_malformed_seasons(self, season):
        with pytest.raises(InvalidSeasonError) as exc_info:
            normalize_season(season)
        assert exc_info.value.league == "nba"
        assert exc_info.value.error_code == "INVALID_SEASON"


class TestNBAClient:
    """Headers, search and stats."""

    def test_browser_headers(self):
        headers = NBAAPIClient()._build_headers()
        assert headers["Referer"] == "https://www.nba.com/"
        assert headers["Origin"] == "https://www.nba.com"
        assert headers["User-Agent"].startswith("Mozilla/5.0")

    @pytest.mark.asyncio
    async def test_search_ranks_active_players_first(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=ALL_PLAYERS)

        players = await client.search_players("bryant")

        assert [p.full_name for p in players] == ["Aaron Bryant", "Kobe Bryant"]
        assert players[0].is_active is True
        assert players[1].is_active is False
        assert players[1].first_name == "Kobe"
        assert players[1].last_name == "Bryant"
        params = requested_params(client.session)
        assert params["LeagueID"] == "00"
        assert params["IsOnlyCurrentSeason"] == "0"

    @pytest.mark.asyncio
    async def test_player_index_loaded_once(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=ALL_PLAYERS)

        await client.search_players("lebron")
        await client.search_players("tatum")

        assert client.session.get.call_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_searches_share_one_index_load(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=ALL_PLAYERS)

        lebron, tatum = await asyncio.gather(
            client.search_players("lebron"),
            client.search_players("tatum"),
        )

        assert client.session.get.call_count == 1
        assert lebron[0].id == "2544"
        assert tatum[0].id == "1628369"

    @pytest.mark.asyncio
    async def test_career_totals(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=CAREER_STATS)

        document = await client.get_player_stats(2544)

        assert requested_url(client.session).endswith("/playercareerstats")
        assert requested_params(client.session)["PerMode"] == "Totals"
        assert document["season"] == "Career"
        assert document["gp"] == 1492
        assert document["pts"] == 40474
        # Fields the provider did not send are zero
        assert document["blk"] == 0
        assert "fullName" not in document

    @pytest.mark.asyncio
    async def test_single_season_row(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=CAREER_STATS)

        document = await client.get_player_stats(2544, season=2022)

        assert document["season"] == "2022-23"
        assert document["gp"] == 55
        assert document["ast"] == 375

    @pytest.mark.asyncio
    async def test_season_without_row_is_zero(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=CAREER_STATS)

        document = await client.get_player_stats(2544, season="2010-11")

        assert document["gp"] == 0
        assert document["pts"] == 0

    @pytest.mark.asyncio
    async def test_malformed_season_is_rejected_before_request(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=CAREER_STATS)

        with pytest.raises(InvalidSeasonError):
            await client.get_player_stats(2544, season="abc")
        client.session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_career_keyword_is_case_insensitive(self):
        client = NBAAPIClient()
        client.session = mock_session(payload=CAREER_STATS)

        document = await client.get_player_stats(2544, season="Career")

        assert document["season"] == "Career"
        assert document["gp"] == 1492

    @pytest.mark.asyncio
    async def test_name_from_loaded_index(self):
        client = NBAAPIClient()
        client.session = routed_session({
            "commonallplayers": ALL_PLAYERS,
            "playercareerstats": CAREER_STATS,
        })

        await client.search_players("lebron")
        document = await client.get_player_stats(2544)

        assert document["fullName"] == "LeBron James"

    @pytest.mark.asyncio
    async def test_no_rows_is_player_not_found(self):
        client = NBAAPIClient()
        client.session = mock_session(payload={"resultSets": [
            result_set("SeasonTotalsRegularSeason", TOTALS_HEADERS, []),
            result_set("CareerTotalsRegularSeason", CAREER_HEADERS, []),
        ]})

        with pytest.raises(PlayerNotFoundError) as exc_info:
            await client.get_player_stats(1)
        assert exc_info.value.context.endpoint == "playercareerstats"

    @pytest.mark.asyncio
    async def test_missing_result_sets_is_response_error(self):
        client = NBAAPIClient()
        client.session = mock_session(payload={"message": "unexpected"})

        with pytest.raises(ProviderResponseError):
            await client.get_player_stats(1)


class TestNBATeamsAndGames:

    @pytest.mark.asyncio
    async def test_get_team_info(self):
        client = NBAAPIClient()
        client.session = mock_session(payload={"resultSets": [result_set(
            "TeamInfoCommon",
            ["TEAM_ID", "TEAM_CITY", "TEAM_NAME", "TEAM_ABBREVIATION"],
            [[1610612747, "Los Angeles", "Lakers", "LAL"]],
        )]})

        team = await client.get_team_info(1610612747)

        assert team.id == "1610612747"
        assert team.name == "Lakers"
        assert team.abbreviation == "LAL"
        assert team.city == "Los Angeles"

    @pytest.mark.asyncio
    async def test_get_team_info_empty(self):
        client = NBAAPIClient()
        client.session = mock_session(payload={"resultSets": [
            result_set("TeamInfoCommon", ["TEAM_ID"], []),
        ]})

        with pytest.raises(TeamNotFoundError):
            await client.get_team_info(1)

    @pytest.mark.asyncio
    async def test_get_teams_skips_defunct(self):
        this_year = datetime.now().year
        client = NBAAPIClient()
        client.session = mock_session(payload={"resultSets": [result_set(
            "TeamYears",
            ["LEAGUE_ID", "TEAM_ID", "MIN_YEAR", "MAX_YEAR", "ABBREVIATION"],
            [
                ["00", 1610612747, "1948", str(this_year), "LAL"],
                ["00", 1610610024, "1946", "1949", None],
            ],
        )]})

        teams = await client.get_teams()

        assert [team.abbreviation for team in teams] == ["LAL"]

    @pytest.mark.asyncio
    async def test_schedule_joins_line_scores(self):
        client = NBAAPIClient()
        client.session = mock_session(payload={"resultSets": [
            result_set(
                "GameHeader",
                ["GAME_ID", "GAME_DATE_EST", "GAME_STATUS_TEXT", "HOME_TEAM_ID", "VISITOR_TEAM_ID"],
                [
                    ["0022300001", "2024-01-15T00:00:00", "Final ", 1610612747, 1610612738],
                    ["0022300002", "2024-01-15T00:00:00", "7:30 pm ET", 1610612744, 1610612751],
                ],
            ),
            result_set(
                "LineScore",
                ["GAME_ID", "TEAM_ID", "TEAM_ABBREVIATION", "TEAM_CITY_NAME", "TEAM_NAME", "PTS"],
                [
                    ["0022300001", 1610612747, "LAL", "Los Angeles", "Lakers", 110],
                    ["0022300001", 1610612738, "BOS", "Boston", "Celtics", 104],
                ],
            ),
        ]})

        games = await client.get_schedule("2024-01-15", team_id=1610612738)

        assert requested_params(client.session)["GameDate"] == "2024-01-15"
        assert len(games) == 1
        game = games[0]
        assert game.status == "Final"
        assert game.home_team.name == "Lakers"
        assert game.home_score == 110
        assert game.away_score == 104

    @pytest.mark.asyncio
    async def test_get_game_not_found(self):
        client = NBAAPIClient()
        client.session = mock_session(payload={"resultSets": [
            result_set("GameSummary", ["GAME_ID"], []),
        ]})

        with pytest.raises(GameNotFoundError):
            await client.get_game("0022300099")
