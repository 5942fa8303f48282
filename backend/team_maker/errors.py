class TeamMakerError(Exception):
    """Base class for errors raised around team generation."""

    code = "team_maker_error"


class GameNotFound(TeamMakerError):
    code = "game_not_found"

    def __init__(self, game_id) -> None:
        super().__init__(f"game {game_id} not found")
        self.game_id = game_id


class PlayerNotInTeam(TeamMakerError):
    code = "player_not_found"

    def __init__(self, player_id, team: str) -> None:
        super().__init__(f"player {player_id} is not in team {team}")
        self.player_id = player_id
        self.team = team
