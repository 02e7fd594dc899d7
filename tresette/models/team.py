"""Team model: a partnership of two players."""

from collections.abc import Sequence

from tresette.models.player import Player


class Team:
    """Two partners sitting opposite each other.

    Members are assigned the team id at construction.

    Attributes:
        id: Team identifier (e.g. "Team1")
        members: The two players

    """

    def __init__(self, team_id: str, members: Sequence[Player]) -> None:
        """Create the team and assign its id to both members.

        Raises:
            ValueError: If there are not exactly two distinct members.

        """
        if len(members) != 2:  # noqa: PLR2004
            msg = f"A team needs exactly 2 members, got {len(members)}"
            raise ValueError(msg)
        if members[0] is members[1]:
            msg = "Duplicate player in team"
            raise ValueError(msg)

        self.id = team_id
        self.members: tuple[Player, ...] = tuple(members)
        for player in self.members:
            player.assign_team(team_id)

    def current_deal_raw_points(self) -> float:
        """Sum the raw points of all cards won by the members this deal."""
        return sum(card.points for player in self.members for card in player.won_cards)

    def contains(self, player: Player) -> bool:
        """Check whether a player belongs to this team."""
        return any(member is player for member in self.members)

    def contains_id(self, player_id: str) -> bool:
        """Check whether a player id belongs to this team."""
        return any(member.id == player_id for member in self.members)

    def __str__(self) -> str:
        """Return string representation."""
        names = " & ".join(member.username for member in self.members)
        return f"{self.id}: {names}"
