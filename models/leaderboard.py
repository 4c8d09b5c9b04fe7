# models/leaderboard.py

from dataclasses import dataclass, asdict


@dataclass
class LeaderboardRow:
    user_id: str
    display_name: str
    window_completed_count: int = 0
    perfect_day_count: int = 0
    total_days_tracked: int = 0
    average_per_day: float = 0.0
    rank: int = 0
    is_current_user: bool = False

    def to_dict(self) -> dict:
        return asdict(self)
