"""Bot AI players for Tresette.

Available bots:
- BotStrategyEngine: Heuristic play and signs with difficulty levels (easy/medium/hard)
- RandomBot: Plays random legal cards, used as a fallback
"""

from tresette.bots.base_bot import BaseBot, BotDifficulty
from tresette.bots.random_bot import RandomBot
from tresette.bots.strategy_engine import BotStrategyEngine, SignThresholds

__all__ = ["BaseBot", "BotDifficulty", "BotStrategyEngine", "RandomBot", "SignThresholds"]
