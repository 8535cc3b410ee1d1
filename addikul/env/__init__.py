from .game_env import AddiKulEnv
from .gym_env import AddiKulGymEnv

__all__ = ["AddiKulEnv", "AddiKulGymEnv"]
