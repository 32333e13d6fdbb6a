from .options import CHARACTER_OPTIONS
from .service import CharacterAttributes, compute_initial_stats, route_for_status

__all__ = [
    "CHARACTER_OPTIONS",
    "CharacterAttributes",
    "compute_initial_stats",
    "route_for_status",
]
