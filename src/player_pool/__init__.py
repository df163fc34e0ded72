from src.player_pool.catalog import PlayerCatalog

__all__ = ["PlayerCatalog"]
