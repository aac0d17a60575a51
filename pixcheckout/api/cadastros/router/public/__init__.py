from .router_produtos import router as router_produtos

__all__ = ["router_produtos"]
