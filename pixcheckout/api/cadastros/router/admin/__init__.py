from .router_produtos import router as router_produtos
from .router_clientes import router as router_clientes
from .router_cupons import router as router_cupons
from .router_links import router as router_links

__all__ = [
    "router_produtos",
    "router_clientes",
    "router_cupons",
    "router_links",
]
