# pixcheckout/api/cadastros/router/router.py

from fastapi import APIRouter

from pixcheckout.api.cadastros.router.admin import (
    router_clientes,
    router_cupons,
    router_links,
    router_produtos,
)
from pixcheckout.api.cadastros.router.public import (
    router_produtos as router_produtos_public,
)

api_cadastros = APIRouter(
    tags=["API - Cadastros"]
)

# Routers públicos (sem autenticação)
api_cadastros.include_router(router_produtos_public)

# Routers para admin (usam get_current_user)
api_cadastros.include_router(router_produtos)
api_cadastros.include_router(router_clientes)
api_cadastros.include_router(router_cupons)
api_cadastros.include_router(router_links)
