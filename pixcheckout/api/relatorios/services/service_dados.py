from __future__ import annotations

from collections import Counter, OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Tuple

from pixcheckout.api.relatorios.repositories.repository import RelatorioRepository
from pixcheckout.utils.database_utils import now_trimmed, as_aware, TZ_SP

TITULOS = {
    "sales": "Relatório de Vendas",
    "products": "Relatório de Produtos",
    "customers": "Relatório de Clientes",
    "access": "Relatório de Acessos",
}


@dataclass
class SecaoRelatorio:
    titulo: str
    colunas: List[str]
    linhas: List[List[Any]] = field(default_factory=list)


@dataclass
class Relatorio:
    tipo: str
    titulo: str
    inicio: datetime
    fim: datetime
    gerado_em: datetime
    resumo: List[Tuple[str, str]] = field(default_factory=list)
    secoes: List[SecaoRelatorio] = field(default_factory=list)
    metricas: Dict[str, Any] = field(default_factory=dict)


def _float(valor: Decimal | float | None) -> float:
    """Converte para float com 2 casas decimais (meia para cima)."""
    if valor is None:
        return 0.0
    return float(Decimal(str(valor)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def moeda(valor) -> str:
    return f"R$ {_float(valor):.2f}"


def data_br(valor: datetime | None, com_hora: bool = True) -> str:
    if not valor:
        return ""
    valor = as_aware(valor).astimezone(TZ_SP)
    return valor.strftime("%d/%m/%Y %H:%M" if com_hora else "%d/%m/%Y")


class RelatorioDadosService:
    def __init__(self, repository: RelatorioRepository):
        self.repository = repository

    def montar(self, tipo: str, inicio: datetime, fim: datetime) -> Relatorio:
        construtor = getattr(self, f"_{tipo}", None)
        if construtor is None:
            raise ValueError(f"Tipo de relatório inválido: {tipo}")
        relatorio = Relatorio(
            tipo=tipo,
            titulo=TITULOS[tipo],
            inicio=inicio,
            fim=fim,
            gerado_em=now_trimmed(),
        )
        construtor(relatorio)
        return relatorio

    # ---------------- VENDAS ----------------
    def _sales(self, rel: Relatorio):
        pedidos = self.repository.pedidos_periodo(rel.inicio, rel.fim)
        pagos = [p for p in pedidos if p.status == "paid"]
        total_vendas = sum(_float(p.amount) for p in pagos)
        conversao = round(len(pagos) / len(pedidos) * 100, 2) if pedidos else 0.0
        ticket = round(total_vendas / len(pagos), 2) if pagos else 0.0

        por_dia: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        for pedido in sorted(pedidos, key=lambda p: as_aware(p.created_at)):
            dia = as_aware(pedido.created_at).astimezone(TZ_SP).strftime("%Y-%m-%d")
            item = por_dia.setdefault(dia, {"date": dia, "total": 0.0, "count": 0, "paid": 0})
            item["count"] += 1
            if pedido.status == "paid":
                item["paid"] += 1
                item["total"] = round(item["total"] + _float(pedido.amount), 2)

        distribuicao = dict(Counter(p.status for p in pedidos))

        rel.metricas = {
            "totalSales": round(total_vendas, 2),
            "totalOrders": len(pedidos),
            "paidOrders": len(pagos),
            "conversionRate": conversao,
            "averageTicket": ticket,
            "salesByDay": list(por_dia.values()),
            "statusDistribution": distribuicao,
        }
        rel.resumo = [
            ("Total em Vendas", moeda(total_vendas)),
            ("Total de Pedidos", str(len(pedidos))),
            ("Pedidos Pagos", str(len(pagos))),
            ("Taxa de Conversão", f"{conversao:.1f}%"),
            ("Ticket Médio", moeda(ticket)),
        ]
        rel.secoes = [
            SecaoRelatorio(
                "Vendas por Dia",
                ["Data", "Pedidos", "Pagos", "Total"],
                [[d["date"], d["count"], d["paid"], moeda(d["total"])] for d in por_dia.values()],
            ),
            SecaoRelatorio(
                "Status dos Pedidos",
                ["Status", "Quantidade"],
                [[status, qtd] for status, qtd in sorted(distribuicao.items())],
            ),
            SecaoRelatorio(
                "Pedidos",
                ["Pedido", "Cliente", "Produto", "Valor", "Status", "Data"],
                [
                    [
                        f"#{p.id}",
                        p.customer.name if p.customer else "",
                        p.product.name if p.product else "",
                        moeda(p.amount),
                        p.status,
                        data_br(p.created_at),
                    ]
                    for p in pedidos
                ],
            ),
        ]

    # ---------------- PRODUTOS ----------------
    def _products(self, rel: Relatorio):
        produtos = self.repository.produtos()
        pedidos = self.repository.pedidos_periodo(rel.inicio, rel.fim)

        metricas: Dict[int, Dict[str, Any]] = {
            p.id: {"id": p.id, "name": p.name, "type": p.type, "active": p.active,
                   "orders": 0, "sales": 0, "revenue": 0.0}
            for p in produtos
        }
        for pedido in pedidos:
            item = metricas.get(pedido.product_id)
            if item is None:
                continue
            item["orders"] += 1
            if pedido.status == "paid":
                item["sales"] += 1
                item["revenue"] = round(item["revenue"] + _float(pedido.amount), 2)

        ranking = sorted(metricas.values(), key=lambda m: m["revenue"], reverse=True)
        por_tipo = dict(Counter(p.type for p in produtos))
        ativos = sum(1 for p in produtos if p.active)

        rel.metricas = {
            "totalProducts": len(produtos),
            "activeProducts": ativos,
            "byType": por_tipo,
            "products": ranking,
        }
        rel.resumo = [
            ("Total de Produtos", str(len(produtos))),
            ("Produtos Ativos", str(ativos)),
            ("Receita no Período", moeda(sum(m["revenue"] for m in ranking))),
        ]
        rel.secoes = [
            SecaoRelatorio("Produtos por Tipo", ["Tipo", "Quantidade"], [[t, q] for t, q in sorted(por_tipo.items())]),
            SecaoRelatorio(
                "Vendas por Produto",
                ["Produto", "Pedidos", "Vendas", "Receita", "Ticket Médio"],
                [
                    [m["name"], m["orders"], m["sales"], moeda(m["revenue"]),
                     moeda(m["revenue"] / m["sales"] if m["sales"] else 0)]
                    for m in ranking
                ],
            ),
        ]

    # ---------------- CLIENTES ----------------
    def _customers(self, rel: Relatorio):
        clientes = self.repository.clientes()
        pedidos = self.repository.pedidos_por_cliente()

        metricas: Dict[int, Dict[str, Any]] = {
            c.id: {"id": c.id, "name": c.name, "email": c.email, "orders": 0, "paidOrders": 0, "totalSpent": 0.0}
            for c in clientes
        }
        for pedido in pedidos:
            item = metricas.get(pedido.customer_id)
            if item is None:
                continue
            item["orders"] += 1
            if pedido.status == "paid":
                item["paidOrders"] += 1
                item["totalSpent"] = round(item["totalSpent"] + _float(pedido.amount), 2)
        for item in metricas.values():
            item["averageTicket"] = round(item["totalSpent"] / (item["paidOrders"] or 1), 2)

        inicio, fim = as_aware(rel.inicio), as_aware(rel.fim)
        novos = sum(1 for c in clientes if inicio <= as_aware(c.created_at) <= fim)
        ranking = sorted(metricas.values(), key=lambda m: m["totalSpent"], reverse=True)

        rel.metricas = {"totalCustomers": len(clientes), "newCustomers": novos, "customers": ranking}
        rel.resumo = [
            ("Total de Clientes", str(len(clientes))),
            ("Novos Clientes no Período", str(novos)),
        ]
        rel.secoes = [
            SecaoRelatorio(
                "Top Clientes",
                ["Cliente", "E-mail", "Pedidos", "Total Gasto", "Ticket Médio"],
                [[m["name"], m["email"], m["orders"], moeda(m["totalSpent"]), moeda(m["averageTicket"])] for m in ranking],
            )
        ]

    # ---------------- ACESSOS ----------------
    def _access(self, rel: Relatorio):
        registros = self.repository.acessos_periodo(rel.inicio, rel.fim)
        usuarios = {cliente_id for _, cliente_id in registros}
        arquivos = {log.file_id for log, _ in registros if log.file_id}

        rel.metricas = {
            "totalAccesses": len(registros),
            "uniqueUsers": len(usuarios),
            "uniqueFiles": len(arquivos),
        }
        rel.resumo = [
            ("Total de Acessos", str(len(registros))),
            ("Usuários Únicos", str(len(usuarios))),
            ("Arquivos Acessados", str(len(arquivos))),
        ]
        rel.secoes = [
            SecaoRelatorio(
                "Acessos Recentes",
                ["Data", "Cliente", "Arquivo", "Ação"],
                [[data_br(log.created_at), cliente_id, log.file_id or "", log.action] for log, cliente_id in registros],
            )
        ]
