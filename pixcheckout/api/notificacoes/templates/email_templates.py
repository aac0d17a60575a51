"""
Templates de e-mail. Cada template recebe o dicionário de dados e devolve
(assunto, html). Valores são escapados antes de entrar no HTML.
"""
from datetime import datetime
from html import escape
from typing import Any, Callable, Dict, Tuple

LAYOUT = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    {conteudo}
    <p style="font-size: 12px; color: #666;">Esta é uma mensagem automática. Por favor, não responda a este email.</p>
  </div>
</body>
</html>"""


def _v(data: Dict[str, Any], chave: str, padrao: str = "") -> str:
    return escape(str(data.get(chave, padrao)))


def _moeda(valor: Any) -> str:
    try:
        return f"{float(valor):.2f}"
    except (TypeError, ValueError):
        return "0.00"


def _data_br(valor: Any) -> str:
    if isinstance(valor, datetime):
        return valor.strftime("%d/%m/%Y")
    if isinstance(valor, str) and valor:
        try:
            return datetime.fromisoformat(valor.replace("Z", "+00:00")).strftime("%d/%m/%Y")
        except ValueError:
            return escape(valor)
    return ""


def _order_confirmation(data):
    return "Pedido Confirmado", f"""
    <h1>Pedido Confirmado!</h1>
    <p>Olá {_v(data, 'customerName')},</p>
    <p>Seu pedido #{_v(data, 'orderId')} foi confirmado com sucesso.</p>
    <p>Detalhes do pedido:</p>
    <ul>
      <li>Produto: {_v(data, 'productName')}</li>
      <li>Valor: R$ {_moeda(data.get('amount'))}</li>
      <li>Data: {_data_br(data.get('date'))}</li>
    </ul>
    <p>Obrigado pela sua compra!</p>"""


def _payment_received(data):
    return "Pagamento Recebido", f"""
    <h1>Pagamento Recebido!</h1>
    <p>Olá {_v(data, 'customerName')},</p>
    <p>Recebemos o pagamento do seu pedido #{_v(data, 'orderId')}.</p>
    <p>Valor: R$ {_moeda(data.get('amount'))}</p>
    <p>Método: {_v(data, 'paymentMethod', 'PIX')}</p>
    <p>Obrigado!</p>"""


def _payment_expired(data):
    return "Pagamento Expirado", f"""
    <h1>Pagamento Expirado</h1>
    <p>Olá {_v(data, 'customerName')},</p>
    <p>O prazo para pagamento do seu pedido #{_v(data, 'orderId')} expirou.</p>
    <p>Para continuar com a compra, por favor, solicite um novo link de pagamento.</p>"""


def _access_granted(data):
    return "Acesso Liberado", f"""
    <h1>Acesso Liberado!</h1>
    <p>Olá {_v(data, 'customerName')},</p>
    <p>Seu acesso ao produto {_v(data, 'productName')} foi liberado.</p>
    <p>Válido até: {_data_br(data.get('expiresAt'))}</p>"""


def _daily_summary(data):
    return "Resumo Diário", f"""
    <h1>Resumo Diário</h1>
    <p>Aqui está o resumo das atividades de hoje:</p>
    <ul>
      <li>Novos pedidos: {_v(data, 'newOrders', 0)}</li>
      <li>Pagamentos confirmados: {_v(data, 'confirmedPayments', 0)}</li>
      <li>Valor total: R$ {_moeda(data.get('totalAmount'))}</li>
    </ul>"""


def _weekly_report(data):
    produtos = "".join(
        f"<li>{escape(str(p.get('name')))}: {p.get('count', 0)} vendas, R$ {_moeda(p.get('revenue'))}</li>"
        for p in data.get('topProducts') or []
    )
    return "Relatório Semanal", f"""
    <h1>Relatório Semanal</h1>
    <ul>
      <li>Pedidos: {_v(data, 'totalOrders', 0)}</li>
      <li>Pagamentos confirmados: {_v(data, 'paidOrders', 0)}</li>
      <li>Vendas: R$ {_moeda(data.get('totalAmount'))}</li>
      <li>Conversão: {_moeda(data.get('conversionRate'))}%</li>
    </ul>
    <h2>Produtos mais vendidos</h2>
    <ul>{produtos or '<li>Nenhuma venda no período</li>'}</ul>"""


def _scheduled_report(data):
    return f"Relatório: {data.get('reportName', '')}", f"""
    <h1>{_v(data, 'reportName')}</h1>
    <p>Seu relatório agendado foi gerado.</p>
    <p>Período: {_data_br(data.get('startDate'))} a {_data_br(data.get('endDate'))}</p>
    <p><a href="{_v(data, 'fileUrl')}">Baixar relatório</a></p>"""


TEMPLATES: Dict[str, Callable[[Dict[str, Any]], Tuple[str, str]]] = {
    "order_confirmation": _order_confirmation,
    "payment_received": _payment_received,
    "payment_expired": _payment_expired,
    "access_granted": _access_granted,
    "daily_summary": _daily_summary,
    "weekly_report": _weekly_report,
    "scheduled_report": _scheduled_report,
}


def renderizar(template: str, data: Dict[str, Any]) -> Tuple[str, str]:
    """Retorna (assunto, html). KeyError para template desconhecido."""
    assunto, conteudo = TEMPLATES[template](data or {})
    return assunto, LAYOUT.format(conteudo=conteudo)
