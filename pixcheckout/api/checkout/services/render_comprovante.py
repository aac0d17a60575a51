import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.relatorios.services.service_dados import data_br, moeda

ESTILO_BLOCO = TableStyle(
    [
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
)


def _bloco(linhas) -> Table:
    # células em texto puro; nomes de clientes não passam pelo parser de markup
    tabela = Table([[rotulo, valor or "-"] for rotulo, valor in linhas], colWidths=[5 * cm, 11 * cm])
    tabela.setStyle(ESTILO_BLOCO)
    return tabela


def gerar_comprovante(pedido: PedidoModel) -> bytes:
    """Comprovante de pagamento em PDF de um pedido pago."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2 * cm,
        leftMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=f"Comprovante do pedido {pedido.id}",
    )
    styles = getSampleStyleSheet()
    cliente, produto = pedido.customer, pedido.product

    elements = [
        Paragraph("Comprovante de Pagamento", styles["Title"]),
        Spacer(1, 8),
        _bloco([
            ("Pedido", str(pedido.id)),
            ("Data", data_br(pedido.created_at)),
            ("Pago em", data_br(pedido.paid_at)),
        ]),
        Spacer(1, 14),
        Paragraph("Dados do Cliente", styles["Heading2"]),
        _bloco([
            ("Nome", cliente.name),
            ("Email", cliente.email),
            ("CPF/CNPJ", cliente.cpf),
            ("Telefone", cliente.phone),
        ]),
        Spacer(1, 14),
        Paragraph("Serviço" if produto.type == "service" else "Produto", styles["Heading2"]),
        _bloco([
            ("Nome", produto.name),
            ("Descrição", produto.description),
        ]),
        Spacer(1, 14),
        Paragraph("Pagamento", styles["Heading2"]),
        _bloco([
            ("Valor", moeda(pedido.amount)),
            ("Desconto", moeda(pedido.discount_amount or 0)),
            ("Método", (pedido.payment_method or "pix").upper()),
            ("ID da Transação", pedido.transaction_id),
        ]),
        Spacer(1, 24),
        Paragraph("Este é um documento digital gerado automaticamente.", styles["Italic"]),
    ]

    doc.build(elements)
    return buffer.getvalue()
