import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from pixcheckout.api.relatorios.services.service_dados import Relatorio, data_br

ESTILO_TABELA = TableStyle(
    [
        ("GRID", (0, 0), (-1, -1), 0.35, colors.lightgrey),
        ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8.5),
    ]
)


class CanvasNumerado(canvas.Canvas):
    """Guarda as páginas até o fim para escrever "Página i de n" no rodapé."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._paginas = []

    def showPage(self):
        self._paginas.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._paginas)
        for estado in self._paginas:
            self.__dict__.update(estado)
            self._rodape(total)
            super().showPage()
        super().save()

    def _rodape(self, total: int):
        self.setFont("Helvetica", 9)
        self.setFillColor(colors.grey)
        self.drawCentredString(A4[0] / 2, 1 * cm, f"Página {self._pageNumber} de {total}")


def gerar_pdf(relatorio: Relatorio) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.2 * cm,
        leftMargin=1.2 * cm,
        topMargin=1.2 * cm,
        bottomMargin=1.8 * cm,
        title=relatorio.titulo,
    )
    styles = getSampleStyleSheet()
    elements = [
        Paragraph(relatorio.titulo, styles["Title"]),
        Paragraph(f"Gerado em {data_br(relatorio.gerado_em)}", styles["Normal"]),
        Paragraph(
            f"Período: {data_br(relatorio.inicio, False)} a {data_br(relatorio.fim, False)}",
            styles["Normal"],
        ),
        Spacer(1, 12),
    ]

    if relatorio.resumo:
        elements.append(Paragraph("Resumo", styles["Heading2"]))
        resumo = Table([[rotulo, valor] for rotulo, valor in relatorio.resumo], colWidths=[7 * cm, 6 * cm])
        resumo.setStyle(
            TableStyle(
                [
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        elements += [resumo, Spacer(1, 14)]

    for secao in relatorio.secoes:
        elements.append(Paragraph(secao.titulo, styles["Heading2"]))
        if not secao.linhas:
            elements.append(Paragraph("Nenhum registro no período.", styles["Normal"]))
        else:
            linhas = [secao.colunas] + [[str(v) for v in linha] for linha in secao.linhas]
            tabela = Table(linhas, repeatRows=1)
            tabela.setStyle(ESTILO_TABELA)
            elements.append(tabela)
        elements.append(Spacer(1, 12))

    doc.build(elements, canvasmaker=CanvasNumerado)
    return buffer.getvalue()
