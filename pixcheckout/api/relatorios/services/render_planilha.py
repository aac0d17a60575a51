import csv
import io

from pixcheckout.api.relatorios.services.service_dados import Relatorio, data_br

# Separador ";" e BOM para o Excel em pt-BR abrir sem importação
DELIMITADOR = ";"


def gerar_planilha(relatorio: Relatorio) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=DELIMITADOR, lineterminator="\n")

    writer.writerow([relatorio.titulo])
    writer.writerow(["Gerado em", data_br(relatorio.gerado_em)])
    writer.writerow(["Período", f"{data_br(relatorio.inicio, False)} a {data_br(relatorio.fim, False)}"])
    writer.writerow([])

    for rotulo, valor in relatorio.resumo:
        writer.writerow([rotulo, valor])

    for secao in relatorio.secoes:
        writer.writerow([])
        writer.writerow([secao.titulo])
        writer.writerow(secao.colunas)
        writer.writerows(secao.linhas)

    return buffer.getvalue().encode("utf-8-sig")
