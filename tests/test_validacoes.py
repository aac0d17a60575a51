from pixcheckout.utils.validacoes import (
    formatar_documento,
    formatar_telefone,
    somente_digitos,
    validar_documento,
    validar_email,
    validar_telefone,
)


def test_cpf_valido_com_e_sem_mascara():
    assert validar_documento("52998224725")
    assert validar_documento("529.982.247-25")
    assert validar_documento("111.444.777-35")


def test_cpf_com_digito_errado_ou_repetido():
    assert not validar_documento("52998224726")
    assert not validar_documento("00000000000")


def test_cnpj_valido_e_invalido():
    assert validar_documento("11.222.333/0001-81")
    assert not validar_documento("11222333000182")
    assert not validar_documento("00000000000000")


def test_documento_com_tamanho_errado():
    assert not validar_documento("123")
    assert not validar_documento("")
    assert not validar_documento(None)


def test_formatacao_de_documentos():
    assert formatar_documento("52998224725") == "529.982.247-25"
    assert formatar_documento("11222333000181") == "11.222.333/0001-81"
    assert formatar_documento("12-3") == "123"


def test_telefone():
    assert validar_telefone("(11) 98765-4321")
    assert validar_telefone("1133334444")
    assert not validar_telefone("98765")
    assert formatar_telefone("11987654321") == "(11) 98765-4321"
    assert formatar_telefone("1133334444") == "(11) 3333-4444"


def test_email_e_digitos():
    assert validar_email("cliente@example.com")
    assert not validar_email("cliente@")
    assert not validar_email("sem arroba.com")
    assert not validar_email(None)
    assert somente_digitos("a1b2-3") == "123"
