"""
Testes da instalação e do ciclo completo.
"""

import pytest

from instalador_pkcs12.core.erros import ErroCadeia, ErroSenhaAusente
from instalador_pkcs12.models.certificado import ResultadoInstrucao
from instalador_pkcs12.schemas.instalacao import Instalacao
from instalador_pkcs12.services import instalador_service
from instalador_pkcs12.services.instalador_service import Pkcs12Installer
from instalador_pkcs12.services.pkcs12_service import carregar_pkcs12, empacotar_pkcs12

SENHA = "senha-do-pacote"


class ExecutorFalso:
    """Registra as instruções recebidas e devolve respostas pré-definidas."""

    def __init__(self, respostas=None):
        self.respostas = respostas or {}
        self.executadas = []

    def executar(self, instrucao):
        self.executadas.append(instrucao)
        return self.respostas.get(instrucao, ResultadoInstrucao(saida="", sucesso=True))


@pytest.fixture
def caminho(tmp_path):
    return tmp_path / "certificado.p12"


def _instalador(caminho, executor=None, **kwargs):
    kwargs.setdefault("senha_p12", SENHA)
    return Pkcs12Installer(Instalacao(arquivo=str(caminho), **kwargs), executor=executor or ExecutorFalso())


def test_instalar_grava_pacote(caminho, colecao, certificado_leaf):
    _instalador(caminho).instalar(colecao)

    _, certificado, cadeia = carregar_pkcs12(caminho.read_bytes(), SENHA)
    assert certificado == certificado_leaf
    assert len(cadeia) == 1


def test_instalar_sem_senha_nao_grava(caminho, colecao):
    with pytest.raises(ErroSenhaAusente):
        _instalador(caminho, senha_p12="").instalar(colecao)

    assert not caminho.exists()


def test_falha_no_empacotamento_preserva_pacote_atual(caminho, colecao):
    caminho.write_bytes(b"pacote anterior")
    colecao.cadeia.append("lixo")

    with pytest.raises(ErroCadeia):
        _instalador(caminho).instalar(colecao)

    assert caminho.read_bytes() == b"pacote anterior"


def test_ciclo_sem_arquivo(caminho, colecao):
    executor = ExecutorFalso()
    instalador = _instalador(
        caminho, executor,
        acao_pos_instalacao="systemctl reload app",
        validacao_instalacao="verificar-app"
    )

    resultado = instalador.executar_ciclo(colecao, "30d")

    assert resultado.instalado is True
    assert resultado.backup.realizado is False
    assert caminho.exists()
    assert executor.executadas == ["systemctl reload app", "verificar-app"]


def test_ciclo_renovacao_faz_backup(caminho, emitir_certificado, colecao_para):
    antigo = emitir_certificado(5)
    conteudo_antigo = empacotar_pkcs12(colecao_para(antigo), SENHA)
    caminho.write_bytes(conteudo_antigo)
    novo = emitir_certificado(365)

    resultado = _instalador(caminho).executar_ciclo(colecao_para(novo), "30d")

    assert resultado.instalado is True
    assert resultado.backup.realizado is True
    assert (caminho.parent / "certificado.p12.bak").read_bytes() == conteudo_antigo
    _, certificado, _ = carregar_pkcs12(caminho.read_bytes(), SENHA)
    assert certificado == novo


def test_ciclo_sem_necessidade_nao_altera_nada(caminho, emitir_certificado, colecao_para):
    conteudo = empacotar_pkcs12(colecao_para(emitir_certificado(365)), SENHA)
    caminho.write_bytes(conteudo)
    executor = ExecutorFalso()

    resultado = _instalador(caminho, executor, acao_pos_instalacao="reload").executar_ciclo(
        colecao_para(emitir_certificado(400)), "30d"
    )

    assert resultado.instalado is False
    assert caminho.read_bytes() == conteudo
    assert not (caminho.parent / "certificado.p12.bak").exists()
    assert executor.executadas == []


def test_ciclo_sem_backup_configurado(caminho, emitir_certificado, colecao_para):
    caminho.write_bytes(empacotar_pkcs12(colecao_para(emitir_certificado(5)), SENHA))

    resultado = _instalador(caminho, fazer_backup=False).executar_ciclo(
        colecao_para(emitir_certificado(365)), "30d"
    )

    assert resultado.backup is None
    assert not (caminho.parent / "certificado.p12.bak").exists()


def test_falha_na_instalacao_mantem_backup(caminho, emitir_certificado, colecao_para):
    conteudo_antigo = empacotar_pkcs12(colecao_para(emitir_certificado(5)), SENHA)
    caminho.write_bytes(conteudo_antigo)
    colecao = colecao_para(emitir_certificado(365))
    colecao.cadeia.append("lixo")
    executor = ExecutorFalso()

    with pytest.raises(ErroCadeia):
        _instalador(caminho, executor, acao_pos_instalacao="reload").executar_ciclo(colecao, "30d")

    assert (caminho.parent / "certificado.p12.bak").read_bytes() == conteudo_antigo
    assert caminho.read_bytes() == conteudo_antigo
    assert executor.executadas == []


def test_falha_no_backup_interrompe_o_ciclo(caminho, emitir_certificado, colecao_para, monkeypatch):
    conteudo_antigo = empacotar_pkcs12(colecao_para(emitir_certificado(5)), SENHA)
    caminho.write_bytes(conteudo_antigo)
    executor = ExecutorFalso()

    def copiar_com_falha(origem, destino):
        raise PermissionError(f"sem permissão para gravar {destino}")

    monkeypatch.setattr(instalador_service, "copiar_arquivo", copiar_com_falha)

    instalador = _instalador(caminho, executor, acao_pos_instalacao="reload", validacao_instalacao="validar")

    with pytest.raises(OSError):
        instalador.executar_ciclo(colecao_para(emitir_certificado(365)), "30d")

    assert caminho.read_bytes() == conteudo_antigo
    assert not (caminho.parent / "certificado.p12.bak").exists()
    assert executor.executadas == []


def test_falha_da_acao_nao_afeta_pacote(caminho, colecao, certificado_leaf):
    executor = ExecutorFalso({
        "reload": ResultadoInstrucao(saida="erro", sucesso=False),
        "validar": ResultadoInstrucao(saida="1", sucesso=True),
    })

    resultado = _instalador(
        caminho, executor, acao_pos_instalacao="reload", validacao_instalacao="validar"
    ).executar_ciclo(colecao, "30d")

    assert resultado.pos_instalacao.sucesso is False
    assert resultado.validacao.saida == "1"
    _, certificado, _ = carregar_pkcs12(caminho.read_bytes(), SENHA)
    assert certificado == certificado_leaf


def test_algoritmo_invalido_rejeitado():
    with pytest.raises(ValueError):
        Instalacao(arquivo="x.p12", algoritmo="RC4")


def test_repr_nao_expoe_senha():
    instalacao = Instalacao(arquivo="x.p12", senha_p12="segredo", senha_chave="outro")

    assert "segredo" not in repr(instalacao)
    assert "outro" not in repr(instalacao)
