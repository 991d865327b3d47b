"""
Service para instalação de certificados no formato PKCS#12.

Um ciclo de instalação segue sempre a mesma ordem:
- Verificação: o pacote atual existe? Está perto de vencer?
- Backup: copia o pacote atual para <arquivo>.bak
- Instalação: empacota a ColecaoPEM e grava o novo pacote
- Ações de pós-instalação e validação

Qualquer erro interrompe as etapas seguintes.
"""

import logging
from datetime import datetime
from typing import Optional

from ..core.erros import ErroSenhaAusente
from ..infrastructure.config import RENOVAR_ANTES_PADRAO, SUFIXO_BACKUP
from ..infrastructure.logger import get_logger
from ..models.certificado import ColecaoPEM, ResultadoBackup, ResultadoCiclo, ResultadoInstrucao
from ..schemas.instalacao import Instalacao
from ..utils.arquivos import arquivo_existe, copiar_arquivo, gravar_arquivo
from ..utils.certificado_utils import LimiarRenovacao, precisa_renovar
from .execucao_instrucoes import ExecutorInstrucoes, ShellInstructionRunner
from .pkcs12_service import carregar_pkcs12, empacotar_pkcs12


class Pkcs12Installer:
    """
    Instalador de pacotes PKCS#12 em um caminho local.

    Não coordena execuções concorrentes sobre o mesmo arquivo: se isso for
    possível, o chamador deve garantir exclusão mútua.
    """

    def __init__(
        self,
        instalacao: Instalacao,
        executor: Optional[ExecutorInstrucoes] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            instalacao: Destino e senhas da instalação
            executor: Executor das instruções de pós-instalação/validação.
                Se None, usa ShellInstructionRunner.
            logger: Logger para as mensagens do ciclo. Se None, usa o logger do módulo.
        """
        self.instalacao = instalacao
        self.executor = executor or ShellInstructionRunner()
        self.logger = logger or get_logger(__name__)

    @property
    def arquivo_backup(self) -> str:
        return f"{self.instalacao.arquivo}{SUFIXO_BACKUP}"

    def verificar(self, renovar_antes: str, agora: Optional[datetime] = None) -> bool:
        """
        Decide se o certificado precisa ser instalado.

        1. O arquivo não existe? Instalar.
        2. O certificado estará vencido em "agora + renovar_antes"? Renovar.

        Args:
            renovar_antes: Antecedência de renovação (ex: "30d", "10%")
            agora: Instante de referência. Se None, usa o relógio atual.

        Returns:
            True se a instalação deve prosseguir

        Raises:
            ErroLimiarRenovacao: Se renovar_antes for inválido
            ErroLeituraPKCS12: Se o pacote existente não puder ser decifrado
            OSError: Se houver erro ao acessar o arquivo
        """
        arquivo = self.instalacao.arquivo
        self.logger.info(f"Verificando saúde do certificado - formato: PKCS12, local: {arquivo}")

        limiar = LimiarRenovacao.interpretar(renovar_antes)

        if not arquivo_existe(arquivo):
            self.logger.info(f"Nenhum certificado em {arquivo}, instalação necessária")
            return True

        try:
            with open(arquivo, "rb") as f:
                dados = f.read()
        except OSError:
            self.logger.error(f"Não foi possível ler o arquivo PKCS12: {arquivo}")
            raise

        _, certificado, _ = carregar_pkcs12(dados, self.instalacao.senha_p12)

        renovar, data_limite = precisa_renovar(certificado, limiar, agora)
        if renovar:
            self.logger.info(
                f"Certificado vence em {certificado.not_valid_after_utc.isoformat()}, "
                f"antes de {data_limite.isoformat()}: renovação necessária"
            )
        else:
            self.logger.info(
                f"Certificado válido até {certificado.not_valid_after_utc.isoformat()}, renovação não necessária"
            )
        return renovar

    def backup(self) -> ResultadoBackup:
        """
        Copia o pacote atual para <arquivo>.bak antes de sobrescrevê-lo.

        Um backup anterior é sempre sobrescrito.

        Raises:
            OSError: Se a cópia falhar (a instalação não deve prosseguir)
        """
        arquivo = self.instalacao.arquivo
        self.logger.debug(f"Fazendo backup do certificado: {arquivo}")

        if not arquivo_existe(arquivo):
            self.logger.info("Novo local de certificado informado, nenhum backup realizado")
            return ResultadoBackup(realizado=False, origem=arquivo)

        destino = self.arquivo_backup
        copiar_arquivo(arquivo, destino)

        self.logger.info(f"Backup do certificado realizado: {arquivo} -> {destino}")
        return ResultadoBackup(realizado=True, origem=arquivo, destino=destino)

    def instalar(self, colecao: ColecaoPEM) -> None:
        """
        Empacota a coleção como PKCS#12 e grava no caminho da instalação.

        Raises:
            ErroSenhaAusente: Se a senha do PKCS#12 não estiver configurada
            ErroInstalacao: Se o empacotamento falhar
            OSError: Se a gravação falhar
        """
        arquivo = self.instalacao.arquivo
        self.logger.debug(f"Instalando certificado em: {arquivo}")

        if not self.instalacao.senha_p12:
            raise ErroSenhaAusente()

        try:
            conteudo = empacotar_pkcs12(
                colecao,
                self.instalacao.senha_p12,
                senha_chave=self.instalacao.senha_chave,
                algoritmo=self.instalacao.algoritmo
            )
        except Exception as e:
            self.logger.error(f"Não foi possível empacotar o certificado como PKCS12: {e}")
            raise

        gravar_arquivo(arquivo, conteudo)
        self.logger.info(f"Certificado instalado em: {arquivo}")

    def acoes_pos_instalacao(self) -> ResultadoInstrucao:
        """
        Executa a instrução de pós-instalação configurada.

        Nenhuma validação é feita sobre o conteúdo da instrução.
        """
        self.logger.debug(f"Executando ações de pós-instalação - local: {self.instalacao.arquivo}")
        return self.executor.executar(self.instalacao.acao_pos_instalacao)

    def acoes_validacao_instalacao(self) -> ResultadoInstrucao:
        """
        Executa a instrução de validação configurada.

        Por convenção a saída é "0" para validação com sucesso e "1" para
        falha; a interpretação fica com o chamador.
        """
        self.logger.debug(f"Executando ações de validação - local: {self.instalacao.arquivo}")
        return self.executor.executar(self.instalacao.validacao_instalacao)

    def executar_ciclo(
        self,
        colecao: ColecaoPEM,
        renovar_antes: Optional[str] = None,
        agora: Optional[datetime] = None
    ) -> ResultadoCiclo:
        """
        Executa um ciclo completo: verificação, backup, instalação e ações.

        Args:
            colecao: Certificado, chave e cadeia a instalar
            renovar_antes: Antecedência de renovação. Se None, usa PKCS12_RENOVAR_ANTES.
            agora: Instante de referência da verificação

        Returns:
            ResultadoCiclo com o que foi feito
        """
        if not self.verificar(renovar_antes or RENOVAR_ANTES_PADRAO, agora):
            return ResultadoCiclo(instalado=False)

        backup = self.backup() if self.instalacao.fazer_backup else None

        self.instalar(colecao)

        # O pacote já está gravado; as ações abaixo não o alteram
        pos_instalacao = self.acoes_pos_instalacao()
        if not pos_instalacao.sucesso:
            self.logger.warning(f"Ação de pós-instalação falhou: {pos_instalacao.saida}")

        validacao = self.acoes_validacao_instalacao()

        return ResultadoCiclo(
            instalado=True,
            backup=backup,
            pos_instalacao=pos_instalacao,
            validacao=validacao
        )
