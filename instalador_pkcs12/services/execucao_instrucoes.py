"""
Execução das instruções de pós-instalação e validação.

O instalador depende apenas do protocolo ExecutorInstrucoes; a implementação
padrão roda a instrução em um shell. Nenhuma validação é feita sobre o
conteúdo da instrução: a responsabilidade fica com quem a configura.
"""

import subprocess
from typing import Optional, Protocol

from ..core.erros import ErroExecucaoInstrucao
from ..infrastructure.config import INSTRUCAO_TIMEOUT
from ..infrastructure.logger import get_logger
from ..models.certificado import ResultadoInstrucao

logger = get_logger(__name__)


class ExecutorInstrucoes(Protocol):
    """Capacidade de executar uma instrução opaca."""

    def executar(self, instrucao: str) -> ResultadoInstrucao:
        ...


class ShellInstructionRunner:
    """Executa instruções em um shell do sistema."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = INSTRUCAO_TIMEOUT if timeout is None else timeout

    def executar(self, instrucao: str) -> ResultadoInstrucao:
        """
        Executa a instrução e retorna a saída padrão.

        Args:
            instrucao: Comando a executar. Vazio não executa nada.

        Returns:
            ResultadoInstrucao com a saída (sem espaços nas pontas) e
            sucesso=True quando o código de saída for 0

        Raises:
            ErroExecucaoInstrucao: Se o processo não puder ser iniciado ou exceder o timeout
        """
        if not instrucao or not instrucao.strip():
            return ResultadoInstrucao(saida="", sucesso=True)

        try:
            processo = subprocess.run(
                instrucao,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ErroExecucaoInstrucao(f"instrução excedeu o timeout de {self.timeout}s") from e
        except OSError as e:
            raise ErroExecucaoInstrucao(f"não foi possível executar a instrução: {e}") from e

        if processo.returncode != 0:
            logger.warning(
                f"Instrução terminou com código {processo.returncode}: {processo.stderr.strip()}"
            )

        return ResultadoInstrucao(
            saida=processo.stdout.strip(),
            sucesso=processo.returncode == 0
        )
