#!/usr/bin/env python3
"""
Ponto de entrada de linha de comando do instalador PKCS#12.

Uso:
    instalador-pkcs12 --arquivo ARQUIVO --certificado CERT_PEM --chave CHAVE_PEM [opções]

Exemplos:
    # Instala (ou renova) o certificado se vencer nos próximos 30 dias
    instalador-pkcs12 --arquivo /etc/app/cert.p12 --senha segredo \\
        --certificado cert.pem --chave key.pem --cadeia chain.pem

    # Apenas verifica se a instalação é necessária (código de saída 0 = sim, 2 = não)
    instalador-pkcs12 --arquivo /etc/app/cert.p12 --senha segredo --verificar
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from .core.erros import ErroInstalacao
from .infrastructure.config import ALGORITMO_PADRAO, ALGORITMOS_SUPORTADOS, RENOVAR_ANTES_PADRAO
from .infrastructure.logger import configure_logger, get_logger
from .models.certificado import ColecaoPEM
from .schemas.instalacao import Instalacao
from .services.instalador_service import Pkcs12Installer

logger = get_logger(__name__)

CODIGO_SUCESSO = 0
CODIGO_ERRO = 1
CODIGO_SEM_INSTALACAO = 2


def _criar_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="instalador-pkcs12",
        description="Instala ou renova um certificado em um pacote PKCS#12 local."
    )
    parser.add_argument("--arquivo", required=True, help="Caminho do arquivo .p12/.pfx")
    parser.add_argument(
        "--senha",
        default=os.getenv("PKCS12_SENHA", ""),
        help="Senha do pacote PKCS#12 (padrão: variável PKCS12_SENHA)"
    )
    parser.add_argument("--certificado", help="Arquivo PEM do certificado final")
    parser.add_argument("--chave", help="Arquivo PEM da chave privada")
    parser.add_argument("--cadeia", action="append", default=[], help="Arquivo PEM da cadeia (pode repetir)")
    parser.add_argument("--senha-chave", default=None, help="Senha da chave PEM, se diferente da senha do pacote")
    parser.add_argument(
        "--renovar-antes",
        default=RENOVAR_ANTES_PADRAO,
        help=f"Antecedência de renovação: 30d, 12h, 2w ou 10%% (padrão: {RENOVAR_ANTES_PADRAO})"
    )
    parser.add_argument(
        "--algoritmo",
        default=ALGORITMO_PADRAO,
        type=str.upper,
        choices=ALGORITMOS_SUPORTADOS,
        help="Perfil de criptografia do pacote"
    )
    parser.add_argument("--pos-instalacao", default="", help="Instrução executada após a instalação")
    parser.add_argument("--validacao", default="", help="Instrução de validação (saída '0' ou '1')")
    parser.add_argument("--sem-backup", action="store_true", help="Não copiar o pacote atual para .bak")
    parser.add_argument("--verificar", action="store_true", help="Apenas verifica se a instalação é necessária")
    parser.add_argument("--debug", action="store_true", help="Ativa logs de debug")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Executa o instalador e retorna o código de saída."""
    args = _criar_parser().parse_args(argv)

    if args.debug:
        configure_logger(logging.DEBUG)

    try:
        instalacao = Instalacao(
            arquivo=args.arquivo,
            senha_p12=args.senha,
            senha_chave=args.senha_chave,
            acao_pos_instalacao=args.pos_instalacao,
            validacao_instalacao=args.validacao,
            fazer_backup=not args.sem_backup,
            algoritmo=args.algoritmo
        )
        instalador = Pkcs12Installer(instalacao)

        if args.verificar:
            necessario = instalador.verificar(args.renovar_antes)
            return CODIGO_SUCESSO if necessario else CODIGO_SEM_INSTALACAO

        if not args.certificado or not args.chave:
            logger.error("--certificado e --chave são obrigatórios para instalar")
            return CODIGO_ERRO

        colecao = ColecaoPEM.de_arquivos(args.certificado, args.chave, args.cadeia)
        resultado = instalador.executar_ciclo(colecao, args.renovar_antes)
    except (ErroInstalacao, OSError, ValidationError) as e:
        logger.error(f"Falha na instalação: {e}")
        return CODIGO_ERRO

    if not resultado.instalado:
        logger.info("Certificado atual ainda é válido, nada a fazer")
        return CODIGO_SUCESSO

    if resultado.validacao is not None and resultado.validacao.saida:
        logger.info(f"Resultado da validação: {resultado.validacao.saida}")

    return CODIGO_SUCESSO


if __name__ == "__main__":
    sys.exit(main())
