"""
Centralização de logs do instalador.

Todas as mensagens vão para stdout, com nível e formato vindos de
LOG_LEVEL e LOG_FORMAT (ver infrastructure.config).
"""

import logging
import sys
from typing import Optional, Union

from .config import LOG_FORMAT, LOG_LEVEL

_logger: Optional[logging.Logger] = None


def _nivel(nivel: Union[int, str]) -> int:
    """Aceita a constante do logging ou o nome do nível (ex: "DEBUG")."""
    if isinstance(nivel, int):
        return nivel

    convertido = logging.getLevelName(nivel.upper())
    return convertido if isinstance(convertido, int) else logging.INFO


def _configurar(nivel: Union[int, str], forcar: bool = False) -> logging.Logger:
    logging.basicConfig(
        level=_nivel(nivel),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=forcar
    )
    return logging.getLogger()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Obtém uma instância do logger configurado.

    Args:
        name: Nome do logger (geralmente __name__ do módulo). Se None, usa o logger raiz.

    Returns:
        Logger configurado
    """
    global _logger

    if _logger is None:
        _logger = _configurar(LOG_LEVEL)

    if name:
        return logging.getLogger(name)

    return _logger


def configure_logger(nivel: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Reconfigura o logger raiz com outro nível (ex: --debug na linha de comando).

    Returns:
        Logger raiz reconfigurado
    """
    global _logger

    _logger = _configurar(nivel, forcar=True)
    return _logger
