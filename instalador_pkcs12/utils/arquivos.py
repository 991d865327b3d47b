"""
Operações de arquivo usadas pelo instalador.

Gravações são atômicas: o conteúdo vai para um arquivo temporário no mesmo
diretório e só então substitui o destino com os.replace. Se o destino for um
link simbólico, o arquivo apontado é que é substituído; o link é mantido.
"""

import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Union

from ..infrastructure.config import PERMISSAO_ARQUIVO

Caminho = Union[str, Path]


def arquivo_existe(caminho: Caminho) -> bool:
    """
    Verifica se existe um arquivo regular no caminho.

    Returns:
        False se o caminho não existir

    Raises:
        IsADirectoryError: Se o caminho for um diretório
        OSError: Para qualquer outro erro de acesso (ex: permissão)
    """
    try:
        info = os.stat(caminho)
    except FileNotFoundError:
        return False

    if stat.S_ISDIR(info.st_mode):
        raise IsADirectoryError(f"O caminho informado é um diretório: {caminho}")

    return True


def _temporario_ao_lado(destino: Path):
    return tempfile.NamedTemporaryFile(
        mode="wb",
        dir=destino.parent,
        prefix=f".{destino.name}.",
        suffix=".tmp",
        delete=False
    )


def gravar_arquivo(caminho: Caminho, conteudo: bytes, permissao: int = PERMISSAO_ARQUIVO) -> None:
    """
    Grava o conteúdo de forma atômica: ou o arquivo completo, ou nada.

    Raises:
        OSError: Se houver erro ao gravar (o destino anterior permanece intacto)
    """
    destino = Path(os.path.realpath(caminho))
    destino.parent.mkdir(parents=True, exist_ok=True)

    tmp = _temporario_ao_lado(destino)
    try:
        with tmp:
            tmp.write(conteudo)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp.name, permissao)
        os.replace(tmp.name, destino)
    except BaseException:
        if os.path.exists(tmp.name):
            os.unlink(tmp.name)
        raise


def copiar_arquivo(origem: Caminho, destino: Caminho) -> None:
    """
    Copia a origem byte a byte para o destino, sobrescrevendo-o.

    A origem é apenas lida; o destino é substituído atomicamente.

    Raises:
        OSError: Se houver erro de leitura ou gravação
    """
    destino = Path(os.path.realpath(destino))

    tmp = _temporario_ao_lado(destino)
    try:
        with tmp, open(origem, "rb") as f:
            shutil.copyfileobj(f, tmp)
            tmp.flush()
            os.fsync(tmp.fileno())
        shutil.copymode(origem, tmp.name)
        os.replace(tmp.name, destino)
    except BaseException:
        if os.path.exists(tmp.name):
            os.unlink(tmp.name)
        raise
