"""Shared pytest fixtures for the Function Point test suite."""

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path
BASE_DIR = Path(__file__).resolve().parent.parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from analysis import FPAnalysis, LogicalFileType, ProcessType  # noqa: E402


SAMPLE_SQL = """
CREATE TABLE IF NOT EXISTS "Mensagem_Inicial" (
    "id" INTEGER NOT NULL UNIQUE,
    "Texto" TEXT,
    PRIMARY KEY("id")
);
CREATE TABLE IF NOT EXISTS "Categoria" (
    "id" INTEGER NOT NULL UNIQUE,
    "Nome_da_categoria" TEXT,
    PRIMARY KEY("id")
);
CREATE TABLE IF NOT EXISTS "Mensagem_da_categoria" (
    "id" INTEGER NOT NULL UNIQUE,
    "ID_Categoria" INTEGER,
    "Texto" TEXT,
    "Resposta" TEXT,
    PRIMARY KEY("id"),
    FOREIGN KEY ("id") REFERENCES "Categoria"("id")
    ON UPDATE NO ACTION ON DELETE NO ACTION
);
CREATE TABLE IF NOT EXISTS "Acao" (
    "id" INTEGER NOT NULL UNIQUE,
    "tipo" TEXT,
    "Valor" TEXT,
    "Mensagem" INTEGER,
    PRIMARY KEY("id"),
    FOREIGN KEY ("Mensagem") REFERENCES "Mensagem_da_categoria"("id")
    ON UPDATE NO ACTION ON DELETE NO ACTION
);
"""


@pytest.fixture
def sample_sql():
    return SAMPLE_SQL


@pytest.fixture
def store():
    """Empty store."""
    return FPAnalysis()


@pytest.fixture
def seeded_store(sample_sql):
    """Store seeded from the sample schema, with one RET and two processes."""
    fpa = FPAnalysis()
    fpa.extract_schema(sample_sql)
    assert fpa.add_logical_file(
        "Categoria_Traducao", LogicalFileType.RET,
        [{"name": "idioma", "dtype": "TEXT"}, {"name": "nome", "dtype": "TEXT"}],
        parent_name="Categoria",
    )
    assert fpa.add_elementary_process("Cadastrar categoria", ProcessType.EI, [
        {"name": "id", "logicalFileName": "Categoria"},
        {"name": "Nome_da_categoria", "logicalFileName": "Categoria"},
        {"name": "idioma", "logicalFileName": "Categoria_Traducao"},
    ])
    assert fpa.add_elementary_process("Consultar mensagens", ProcessType.EQ, [
        {"name": "Texto", "logicalFileName": "Mensagem_da_categoria"},
        {"name": "Resposta", "logicalFileName": "Mensagem_da_categoria"},
        {"name": "Nome_da_categoria", "logicalFileName": "Categoria"},
    ])
    return fpa
