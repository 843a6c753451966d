"""End-to-end runs of both demo programs and the CLI against a SQLite file."""

from pathlib import Path

import pytest
from sqlmodel import select
from typer.testing import CliRunner

from src.rel.builder import program as builder_program
from src.rel.cli import app
from src.rel.core.services.database.db_manage import DbManageService
from src.rel.core.services.database.db_session import DbSessionService
from src.rel.entities import ImageTable, ProductTable, SpecTable
from src.rel.mapper import program as mapper_program
from src.rel.runtime.config.config_data import DEFAULT_COLLECTIONS, ConfigData, DatabaseConfig
from src.rel.runtime.context import with_context


@pytest.fixture
def file_db(tmp_path: Path):
    config = DatabaseConfig(url=f"sqlite:///{tmp_path / 'rel.db'}")
    with DbSessionService(config) as db:
        DbManageService(db.engine).create_all()
        yield db


def _contents(db: DbSessionService):
    with db.session_scope() as session:
        products = {(p.id, p.name) for p in session.exec(select(ProductTable))}
        specs = {(s.id, s.weight, s.product_id) for s in session.exec(select(SpecTable))}
        images = {(i.id, i.url, i.product_id) for i in session.exec(select(ImageTable))}
    return products, specs, images


EXPECTED = (
    {("foo", "Foo"), ("bar", "Bar"), ("zip", "Zip")},
    {("fspec", 1, "foo"), ("bspec", 2, "bar"), ("zspec", 3, "zip")},
    {("fgif", "foo.gif", "foo"), ("fpng", "foo.png", "foo")},
)


@pytest.mark.parametrize("run", [mapper_program.run, builder_program.run], ids=["mapper", "builder"])
class TestPrograms:
    def test_final_contents(self, file_db: DbSessionService, run):
        run(file_db, DEFAULT_COLLECTIONS)

        assert _contents(file_db) == EXPECTED

    def test_rerun_is_idempotent(self, file_db: DbSessionService, run):
        run(file_db, DEFAULT_COLLECTIONS)
        run(file_db, DEFAULT_COLLECTIONS)

        assert _contents(file_db) == EXPECTED

    def test_logs_rename_and_joins(self, file_db: DbSessionService, run, log_messages):
        run(file_db, DEFAULT_COLLECTIONS)

        products = [m for m in log_messages if m.startswith("Products: ")]
        assert len(products) == 2
        assert "bar:Barr" in products[0]
        assert "bar:Barr" not in products[1]
        assert "bar:Bar" in products[1]
        assert sum(" -- " in m for m in log_messages) == 5
        assert any(m.startswith("Settings: ConnMaxLifetime: -1") for m in log_messages)


@pytest.mark.usefixtures("restore_logging")
class TestCli:
    def _override(self, url: str) -> ConfigData:
        return ConfigData(database=DatabaseConfig(url=url))

    def test_init_db_then_both_programs(self, tmp_path: Path):
        runner = CliRunner()

        with with_context(self._override(f"sqlite:///{tmp_path / 'rel.db'}")):
            init = runner.invoke(app, ["init-db"])
            mapper = runner.invoke(app, ["mapper"])
            builder = runner.invoke(app, ["builder"])

        assert init.exit_code == 0, init.output
        assert mapper.exit_code == 0, mapper.output
        assert builder.exit_code == 0, builder.output

    def test_unreachable_database_exits_non_zero(self, tmp_path: Path):
        runner = CliRunner()

        with with_context(self._override(f"sqlite:///{tmp_path / 'missing' / 'rel.db'}")):
            result = runner.invoke(app, ["mapper"])

        assert result.exit_code == 1

    def test_malformed_connection_string_exits_non_zero(self):
        with with_context(self._override("dbname=rel = sslmode")):
            result = CliRunner().invoke(app, ["mapper"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_missing_tables_exit_non_zero(self, tmp_path: Path):
        runner = CliRunner()

        with with_context(self._override(f"sqlite:///{tmp_path / 'rel.db'}")):
            result = runner.invoke(app, ["builder"])

        assert result.exit_code == 1

    def test_help_lists_commands(self):
        result = CliRunner().invoke(app, ["--help"])

        assert result.exit_code == 0

        assert "mapper" in result.output
        assert "init-db" in result.output
