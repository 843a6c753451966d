"""Demo program commands."""

from collections.abc import Callable, Sequence

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel

from src.rel.builder import program as builder_program
from src.rel.core.naming import NamingConvention
from src.rel.core.services.database.db_session import DbSessionService
from src.rel.errors import RelError
from src.rel.mapper import program as mapper_program
from src.rel.runtime.context import get_config
from src.rel.runtime.init_db import init_db
from src.rel.runtime.logging_setup import configure_logging

console = Console(stderr=True)


def _run_program(title: str, program: Callable[[DbSessionService, Sequence[str]], None]) -> None:
    main_config = get_config()
    configure_logging(main_config)

    console.print(Panel.fit(f"[bold green]{title}[/bold green]", border_style="green"))

    naming = NamingConvention(main_config.naming.style)
    try:
        with DbSessionService(main_config.database, naming) as db:
            program(db, main_config.demo.collections)
    except RelError as e:
        logger.error("{}", e)
        raise typer.Exit(code=1)


def mapper() -> None:
    """
    🗂️  Run the struct-mapping demo (SQLModel sessions over table models).
    """
    _run_program("Struct-mapping demo", mapper_program.run)


def builder() -> None:
    """
    🧱 Run the query-builder demo (SQLAlchemy Core statements over records).
    """
    _run_program("Query-builder demo", builder_program.run)


def create_tables() -> None:
    """
    🛠️  Create the product, spec, image, category and product_category tables.
    """
    main_config = get_config()
    configure_logging(main_config)
    try:
        init_db()
    except RelError as e:
        logger.error("{}", e)
        raise typer.Exit(code=1)
    console.print("[green]✅ Tables created[/green]")


def register_commands(app: typer.Typer) -> None:
    app.command(name="mapper")(mapper)
    app.command(name="builder")(builder)
    app.command(name="init-db")(create_tables)
