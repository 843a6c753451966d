"""Main CLI application module."""

import typer

from .demo_commands import register_commands

app = typer.Typer(
    help="rel - compare a struct-mapping layer and a query builder on one schema",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_commands(app)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
