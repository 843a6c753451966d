"""Query-builder access layer and its demo program."""

from .session import BuilderSession, BuilderTx, Collection, Inserter, Result, Updater

__all__ = ["BuilderSession", "BuilderTx", "Collection", "Inserter", "Result", "Updater"]
