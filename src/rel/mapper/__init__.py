"""Struct-mapping access layer and its demo program."""

from .data_mapper import DataMapper, MapperTransaction, SqlExecutor

__all__ = ["DataMapper", "MapperTransaction", "SqlExecutor"]
