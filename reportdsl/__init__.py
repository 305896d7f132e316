"""Lexer, syntax tree and PostgreSQL SELECT compiler for a report filter language."""

__version__ = "0.1.0"
__all__ = ["ast", "compiler", "config", "lexer", "options", "sqlbuilder", "token"]