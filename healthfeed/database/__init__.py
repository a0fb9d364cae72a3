"""
Database module - relational access layer.

This module handles:
- Database connection management
- Parameterized query execution
- Article, doctor and user queries
- Schema creation and demo seeding
"""
from healthfeed.database.connection import DatabaseConnection, get_database, reset_database
from healthfeed.database.executor import QueryExecutor, QueryResult
from healthfeed.database.repository import ArticleRepository, AccountRepository
from healthfeed.database.models import Article, Doctor, User, Base
from healthfeed.database.init_db import init_tables, drop_tables, seed_demo_accounts

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    "reset_database",
    # Executor
    "QueryExecutor",
    "QueryResult",
    # Repositories
    "ArticleRepository",
    "AccountRepository",
    # Models
    "Article",
    "Doctor",
    "User",
    "Base",
    # Init
    "init_tables",
    "drop_tables",
    "seed_demo_accounts",
]
