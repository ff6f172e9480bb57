"""Bank clients, users and items, with in-memory and SQL stores and Werkzeug request handlers."""

__version__ = "0.1.0"

__all__ = [
    "clients",
    "handlers",
    "item_handlers",
    "items",
    "sql_store",
    "store",
    "users",
]