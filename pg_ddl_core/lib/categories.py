"""
Object categories and the dependency ordering shared by the planners.
"""

from enum import Enum
from typing import Union


class Category(Enum):
    """Enumeration of captured object categories (also their directory names)."""
    SCHEMAS = "schemas"
    TYPES = "types"
    SEQUENCES = "sequences"
    TABLES = "tables"
    FUNCTIONS = "functions"
    VIEWS = "views"
    MATERIALIZED_VIEWS = "materialized_views"
    TRIGGERS = "triggers"
    INDEXES = "indexes"
    DATA = "data"


class Action(Enum):
    """Kind of migration command, valued by its priority offset."""
    DROP = 10
    CREATE = 20
    ALTER = 30


# Dependency direction: objects on the left are depended upon by objects on the right
CATEGORY_RANK = {
    Category.SCHEMAS: 1,
    Category.TYPES: 2,
    Category.SEQUENCES: 3,
    Category.TABLES: 4,
    Category.FUNCTIONS: 5,
    Category.VIEWS: 6,
    Category.MATERIALIZED_VIEWS: 7,
    Category.TRIGGERS: 8,
    Category.INDEXES: 9,
}

UNKNOWN_RANK = 99

OBJECT_KEYWORDS = {
    Category.SCHEMAS: "SCHEMA",
    Category.TYPES: "TYPE",
    Category.SEQUENCES: "SEQUENCE",
    Category.TABLES: "TABLE",
    Category.FUNCTIONS: "FUNCTION",
    Category.VIEWS: "VIEW",
    Category.MATERIALIZED_VIEWS: "MATERIALIZED VIEW",
    Category.TRIGGERS: "TRIGGER",
    Category.INDEXES: "INDEX",
}

SINGULAR_NAMES = {
    Category.SCHEMAS: "schema",
    Category.TYPES: "type",
    Category.SEQUENCES: "sequence",
    Category.TABLES: "table",
    Category.FUNCTIONS: "function",
    Category.VIEWS: "view",
    Category.MATERIALIZED_VIEWS: "materialized_view",
    Category.TRIGGERS: "trigger",
    Category.INDEXES: "index",
    Category.DATA: "data",
}

# Categories whose DDL is stored as CREATE OR REPLACE and can be re-applied in place
REPLACEABLE = {Category.FUNCTIONS, Category.VIEWS}


def to_category(name: Union[str, Category]) -> Union[Category, str]:
    """Resolve a directory name to a Category, leaving unknown names as strings."""
    if isinstance(name, Category):
        return name
    try:
        return Category(name)
    except ValueError:
        return name


def category_rank(name: Union[str, Category]) -> int:
    category = to_category(name)
    if isinstance(category, Category):
        return CATEGORY_RANK.get(category, UNKNOWN_RANK)
    return UNKNOWN_RANK


def object_keyword(name: Union[str, Category]) -> str:
    """SQL keyword used in DROP statements for a category."""
    category = to_category(name)
    if isinstance(category, Category) and category in OBJECT_KEYWORDS:
        return OBJECT_KEYWORDS[category]
    return str(name).upper()


def singular(name: Union[str, Category]) -> str:
    category = to_category(name)
    if isinstance(category, Category):
        return SINGULAR_NAMES[category]
    return name[:-1] if name.endswith("s") else name


def is_replaceable(name: Union[str, Category]) -> bool:
    return to_category(name) in REPLACEABLE


def priority_for(name: Union[str, Category], action: Action) -> int:
    """
    Derive the sort key for a command.

    CREATE and ALTER follow the category rank so dependencies are created first.
    DROP inverts the rank so dependents are dropped before what they reference.
    """
    rank = category_rank(name)
    if action == Action.DROP:
        return (100 - rank) * 100 + action.value
    return rank * 100 + action.value
