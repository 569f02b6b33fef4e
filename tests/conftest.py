import os
import tempfile

import pytest

HEADER = "-- Extracted: 2026-01-18 09:30:00\n-- Source: {env}\n\n"


def write_object(sql_root, env, category, object_name, ddl, header=True):
    """Write one captured object file <sql_root>/<env>/<category>/<object_name>.sql."""
    category_dir = os.path.join(sql_root, env, category)
    os.makedirs(category_dir, exist_ok=True)
    path = os.path.join(category_dir, f"{object_name}.sql")
    content = (HEADER.format(env=env) if header else "") + ddl
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


@pytest.fixture
def sql_root():
    """Temporary SQL root with empty dev and prod environments."""
    with tempfile.TemporaryDirectory() as root:
        os.makedirs(os.path.join(root, "dev"))
        os.makedirs(os.path.join(root, "prod"))
        yield root


@pytest.fixture
def add_object(sql_root):
    def _add(env, category, object_name, ddl, header=True):
        return write_object(sql_root, env, category, object_name, ddl, header)
    return _add
