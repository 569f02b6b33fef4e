import os

import pytest

from pg_ddl_core.lib.compare import compare_dirs, compare_envs, compare_many, scan_environment
from pg_ddl_core.lib.errors import DirectoryNotFoundError
from pg_ddl_core.lib.objects import DiffStatus


def _dirs(sql_root):
    return os.path.join(sql_root, "dev"), os.path.join(sql_root, "prod")


def test_empty_environments_are_in_sync(sql_root):
    summary = compare_dirs(*_dirs(sql_root))
    assert summary.total_dev == 0
    assert summary.total_prod == 0
    assert summary.items == []
    assert summary.in_sync


def test_new_table_only_in_dev(sql_root, add_object):
    add_object("dev", "tables", "public.users", "CREATE TABLE public.users (id serial PRIMARY KEY);")
    summary = compare_dirs(*_dirs(sql_root))

    assert summary.only_dev == 1
    assert summary.only_prod == 0
    assert summary.modified == 0
    item = summary.items[0]
    assert item.category == "tables"
    assert item.object_name == "public.users"
    assert item.status == DiffStatus.ONLY_DEV
    assert item.left_path.endswith("public.users.sql")
    assert item.right_path is None


def test_header_only_differences_are_identical(sql_root, add_object):
    add_object("dev", "views", "public.v", "CREATE OR REPLACE VIEW public.v AS SELECT 1;")
    add_object("prod", "views", "public.v", "CREATE OR REPLACE VIEW public.v AS SELECT 1;   \n\n", header=False)
    summary = compare_dirs(*_dirs(sql_root))

    assert summary.identical == 1
    assert summary.items == []


def test_modified_function_has_rendered_diff(sql_root, add_object):
    add_object("dev", "functions", "public.f", "CREATE OR REPLACE FUNCTION public.f()\nRETURNS int\nAS $$ SELECT 2 $$;")
    add_object("prod", "functions", "public.f", "CREATE OR REPLACE FUNCTION public.f()\nRETURNS int\nAS $$ SELECT 1 $$;")
    summary = compare_dirs(*_dirs(sql_root))

    assert summary.modified == 1
    item = summary.items[0]
    assert item.status == DiffStatus.MODIFIED
    assert "+ PROD [3]: AS $$ SELECT 1 $$;" in item.diff
    assert "- DEV  [3]: AS $$ SELECT 2 $$;" in item.diff


def test_modified_without_diff(sql_root, add_object):
    add_object("dev", "types", "public.mood", "CREATE TYPE public.mood AS ENUM ('a');")
    add_object("prod", "types", "public.mood", "CREATE TYPE public.mood AS ENUM ('b');")
    summary = compare_dirs(*_dirs(sql_root), with_diff=False)
    assert summary.modified == 1
    assert summary.items[0].diff == []


def test_classification_is_complete(sql_root, add_object):
    add_object("dev", "tables", "public.a", "CREATE TABLE public.a (id int);")
    add_object("dev", "tables", "public.b", "CREATE TABLE public.b (id int);")
    add_object("prod", "tables", "public.b", "CREATE TABLE public.b (id bigint);")
    add_object("dev", "indexes", "public.idx", "CREATE INDEX idx ON public.b (id);")
    add_object("prod", "indexes", "public.idx", "CREATE INDEX idx ON public.b (id);")
    add_object("prod", "sequences", "public.s", "CREATE SEQUENCE public.s;")
    summary = compare_dirs(*_dirs(sql_root))

    assert summary.total_dev == 3
    assert summary.total_prod == 3
    assert summary.identical == 1
    assert summary.identical + summary.modified + summary.only_dev == summary.total_dev
    assert summary.identical + summary.modified + summary.only_prod == summary.total_prod
    assert len(summary.items) == summary.total_differences


def test_items_sorted_by_category_then_name(sql_root, add_object):
    add_object("dev", "views", "public.b", "CREATE VIEW public.b AS SELECT 1;")
    add_object("dev", "tables", "public.z", "CREATE TABLE public.z ();")
    add_object("prod", "tables", "public.a", "CREATE TABLE public.a ();")
    summary = compare_dirs(*_dirs(sql_root))

    keys = [(item.category, item.object_name) for item in summary.items]
    assert keys == [("tables", "public.a"), ("tables", "public.z"), ("views", "public.b")]


def test_non_sql_files_are_ignored(sql_root, add_object):
    add_object("dev", "tables", "public.a", "CREATE TABLE public.a ();")
    with open(os.path.join(sql_root, "dev", "tables", "README.txt"), "w") as f:
        f.write("notes")
    records = scan_environment(os.path.join(sql_root, "dev"))
    assert [str(key) for key in records] == ["tables/public.a"]


def test_unknown_category_is_compared(sql_root, add_object):
    add_object("dev", "policies", "public.p", "CREATE POLICY p ON public.a USING (true);")
    summary = compare_dirs(*_dirs(sql_root))
    assert summary.items[0].category == "policies"


def test_data_category_is_ignored_by_default(sql_root, add_object):
    add_object("dev", "data", "public.seed", "INSERT INTO public.a VALUES (1);")
    summary = compare_dirs(*_dirs(sql_root))
    assert summary.total_dev == 0
    assert summary.in_sync

    summary = compare_dirs(*_dirs(sql_root), ignore_categories=())
    assert summary.only_dev == 1


def test_missing_directory_raises(sql_root):
    with pytest.raises(DirectoryNotFoundError) as excinfo:
        compare_dirs(os.path.join(sql_root, "nope"), os.path.join(sql_root, "prod"))
    assert excinfo.value.path.endswith("nope")
    assert isinstance(excinfo.value, FileNotFoundError)


def test_compare_envs_uses_names_as_labels(sql_root, add_object):
    add_object("dev", "tables", "public.a", "CREATE TABLE public.a (id int);")
    add_object("prod", "tables", "public.a", "CREATE TABLE public.a (id bigint);")
    summary = compare_envs(sql_root, "dev", "prod")

    assert summary.left_name == "dev"
    assert summary.right_name == "prod"
    assert summary.items[0].diff[0].startswith("- DEV ")


def test_compare_envs_missing_env(sql_root):
    with pytest.raises(DirectoryNotFoundError) as excinfo:
        compare_envs(sql_root, "dev", "stage")
    assert "STAGE folder not found" in str(excinfo.value)


class TestCompareMany:

    def test_requires_two_envs(self, sql_root):
        with pytest.raises(ValueError):
            compare_many(sql_root, ["dev"])

    def test_all_unordered_pairs(self, sql_root, add_object):
        os.makedirs(os.path.join(sql_root, "stage"))
        add_object("dev", "tables", "public.a", "CREATE TABLE public.a ();")
        add_object("stage", "tables", "public.a", "CREATE TABLE public.a ();")

        result = compare_many(sql_root, ["dev", "stage", "prod"])

        assert [(p.left, p.right) for p in result.pairs] == [
            ("dev", "stage"), ("dev", "prod"), ("stage", "prod")
        ]
        assert result.pair("stage", "dev").summary.in_sync
        assert result.pair("dev", "prod").summary.only_dev == 1
        assert result.pair("stage", "prod").summary.only_dev == 1

    def test_to_dict(self, sql_root):
        result = compare_many(sql_root, ["dev", "prod"])
        data = result.to_dict()
        assert data["envs"] == ["dev", "prod"]
        assert data["pairs"][0]["env1"] == "dev"
        assert data["pairs"][0]["identical"] == 0


def test_non_utf8_file_is_compared(sql_root, add_object):
    add_object("dev", "functions", "public.f", "CREATE OR REPLACE FUNCTION public.f() -- café")
    path = os.path.join(sql_root, "prod", "functions")
    os.makedirs(path)
    with open(os.path.join(path, "public.f.sql"), "wb") as f:
        f.write("CREATE OR REPLACE FUNCTION public.f() -- café".encode("latin-1"))

    summary = compare_dirs(*_dirs(sql_root))

    assert summary.modified == 1
    assert "�" in summary.items[0].right_ddl
