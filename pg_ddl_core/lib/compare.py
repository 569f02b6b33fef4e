import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from pg_ddl_core.lib.diff import diff_lines
from pg_ddl_core.lib.errors import DirectoryNotFoundError
from pg_ddl_core.lib.normalize import fingerprint, read_sql_file, strip_header
from pg_ddl_core.lib.objects import DiffItem, DiffStatus, DiffSummary, ObjectKey, ObjectRecord

SQL_EXTENSION = ".sql"
DEFAULT_IGNORED_CATEGORIES = ("data",)


def get_categories(env_dir: str) -> List[str]:
    """Sorted names of the category subdirectories of an environment."""
    if not os.path.isdir(env_dir):
        return []
    return sorted(
        entry.name for entry in os.scandir(env_dir) if entry.is_dir()
    )


def get_sql_files(category_dir: str) -> Dict[str, str]:
    """Map of object name (file name without .sql) to file path."""
    files = {}
    if not os.path.isdir(category_dir):
        return files
    for name in os.listdir(category_dir):
        path = os.path.join(category_dir, name)
        if name.endswith(SQL_EXTENSION) and os.path.isfile(path):
            files[name[:-len(SQL_EXTENSION)]] = path
    return files


def load_record(category: str, object_name: str, path: str) -> ObjectRecord:
    content = read_sql_file(path)
    return ObjectRecord(
        key=ObjectKey(category, object_name),
        path=path,
        fingerprint=fingerprint(content),
        ddl=strip_header(content),
    )


def scan_environment(
    env_dir: str,
    ignore_categories: Iterable[str] = DEFAULT_IGNORED_CATEGORIES
) -> Dict[ObjectKey, ObjectRecord]:
    """Load every captured object of one environment directory."""
    if not os.path.isdir(env_dir):
        raise DirectoryNotFoundError(env_dir)
    ignored = set(ignore_categories)
    records = {}
    for category in get_categories(env_dir):
        if category in ignored:
            continue
        for object_name, path in sorted(get_sql_files(os.path.join(env_dir, category)).items()):
            record = load_record(category, object_name, path)
            records[record.key] = record
    logging.debug(f"Scanned {len(records)} objects in {env_dir}")
    return records


def compare_dirs(
    left_dir: str,
    right_dir: str,
    *,
    left_name: str = "dev",
    right_name: str = "prod",
    with_diff: bool = True,
    ignore_categories: Iterable[str] = DEFAULT_IGNORED_CATEGORIES,
    context_lines: int = 2
) -> DiffSummary:
    """
    Compare two captured environment directories.

    Args:
        left_dir: Source environment (objects only here become only_dev)
        right_dir: Target environment (objects only here become only_prod)
        left_name: Environment label for the left side
        right_name: Environment label for the right side
        with_diff: Compute the rendered line diff for modified objects
        ignore_categories: Category directories excluded from the comparison
        context_lines: Context lines kept around each change in rendered diffs

    Returns:
        DiffSummary with items sorted by category, then object name
    """
    if not os.path.isdir(left_dir):
        raise DirectoryNotFoundError(left_dir, "Folder")
    if not os.path.isdir(right_dir):
        raise DirectoryNotFoundError(right_dir, "Folder")

    left_records = scan_environment(left_dir, ignore_categories)
    right_records = scan_environment(right_dir, ignore_categories)

    summary = DiffSummary(
        total_dev=len(left_records),
        total_prod=len(right_records),
        left_name=left_name,
        right_name=right_name,
    )

    all_keys = sorted(
        set(left_records) | set(right_records),
        key=lambda k: (k.category, k.object_name)
    )

    for key in all_keys:
        left = left_records.get(key)
        right = right_records.get(key)

        if right is None:
            summary.items.append(DiffItem(
                category=key.category,
                object_name=key.object_name,
                status=DiffStatus.ONLY_DEV,
                left_path=left.path,
                left_ddl=left.ddl,
            ))
            summary.only_dev += 1
        elif left is None:
            summary.items.append(DiffItem(
                category=key.category,
                object_name=key.object_name,
                status=DiffStatus.ONLY_PROD,
                right_path=right.path,
                right_ddl=right.ddl,
            ))
            summary.only_prod += 1
        elif left.fingerprint == right.fingerprint:
            summary.identical += 1
        else:
            item = DiffItem(
                category=key.category,
                object_name=key.object_name,
                status=DiffStatus.MODIFIED,
                left_path=left.path,
                right_path=right.path,
                left_ddl=left.ddl,
                right_ddl=right.ddl,
            )
            if with_diff:
                item.diff = diff_lines(
                    left.ddl.split("\n"),
                    right.ddl.split("\n"),
                    left_label=left_name.upper(),
                    right_label=right_name.upper(),
                    context=context_lines,
                )
            summary.items.append(item)
            summary.modified += 1

    logging.info(
        f"Compared {left_dir} ({summary.total_dev} objects) with {right_dir} "
        f"({summary.total_prod} objects): {summary.identical} identical, "
        f"{summary.modified} modified, {summary.only_dev} only {left_name}, "
        f"{summary.only_prod} only {right_name}"
    )
    return summary


def compare_envs(
    sql_root: str,
    left: str = "dev",
    right: str = "prod",
    **kwargs
) -> DiffSummary:
    """Compare <sql_root>/<left> against <sql_root>/<right>."""
    left_dir = os.path.join(sql_root, left)
    right_dir = os.path.join(sql_root, right)
    if not os.path.isdir(left_dir):
        raise DirectoryNotFoundError(left_dir, f"{left.upper()} folder")
    if not os.path.isdir(right_dir):
        raise DirectoryNotFoundError(right_dir, f"{right.upper()} folder")
    return compare_dirs(left_dir, right_dir, left_name=left, right_name=right, **kwargs)


@dataclass
class EnvPair:
    """Comparison of one unordered pair of environments."""
    left: str
    right: str
    summary: DiffSummary

    def to_dict(self) -> dict:
        return {
            "env1": self.left,
            "env2": self.right,
            "identical": self.summary.identical,
            "only_first": self.summary.only_dev,
            "only_second": self.summary.only_prod,
            "modified": self.summary.modified,
            "total1": self.summary.total_dev,
            "total2": self.summary.total_prod,
        }


@dataclass
class MultiEnvResult:
    envs: List[str]
    pairs: List[EnvPair] = field(default_factory=list)

    def pair(self, env1: str, env2: str) -> Optional[EnvPair]:
        for p in self.pairs:
            if {p.left, p.right} == {env1, env2}:
                return p
        return None

    def to_dict(self) -> dict:
        return {"envs": list(self.envs), "pairs": [p.to_dict() for p in self.pairs]}


def compare_many(sql_root: str, env_names: Sequence[str], **kwargs) -> MultiEnvResult:
    """
    Compare every unordered pair of environments under sql_root.

    Pairs are ordered as (envs[i], envs[j]) for i < j. Each pairwise comparison is
    independent, so callers may run them in parallel themselves.
    """
    if len(env_names) < 2:
        raise ValueError("At least two environments are required for a multi-environment comparison")

    result = MultiEnvResult(envs=list(env_names))
    for i in range(len(env_names)):
        for j in range(i + 1, len(env_names)):
            summary = compare_envs(sql_root, env_names[i], env_names[j], **kwargs)
            result.pairs.append(EnvPair(env_names[i], env_names[j], summary))
    return result
