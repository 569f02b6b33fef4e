from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pg_ddl_core.lib.categories import Action


class DiffStatus(Enum):
    """Classification of an object that is not identical on both sides."""
    ONLY_DEV = "only_dev"
    ONLY_PROD = "only_prod"
    MODIFIED = "modified"


@dataclass(frozen=True)
class ObjectKey:
    """Identity of a captured object: its category directory and dotted schema.object name."""
    category: str
    object_name: str

    def __str__(self) -> str:
        return f"{self.category}/{self.object_name}"


@dataclass
class ObjectRecord:
    """
    One .sql file found while scanning an environment directory.

    Attributes:
        key: Category and object name
        path: Path of the file on disk
        fingerprint: Hash of the normalized content
        ddl: Header-stripped DDL text
    """
    key: ObjectKey
    path: str
    fingerprint: str
    ddl: str = ""


@dataclass
class DiffItem:
    """
    An object that differs between the left (source) and right (target) environments.

    Attributes:
        category: Category directory name (e.g. "tables")
        object_name: Qualified object name (e.g. "public.users")
        status: only_dev, only_prod or modified
        left_path: File path on the left side, if present there
        right_path: File path on the right side, if present there
        left_ddl: Header-stripped DDL on the left side
        right_ddl: Header-stripped DDL on the right side
        diff: Rendered, context-windowed line diff (modified items only)
    """
    category: str
    object_name: str
    status: DiffStatus
    left_path: Optional[str] = None
    right_path: Optional[str] = None
    left_ddl: Optional[str] = None
    right_ddl: Optional[str] = None
    diff: List[str] = field(default_factory=list)

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.category, self.object_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "object": self.object_name,
            "status": self.status.value,
            "left_path": self.left_path,
            "right_path": self.right_path,
            "diff": list(self.diff),
        }


@dataclass
class DiffSummary:
    """Result of comparing two environments. Items are sorted by category, then object name."""
    total_dev: int = 0
    total_prod: int = 0
    only_dev: int = 0
    only_prod: int = 0
    modified: int = 0
    identical: int = 0
    items: List[DiffItem] = field(default_factory=list)
    left_name: str = "dev"
    right_name: str = "prod"

    @property
    def total_differences(self) -> int:
        return self.only_dev + self.only_prod + self.modified

    @property
    def in_sync(self) -> bool:
        return self.total_differences == 0

    def items_with_status(self, status: DiffStatus) -> List[DiffItem]:
        return [item for item in self.items if item.status == status]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left": self.left_name,
            "right": self.right_name,
            "total_dev": self.total_dev,
            "total_prod": self.total_prod,
            "only_dev": self.only_dev,
            "only_prod": self.only_prod,
            "modified": self.modified,
            "identical": self.identical,
            "items": [item.to_dict() for item in self.items],
        }


# Marker placed in generated SQL that a human must complete or verify
MANUAL_REVIEW_MARKER = "WARNING: manual review needed"


@dataclass(frozen=True)
class MigrationCommand:
    """
    A single DDL step of a migration or rollback plan.

    priority is a derived sort key (lower runs first), see categories.priority_for.
    """
    category: str
    object_name: str
    sql: str
    priority: int
    comment: str
    action: Action = Action.CREATE

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.category, self.object_name)

    @property
    def needs_review(self) -> bool:
        return MANUAL_REVIEW_MARKER in self.sql

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "object": self.object_name,
            "sql": self.sql,
            "priority": self.priority,
            "comment": self.comment,
            "action": self.action.name,
        }

    def __str__(self) -> str:
        return f"MigrationCommand({self.action.name} {self.category}: {self.object_name})"


def make_timestamp(now: Optional[datetime] = None) -> str:
    """Timestamp used in migration file names, e.g. 20260118_093000."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


@dataclass
class Migration:
    """Ordered forward plan. Commands are sorted ascending by priority."""
    commands: List[MigrationCommand] = field(default_factory=list)
    creates: int = 0
    drops: int = 0
    alters: int = 0
    timestamp: str = field(default_factory=make_timestamp)
    left_name: str = "dev"
    right_name: str = "prod"

    @property
    def summary(self) -> Dict[str, int]:
        return {"creates": self.creates, "drops": self.drops, "alters": self.alters}

    @property
    def filename(self) -> str:
        return f"{self.timestamp}_{self.left_name}_to_{self.right_name}.sql"

    def __len__(self) -> int:
        return len(self.commands)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "left": self.left_name,
            "right": self.right_name,
            "summary": self.summary,
            "commands": [cmd.to_dict() for cmd in self.commands],
        }


@dataclass
class Rollback:
    """Inverse plan. Commands restore the right (target) side's captured definitions."""
    commands: List[MigrationCommand] = field(default_factory=list)
    timestamp: str = field(default_factory=make_timestamp)
    migration_file: str = ""
    left_name: str = "dev"
    right_name: str = "prod"

    @property
    def filename(self) -> str:
        return f"{self.timestamp}_rollback.sql"

    def __len__(self) -> int:
        return len(self.commands)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "migration_file": self.migration_file,
            "commands": [cmd.to_dict() for cmd in self.commands],
        }
