from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


# Output schema shared by the flattener and the CSV writer
COLUMNS: Tuple[str, ...] = (
    "id",
    "level",
    "from_id",
    "from_name",
    "group_id",
    "group_name",
    "message",
    "created_time",
    "updated_time",
    "type",
    "picture",
    "link",
    "source",
    "name",
    "caption",
    "description",
    "like_count",
    "comment_count",
    "parent_id",
    "parent_type",
    "comment_index",
)

Row = Tuple[Any, ...]

_COLUMN_SET = frozenset(COLUMNS)


def make_row(**values: Any) -> Row:
    """Build a row in COLUMNS order; columns not given are left empty (None)."""
    unknown = set(values) - _COLUMN_SET
    if unknown:
        raise ValueError(f"unknown columns: {', '.join(sorted(unknown))}")
    return tuple(values.get(col) for col in COLUMNS)


@dataclass
class GraphUser:
    id: str
    name: Optional[str] = None


@dataclass
class GraphGroup:
    id: str
    name: Optional[str] = None


@dataclass
class GraphReaction:
    id: str
    name: Optional[str] = None


@dataclass
class GraphReply:
    id: str
    author: Optional[GraphUser] = None
    message: Optional[str] = None
    created_time: Optional[str] = None
    reactions: List[GraphReaction] = field(default_factory=list)
    replies: List["GraphReply"] = field(default_factory=list)


@dataclass
class GraphPost:
    id: str
    type: Optional[str] = None
    author: Optional[GraphUser] = None
    group: Optional[GraphGroup] = None
    message: Optional[str] = None
    created_time: Optional[str] = None
    updated_time: Optional[str] = None
    picture: Optional[str] = None
    link: Optional[str] = None
    source: Optional[str] = None
    name: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    reactions: List[GraphReaction] = field(default_factory=list)
    replies: List[GraphReply] = field(default_factory=list)
