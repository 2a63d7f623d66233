from typing import Callable, List, Optional

from .dates import normalize_date
from .errors import NormalizationError
from .models import GraphPost, GraphReaction, GraphReply, Row, make_row


LogCallback = Callable[..., None]

REPLY_TYPE = "comment"
REACTION_TYPE = "like"
GROUP_TYPE = "group"


def _noop_log(msg, lvl="info"):
    return None


class _Flattener:
    """
    Walks one post tree. Row order:
    root, root reactions, then for every reply (depth first, sibling order)
    the reply row, its reactions, its sub-replies.
    """

    def __init__(self, post: GraphPost, log: LogCallback):
        self.post = post
        self._log = log
        group = post.group
        self.group_id = group.id if group else None
        self.group_name = group.name if group else None

    def _date(self, node_id: str, column: str, value: Optional[str]) -> Optional[str]:
        try:
            return normalize_date(value)
        except NormalizationError as e:
            self._log(f"{node_id}: bad {column} ({e}), leaving it empty", "warning")
            return None

    def _reaction_rows(self, reactions: List[GraphReaction], *, parent_id: str, parent_type: Optional[str]) -> List[Row]:
        return [
            make_row(
                from_id=r.id,
                from_name=r.name,
                group_id=self.group_id,
                group_name=self.group_name,
                type=REACTION_TYPE,
                parent_id=parent_id,
                parent_type=parent_type,
            )
            for r in reactions
        ]

    def _reply_rows(
        self,
        replies: List[GraphReply],
        *,
        depth: int,
        parent_id: str,
        parent_type: Optional[str],
    ) -> List[Row]:
        out: List[Row] = []
        for index, reply in enumerate(replies):
            author = reply.author
            out.append(
                make_row(
                    id=reply.id,
                    level=depth,
                    from_id=author.id if author else None,
                    from_name=author.name if author else None,
                    group_id=self.group_id,
                    group_name=self.group_name,
                    message=reply.message,
                    created_time=self._date(reply.id, "created_time", reply.created_time),
                    type=REPLY_TYPE,
                    like_count=len(reply.reactions),
                    parent_id=parent_id,
                    parent_type=parent_type or REPLY_TYPE,
                    comment_index=index,
                )
            )
            out.extend(self._reaction_rows(reply.reactions, parent_id=reply.id, parent_type=REPLY_TYPE))
            out.extend(
                self._reply_rows(
                    reply.replies,
                    depth=depth + 1,
                    parent_id=reply.id,
                    parent_type=REPLY_TYPE,
                )
            )
        return out

    def rows(self) -> List[Row]:
        post = self.post
        author = post.author
        rows: List[Row] = [
            make_row(
                id=post.id,
                level=0,
                from_id=author.id if author else None,
                from_name=author.name if author else None,
                group_id=self.group_id,
                group_name=self.group_name,
                message=post.message,
                created_time=self._date(post.id, "created_time", post.created_time),
                updated_time=self._date(post.id, "updated_time", post.updated_time),
                type=post.type,
                picture=post.picture,
                link=post.link,
                source=post.source,
                name=post.name,
                caption=post.caption,
                description=post.description,
                like_count=len(post.reactions),
                comment_count=len(post.replies),
                parent_id=self.group_id,
                parent_type=GROUP_TYPE,
            )
        ]
        rows.extend(self._reaction_rows(post.reactions, parent_id=post.id, parent_type=post.type))
        rows.extend(self._reply_rows(post.replies, depth=1, parent_id=post.id, parent_type=post.type))
        return rows


def flatten_post(post: GraphPost, log: Optional[LogCallback] = None) -> List[Row]:
    """Flatten one fetched post tree into rows (see COLUMNS). No I/O besides logging."""
    return _Flattener(post, log or _noop_log).rows()

