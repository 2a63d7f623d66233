from typing import Any, Dict, Iterator, List, Optional

import httpx

from .config import (
    ACCESS_TOKEN,
    EDGE_LIMIT,
    GRAPH_API_VERSION,
    GRAPH_BASE_URL,
    GRAPH_TIMEOUT,
    IDS_LIMIT,
)
from .errors import MissingCredentialError, RateLimitError, RemoteError, is_rate_limit_text
from .models import GraphGroup, GraphPost, GraphReaction, GraphReply, GraphUser


USER_AGENT = "fb-scrape/1.0"


def post_fields(edge_limit: int = EDGE_LIMIT) -> str:
    """
    Field expansion requested for every post: the post itself, its likes and
    two levels of comments (each with their likes).
    """
    likes = f"likes.limit({edge_limit})"
    nested = f"comments.limit({edge_limit}){{id,from,message,created_time,{likes}}}"
    comments = f"comments.limit({edge_limit}){{id,from,message,created_time,{likes},{nested}}}"
    return ",".join(
        [
            "id",
            "from",
            "to",
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
            comments,
            likes,
        ]
    )


class GraphClient:
    """
    Graph API access over one shared keep-alive connection pool:
    - Post tree: /<version>/<post_id>?fields=...
    - Listings:  /<version>/community/groups, /<version>/<group_id>/feed

    Never retries; failures surface as RemoteError / RateLimitError.
    """

    def __init__(
        self,
        access_token: Optional[str] = ACCESS_TOKEN,
        *,
        base_url: str = GRAPH_BASE_URL,
        api_version: str = GRAPH_API_VERSION,
        timeout: Optional[float] = GRAPH_TIMEOUT,
        ids_limit: int = IDS_LIMIT,
        edge_limit: int = EDGE_LIMIT,
        client: Optional[httpx.Client] = None,
        log_callback=None,
    ):
        if not access_token:
            raise MissingCredentialError()
        self._log = log_callback or (lambda msg, lvl="info": None)
        self._access_token = access_token
        self._base_url = f"{base_url.rstrip('/')}/{api_version}"
        self._ids_limit = ids_limit
        self._fields = post_fields(edge_limit)
        self._owns_client = client is None
        self.client = client or httpx.Client(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=20),
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "GraphClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------------------
    # Transport
    # ---------------------------

    def _remote_error(self, resp: httpx.Response, data: Any) -> RemoteError:
        err = data.get("error") if isinstance(data, dict) else None
        if isinstance(err, dict):
            error_type = str(err.get("type") or "GraphError")
            message = str(err.get("message") or "")
            # only a remote error object can signal rate limiting
            cls = RateLimitError if is_rate_limit_text(f"{error_type} - {message}") else RemoteError
            return cls(error_type, message, status_code=resp.status_code)

        if resp.is_success:
            return RemoteError("InvalidResponse", f"unexpected body: {resp.text[:120]}", status_code=resp.status_code)
        return RemoteError("HTTPError", f"http {resp.status_code}", status_code=resp.status_code)

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.client.get(url, params=params)
        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_success and isinstance(data, dict) and "error" not in data:
            return data
        raise self._remote_error(resp, data)

    # ---------------------------
    # Listings
    # ---------------------------

    def iter_ids(self, path: str) -> Iterator[str]:
        """Yield every id of a listing, following paging.next until it runs out."""
        url: Optional[str] = f"{self._base_url}/{path.strip('/')}"
        params: Optional[Dict[str, Any]] = {
            "access_token": self._access_token,
            "fields": "id",
            "limit": self._ids_limit,
        }
        pages = 0
        while url:
            data = self._get_json(url, params=params)
            pages += 1
            items = data.get("data") or []
            for item in items:
                item_id = str((item or {}).get("id", "") or "")
                if item_id:
                    yield item_id
            self._log(f"{path}: page {pages} results={len(items)}")

            # the cursor URL already carries every query parameter
            url = (data.get("paging") or {}).get("next")
            params = None

    def iter_group_ids(self) -> Iterator[str]:
        return self.iter_ids("community/groups")

    def iter_post_ids(self, group_id: str) -> Iterator[str]:
        return self.iter_ids(f"{group_id}/feed")

    # ---------------------------
    # Post trees
    # ---------------------------

    def _edge(self, data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
        edge = data.get(key)
        if not isinstance(edge, dict):
            return []
        return [d for d in (edge.get("data") or []) if isinstance(d, dict)]

    def _parse_user(self, data: Any) -> Optional[GraphUser]:
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return GraphUser(id=str(data["id"]), name=data.get("name"))

    def _parse_reactions(self, data: Dict[str, Any]) -> List[GraphReaction]:
        return [
            GraphReaction(id=str(d.get("id", "") or ""), name=d.get("name"))
            for d in self._edge(data, "likes")
        ]

    def _parse_replies(self, data: Dict[str, Any]) -> List[GraphReply]:
        out: List[GraphReply] = []
        for cd in self._edge(data, "comments"):
            out.append(
                GraphReply(
                    id=str(cd.get("id", "") or ""),
                    author=self._parse_user(cd.get("from")),
                    message=cd.get("message"),
                    created_time=cd.get("created_time"),
                    reactions=self._parse_reactions(cd),
                    replies=self._parse_replies(cd),
                )
            )
        return out

    def parse_post(self, data: Dict[str, Any]) -> GraphPost:
        groups = self._edge(data, "to")
        group = None
        if groups and groups[0].get("id"):
            group = GraphGroup(id=str(groups[0]["id"]), name=groups[0].get("name"))

        return GraphPost(
            id=str(data.get("id", "") or ""),
            type=data.get("type"),
            author=self._parse_user(data.get("from")),
            group=group,
            message=data.get("message"),
            created_time=data.get("created_time"),
            updated_time=data.get("updated_time"),
            picture=data.get("picture"),
            link=data.get("link"),
            source=data.get("source"),
            name=data.get("name"),
            caption=data.get("caption"),
            description=data.get("description"),
            reactions=self._parse_reactions(data),
            replies=self._parse_replies(data),
        )

    def fetch_post(self, post_id: str) -> GraphPost:
        params = {"access_token": self._access_token, "fields": self._fields}
        data = self._get_json(f"{self._base_url}/{post_id}", params=params)
        return self.parse_post(data)
