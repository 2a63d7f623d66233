import threading

import pytest

from fb_scrape.models import GraphGroup, GraphPost, GraphReaction, GraphReply, GraphUser


class FakeGraphClient:
    """
    Stand-in for GraphClient.
    `outcomes` maps post id -> list of results consumed one per fetch; an
    Exception instance is raised, anything else is returned. The last entry
    repeats once the list is exhausted.
    """

    def __init__(self, outcomes=None, ids=None):
        self.outcomes = {k: list(v) for k, v in (outcomes or {}).items()}
        self.ids = dict(ids or {})
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def fetch_post(self, post_id):
        with self._lock:
            self.calls.append(post_id)
            queue = self.outcomes[post_id]
            result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, Exception):
            raise result
        return result

    def iter_group_ids(self):
        return iter(self.ids.get("community/groups", []))

    def iter_post_ids(self, group_id):
        return iter(self.ids.get(f"{group_id}/feed", []))

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class LogRecorder:
    def __init__(self):
        self.records = []
        self._lock = threading.Lock()

    def __call__(self, msg, lvl="info"):
        with self._lock:
            self.records.append((lvl, msg))

    def at(self, lvl):
        return [m for level, m in self.records if level == lvl]


@pytest.fixture
def fake_client_cls():
    return FakeGraphClient


@pytest.fixture
def log():
    return LogRecorder()


@pytest.fixture
def sample_post() -> GraphPost:
    """
    P1 (status, group G1)
      likes: u1, u2
      c1  likes: u3
        c1a  likes: u4
        c1b
      c2
    """
    return GraphPost(
        id="P1",
        type="status",
        author=GraphUser(id="a0", name="Alice"),
        group=GraphGroup(id="G1", name="Gardening"),
        message="hello, world",
        created_time="2015-04-01T12:34:56+0000",
        updated_time="2015-04-02T14:00:00+0200",
        link="https://example.com",
        reactions=[GraphReaction(id="u1", name="Una"), GraphReaction(id="u2", name="Ugo")],
        replies=[
            GraphReply(
                id="c1",
                author=GraphUser(id="a1", name="Bob"),
                message="first",
                created_time="2015-04-01T13:00:00+0000",
                reactions=[GraphReaction(id="u3", name="Uma")],
                replies=[
                    GraphReply(
                        id="c1a",
                        author=GraphUser(id="a2", name="Cy"),
                        message="nested",
                        created_time="2015-04-01T13:05:00+0000",
                        reactions=[GraphReaction(id="u4", name="Uli")],
                    ),
                    GraphReply(id="c1b", message="nested 2"),
                ],
            ),
            GraphReply(id="c2", author=GraphUser(id="a3", name="Dee"), message="second"),
        ],
    )


@pytest.fixture
def sample_post_json():
    """Graph API body for the same tree as sample_post."""
    return {
        "id": "P1",
        "from": {"id": "a0", "name": "Alice"},
        "to": {"data": [{"id": "G1", "name": "Gardening"}]},
        "message": "hello, world",
        "created_time": "2015-04-01T12:34:56+0000",
        "updated_time": "2015-04-02T14:00:00+0200",
        "type": "status",
        "link": "https://example.com",
        "likes": {"data": [{"id": "u1", "name": "Una"}, {"id": "u2", "name": "Ugo"}]},
        "comments": {
            "data": [
                {
                    "id": "c1",
                    "from": {"id": "a1", "name": "Bob"},
                    "message": "first",
                    "created_time": "2015-04-01T13:00:00+0000",
                    "likes": {"data": [{"id": "u3", "name": "Uma"}]},
                    "comments": {
                        "data": [
                            {
                                "id": "c1a",
                                "from": {"id": "a2", "name": "Cy"},
                                "message": "nested",
                                "created_time": "2015-04-01T13:05:00+0000",
                                "likes": {"data": [{"id": "u4", "name": "Uli"}]},
                            },
                            {"id": "c1b", "message": "nested 2"},
                        ]
                    },
                },
                {"id": "c2", "from": {"id": "a3", "name": "Dee"}, "message": "second"},
            ],
            "paging": {"cursors": {"before": "x", "after": "y"}},
        },
    }
