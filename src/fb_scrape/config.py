import os

from dotenv import load_dotenv

load_dotenv()


# Graph API access (token is never refreshed; fetch/listing commands need it)
ACCESS_TOKEN = os.getenv("ACCESS_TOKEN") or None
GRAPH_BASE_URL = os.getenv("GRAPH_BASE_URL", "https://graph.facebook.com")
GRAPH_API_VERSION = os.getenv("GRAPH_API_VERSION", "v2.3")

# Empty means no timeout: a hung request blocks its worker
GRAPH_TIMEOUT = float(os.getenv("GRAPH_TIMEOUT")) if os.getenv("GRAPH_TIMEOUT") else None

# Listing page size and per-level limit inside the post field expansion
IDS_LIMIT = int(os.getenv("IDS_LIMIT", "1000"))
EDGE_LIMIT = int(os.getenv("EDGE_LIMIT", "10000"))

# Fetch pipeline
FETCH_POOL_SIZE = int(os.getenv("FETCH_POOL_SIZE", "100"))
RATE_LIMIT_RETRY_SECONDS = float(os.getenv("RATE_LIMIT_RETRY_SECONDS", str(5 * 60)))
