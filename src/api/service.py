import logging
from typing import Optional, Tuple

from src.api.schemas import ResolveResponse
from src.github.client import GitHubClient
from src.refs.errors import NetworkError, RefError
from src.refs.models import ResolveParams
from src.refs.resolver import RefResolver

logger = logging.getLogger(__name__)

class ResolveService:
    def __init__(self, client: GitHubClient, default_token: Optional[str] = None):
        self.client = client
        self.default_token = default_token

    async def resolve(
        self,
        owner: Optional[str],
        repo: Optional[str],
        ref: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Optional[ResolveResponse]:
        """Resolves a ref. Returns None if it does not exist; errors propagate."""
        params = ResolveParams(owner=owner, repo=repo, ref=ref, token=token or self.default_token)
        result = await RefResolver(self.client).resolve(params)
        if result is None:
            return None
        return ResolveResponse(**result.to_dict())

    async def close(self):
        await self.client.aclose()

def error_status(err: RefError) -> Tuple[int, str]:
    """Maps a resolution failure onto the status code and detail reported to API clients."""
    if isinstance(err, NetworkError):
        return 503, f"unable to reach GitHub: {err.message}"
    if err.status_code == 404:
        return 404, "repository not found"
    return 502, f"failed to fetch git repo info (statusCode: {err.status_code}, {err.message})"
