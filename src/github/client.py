import logging
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from src.refs.models import ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "git-ref-resolver"

def _repo_path(owner: str, repo: str) -> str:
    # Each name is a single path segment; "/" is escaped too.
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

class GitHubClient:
    """Thin async wrapper around the GitHub REST endpoints used for ref lookups.

    Every completed HTTP exchange is returned as an ApiResponse, whatever its
    status. Transport failures (DNS, connect, TLS, timeouts) are raised as the
    underlying httpx exceptions.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": self.user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(self, path: str, token: Optional[str]) -> ApiResponse:
        url = f"{self.base_url}{path}"
        resp = await self._http.get(url, headers=self._headers(token))
        logger.debug("GET %s -> %d", url, resp.status_code)
        try:
            body = resp.json()
        except ValueError:
            body = None
        return ApiResponse(status_code=resp.status_code, body=body)

    async def get_ref(self, owner: str, repo: str, fq_ref: str, token: Optional[str] = None) -> ApiResponse:
        # GET /repos/{owner}/{repo}/git/ref/heads/main
        name = fq_ref[len("refs/"):] if fq_ref.startswith("refs/") else fq_ref
        return await self._get(f"{_repo_path(owner, repo)}/git/ref/{quote(name, safe='/')}", token)

    async def get_default_branch(self, owner: str, repo: str, token: Optional[str] = None) -> ApiResponse:
        return await self._get(_repo_path(owner, repo), token)

    async def get_tag(self, owner: str, repo: str, sha: str, token: Optional[str] = None) -> ApiResponse:
        return await self._get(f"{_repo_path(owner, repo)}/git/tags/{quote(sha, safe='')}", token)
