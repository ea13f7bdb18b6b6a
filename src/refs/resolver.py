import logging
from typing import Any, Mapping, Optional, Protocol, Union

from src.refs.errors import NetworkError, ResolveError
from src.refs.models import (
    BRANCH,
    SHORT_REF_ORDER,
    ApiResponse,
    ResolveParams,
    ResolveResult,
    is_valid_ref_name,
    is_valid_sha,
    split_fq_ref,
)

logger = logging.getLogger(__name__)

MAX_TAG_DEPTH = 10

ParamsLike = Union[ResolveParams, Mapping[str, Any]]

class RefTransport(Protocol):
    async def get_ref(self, owner: str, repo: str, fq_ref: str, token: Optional[str] = None) -> ApiResponse: ...

    async def get_default_branch(self, owner: str, repo: str, token: Optional[str] = None) -> ApiResponse: ...

    async def get_tag(self, owner: str, repo: str, sha: str, token: Optional[str] = None) -> ApiResponse: ...

def validate_params(params: Optional[ParamsLike]) -> ResolveParams:
    """Checks the caller's arguments.

    Raises TypeError for missing or mistyped arguments and ValueError for
    owner or repo names that cannot address a repository.
    """
    if params is None:
        raise TypeError("resolve() requires 'owner' and 'repo'")
    if isinstance(params, ResolveParams):
        values = vars(params)
    elif isinstance(params, Mapping):
        values = params
    else:
        raise TypeError(f"params must be a mapping or ResolveParams, got {type(params).__name__}")

    for key in ("owner", "repo"):
        value = values.get(key)
        if not isinstance(value, str) or not value:
            raise TypeError(f"'{key}' must be a non-empty string, got {value!r}")
        if value in (".", ".."):
            raise ValueError(f"'{key}' is not a valid GitHub name: {value!r}")
    for key in ("ref", "token"):
        value = values.get(key)
        if value is not None and not isinstance(value, str):
            raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")

    return ResolveParams(
        owner=values["owner"],
        repo=values["repo"],
        ref=values.get("ref") or None,
        token=values.get("token") or None,
    )

class RefResolver:
    def __init__(self, client: RefTransport):
        self.client = client

    async def resolve(self, params: Optional[ParamsLike]) -> Optional[ResolveResult]:
        """Resolves params.ref to a commit sha and fully qualified ref.

        Returns None when the ref exists in none of the namespaces tried.
        Raises ResolveError when the service answers with a failure status
        and NetworkError when no response could be obtained.
        """
        params = validate_params(params)
        repo_checked = False

        ref = params.ref
        if not ref:
            ref = BRANCH.qualify(await self._default_branch(params))
            repo_checked = True

        qualified = split_fq_ref(ref)
        if qualified:
            candidates = [qualified]
        else:
            candidates = [(namespace, ref) for namespace in SHORT_REF_ORDER]

        if not is_valid_ref_name(candidates[0][1]):
            logger.info("Ref %r is not a valid ref name", ref)
            return None

        for namespace, name in candidates:
            fq_ref = namespace.qualify(name)
            sha = await self._lookup(params, fq_ref)
            if sha:
                logger.debug("Resolved %s/%s %s to %s", params.owner, params.repo, fq_ref, sha)
                return ResolveResult(sha=sha, fq_ref=fq_ref)

        # The refs endpoint answers 404 for a missing repository too.
        if not repo_checked:
            await self._repo_info(params)
        logger.info("Ref %r not found in %s/%s", ref, params.owner, params.repo)
        return None

    async def _call(self, what: str, method, *args) -> ApiResponse:
        try:
            return await method(*args)
        except Exception as e:
            logger.warning("Request for %s failed: %s", what, e)
            raise NetworkError(f"Unable to fetch {what}", e) from e

    async def _repo_info(self, params: ResolveParams) -> ApiResponse:
        what = f"repository info of {params.owner}/{params.repo}"
        resp = await self._call(what, self.client.get_default_branch, params.owner, params.repo, params.token)
        if resp.status_code != 200:
            raise ResolveError(f"Unable to fetch {what}", resp.status_code)
        return resp

    async def _default_branch(self, params: ResolveParams) -> str:
        resp = await self._repo_info(params)
        branch = resp.body.get("default_branch") if isinstance(resp.body, dict) else None
        if not isinstance(branch, str) or not branch:
            raise ResolveError(f"No default branch in repository info of {params.owner}/{params.repo}", resp.status_code)
        return branch

    async def _lookup(self, params: ResolveParams, fq_ref: str) -> Optional[str]:
        """Returns the commit sha for fq_ref, or None if the namespace has no such ref."""
        what = f"{fq_ref} of {params.owner}/{params.repo}"
        logger.debug("Looking up %s", what)
        resp = await self._call(what, self.client.get_ref, params.owner, params.repo, fq_ref, params.token)
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise ResolveError(f"Unable to fetch {what}", resp.status_code)

        body = resp.body
        if isinstance(body, list):
            # Prefix matches only, no exact ref.
            body = next((entry for entry in body if isinstance(entry, dict) and entry.get("ref") == fq_ref), None)
            if body is None:
                return None

        obj = _target_object(body, what, resp.status_code)
        # Annotated tags point at a tag object; follow it to the commit.
        depth = 0
        while obj.get("type") == "tag":
            depth += 1
            if depth > MAX_TAG_DEPTH or not is_valid_sha(obj["sha"].lower()):
                raise ResolveError(f"Cannot follow tag object {obj['sha']!r} for {what}", resp.status_code)
            tag_what = f"tag object {obj['sha']} of {params.owner}/{params.repo}"
            resp = await self._call(tag_what, self.client.get_tag, params.owner, params.repo, obj["sha"], params.token)
            if resp.status_code != 200:
                raise ResolveError(f"Unable to fetch {tag_what}", resp.status_code)
            obj = _target_object(resp.body, tag_what, resp.status_code)

        sha = obj["sha"].lower()
        if not is_valid_sha(sha):
            raise ResolveError(f"Invalid sha {obj['sha']!r} for {what}", resp.status_code)
        return sha

def _target_object(body: Any, what: str, status_code: int) -> dict:
    obj = body.get("object") if isinstance(body, dict) else None
    if not isinstance(obj, dict) or not isinstance(obj.get("sha"), str):
        raise ResolveError(f"Unexpected response for {what}", status_code)
    return obj

async def resolve(params: Optional[ParamsLike] = None, client: Optional[RefTransport] = None, **kwargs) -> Optional[ResolveResult]:
    """Resolves a branch or tag of a GitHub repository.

    Accepts a ResolveParams, a mapping, or keyword arguments:

        await resolve(owner="adobe", repo="helix-resolve-git-ref", ref="main")

    Without a client a GitHubClient is opened for this call only.
    """
    if params is not None and kwargs:
        raise TypeError(f"resolve() got params and keyword arguments {sorted(kwargs)}")
    if params is None and kwargs:
        params = kwargs
    params = validate_params(params)
    if client is not None:
        return await RefResolver(client).resolve(params)

    from src.github.client import GitHubClient
    async with GitHubClient() as github:
        return await RefResolver(github).resolve(params)
