import httpx
import pytest
import pytest_asyncio

from src.github.client import GitHubClient

OWNER = "adobe"
REPO = "helix-resolve-git-ref"
MAIN_SHA = "6a5c1e0b7f3d4a2e9c8b1f0d3e7a5c4b2d1e0f9a"
TAG_SHA = "0f3e6d2c1b4a59788e7d6c5b4a3928170f6e5d4c"
ANNOTATED_TAG_OBJECT = "9e8d7c6b5a4f3e2d1c0b9a8f7e6d5c4b3a2f1e0d"
ANNOTATED_COMMIT = "1d2c3b4a5f6e7d8c9b0a1f2e3d4c5b6a7f8e9d0c"
RELEASE_BRANCH_SHA = "b1b2b3b4b5b6b7b8b9b0c1c2c3c4c5c6c7c8c9c0"
RELEASE_TAG_SHA = "d1d2d3d4d5d6d7d8d9d0e1e2e3e4e5e6e7e8e9e0"

class FakeGitHub:
    """In-memory stand-in for the GitHub REST endpoints the client calls."""

    def __init__(self):
        self.repos = {}
        self.tag_objects = {}
        self.requests = []
        self.status = None
        self.offline = False

    def add_repo(self, owner, repo, default_branch="main"):
        self.repos[(owner, repo)] = {"default_branch": default_branch, "refs": {}}

    def add_ref(self, owner, repo, fq_ref, sha, obj_type="commit"):
        self.repos[(owner, repo)]["refs"][fq_ref] = {"sha": sha, "type": obj_type}

    def add_tag_object(self, tag_sha, target_sha, obj_type="commit"):
        self.tag_objects[tag_sha] = {"sha": target_sha, "type": obj_type}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Network is unreachable", request=request)
        if self.status:
            return httpx.Response(self.status, json={"message": "Server Error"})

        not_found = httpx.Response(404, json={"message": "Not Found"})
        parts = request.url.path.strip("/").split("/")
        if len(parts) < 3 or parts[0] != "repos":
            return not_found
        repo = self.repos.get((parts[1], parts[2]))
        if repo is None:
            return not_found

        rest = parts[3:]
        if not rest:
            return httpx.Response(200, json={
                "name": parts[2],
                "full_name": f"{parts[1]}/{parts[2]}",
                "default_branch": repo["default_branch"],
            })
        if rest[:2] == ["git", "ref"]:
            fq_ref = "refs/" + "/".join(rest[2:])
            obj = repo["refs"].get(fq_ref)
            if obj is None:
                return not_found
            return httpx.Response(200, json={"ref": fq_ref, "object": dict(obj)})
        if rest[:2] == ["git", "tags"] and len(rest) == 3:
            target = self.tag_objects.get(rest[2])
            if target is None:
                return not_found
            return httpx.Response(200, json={"sha": rest[2], "object": dict(target)})
        return not_found

@pytest.fixture
def github():
    fake = FakeGitHub()
    fake.add_repo(OWNER, REPO)
    fake.add_ref(OWNER, REPO, "refs/heads/main", MAIN_SHA)
    fake.add_ref(OWNER, REPO, "refs/tags/v1.0.0", TAG_SHA)
    fake.add_ref(OWNER, REPO, "refs/tags/v2.0.0", ANNOTATED_TAG_OBJECT, obj_type="tag")
    fake.add_tag_object(ANNOTATED_TAG_OBJECT, ANNOTATED_COMMIT)
    fake.add_ref(OWNER, REPO, "refs/heads/release", RELEASE_BRANCH_SHA)
    fake.add_ref(OWNER, REPO, "refs/tags/release", RELEASE_TAG_SHA)
    return fake

@pytest_asyncio.fixture
async def client(github):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(github.handler))
    async with GitHubClient(base_url="https://api.test", http_client=http_client) as gh:
        yield gh
    await http_client.aclose()
