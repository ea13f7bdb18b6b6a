from fastapi import FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import os

from src.api.service import ResolveService, error_status
from src.api.schemas import ResolveResponse, HealthResponse
from src.github.client import DEFAULT_API_URL, GitHubClient
from src.refs.errors import RefError

import logging

# Configure Logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Git Ref Resolver API")

# Allow CORS
# In production, set ALLOWED_ORIGINS to a comma-separated list of domains
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "*")
allowed_origins = [origin.strip() for origin in allowed_origins_env.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Initialize Service
# GITHUB_API_URL points at GitHub by default; GITHUB_TOKEN is used when the
# request carries no X-GitHub-Token header.
api_url = os.getenv("GITHUB_API_URL", DEFAULT_API_URL)
timeout = float(os.getenv("GITHUB_TIMEOUT", "10"))
service = ResolveService(
    GitHubClient(base_url=api_url, timeout=timeout),
    default_token=os.getenv("GITHUB_TOKEN") or None,
)

@app.on_event("shutdown")
async def shutdown_event():
    await service.close()

@app.get("/api/resolve", response_model=ResolveResponse)
async def resolve_ref(
    owner: Optional[str] = Query(None),
    repo: Optional[str] = Query(None),
    ref: Optional[str] = Query(None),
    x_github_token: Optional[str] = Header(None),
):
    """Resolve a branch or tag (default branch if ref is omitted) to a commit sha."""
    try:
        result = await service.resolve(owner, repo, ref, token=x_github_token)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RefError as e:
        status, detail = error_status(e)
        logger.warning(f"Resolving {owner}/{repo}@{ref} failed: {e}")
        raise HTTPException(status_code=status, detail=detail)
    if not result:
        raise HTTPException(status_code=404, detail="ref not found")
    return result

@app.get("/health", response_model=HealthResponse)
def health_check():
    return {"status": "ok", "api": service.client.base_url}
