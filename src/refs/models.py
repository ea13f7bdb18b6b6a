from dataclasses import dataclass
from typing import Any, Optional, Tuple
import re

SHA_RE = re.compile(r"^[0-9a-f]{40}$")
# Characters git never allows in a ref name (git check-ref-format).
BAD_REF_CHARS = re.compile(r"[\x00-\x20\x7f~^:?*\[\\]")

@dataclass(frozen=True)
class Namespace:
    prefix: str
    kind: str

    def qualify(self, name: str) -> str:
        return self.prefix + name

BRANCH = Namespace(prefix="refs/heads/", kind="branch")
TAG = Namespace(prefix="refs/tags/", kind="tag")

# Branches win name collisions with tags of the same name.
SHORT_REF_ORDER: Tuple[Namespace, ...] = (BRANCH, TAG)

@dataclass
class ResolveParams:
    owner: str
    repo: str
    ref: Optional[str] = None
    token: Optional[str] = None

@dataclass
class ResolveResult:
    sha: str
    fq_ref: str

    def to_dict(self) -> dict:
        return {"sha": self.sha, "fqRef": self.fq_ref}

@dataclass
class ApiResponse:
    """Outcome of one completed HTTP exchange with the hosting service."""
    status_code: int
    body: Optional[Any] = None

def is_valid_sha(value: Any) -> bool:
    return isinstance(value, str) and SHA_RE.match(value) is not None

def split_fq_ref(ref: str) -> Optional[Tuple[Namespace, str]]:
    """Splits 'refs/heads/main' into (BRANCH, 'main'). Short refs return None."""
    for namespace in SHORT_REF_ORDER:
        if ref.startswith(namespace.prefix):
            return namespace, ref[len(namespace.prefix):]
    return None

def is_valid_ref_name(name: str) -> bool:
    """Applies git's check-ref-format rules to a branch or tag name."""
    if not name or name == "@" or name.endswith(".") or ".." in name or "@{" in name:
        return False
    if BAD_REF_CHARS.search(name):
        return False
    for part in name.split("/"):
        if not part or part.startswith(".") or part.endswith(".lock"):
            return False
    return True
