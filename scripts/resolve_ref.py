import argparse
import asyncio
import os
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))
from src.refs.errors import RefError
from src.refs.resolver import resolve

def main():
    parser = argparse.ArgumentParser(description="Resolve a GitHub branch or tag to a commit sha.")
    parser.add_argument("owner")
    parser.add_argument("repo")
    parser.add_argument("ref", nargs="?", help="branch or tag, short or fully qualified (default: default branch)")
    args = parser.parse_args()

    try:
        result = asyncio.run(resolve(
            owner=args.owner,
            repo=args.repo,
            ref=args.ref,
            token=os.getenv("GITHUB_TOKEN"),
        ))
    except RefError as e:
        print(e)
        sys.exit(2 if e.retryable else 1)

    if result is None:
        print(f"{args.ref} not found in {args.owner}/{args.repo}")
        sys.exit(1)
    print(f"{result.sha} {result.fq_ref}")

if __name__ == "__main__":
    main()
