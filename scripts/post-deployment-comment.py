#!/usr/bin/env python3
"""Post or update the unified deployment comment on a PR.

Each CI job that deploys one subdomain calls this once. The comment keeps a
row per project; rows from other jobs are preserved, and a new commit resets
rows that have not reported yet back to pending.

    python3 scripts/post-deployment-comment.py \
      --pr 42 --project 21-dev --status success \
      --preview-url https://abc123.21-dev.pages.dev \
      --alias-url https://preview.21.dev \
      --commit abc1234567890 \
      --run-url https://github.com/21-DOT-DEV/websites/actions/runs/12345
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from deployments.config import ConfigError, load_comment_config
from deployments.model import CommentError, DeploymentStatus
from deployments.service import DeploymentUpdate, update_deployment_comment

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "defaults" / "deployments.yml"


def fail(message: str) -> int:
    """Fail."""
    print(f"::error::{message}", file=sys.stderr)
    return 1


def resolve_config_path(value: str | None) -> Path | None:
    if value:
        return Path(value)
    if DEFAULT_CONFIG.is_file():
        return DEFAULT_CONFIG
    return None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="post-deployment-comment.py",
        description="Post or update unified deployment comment on a PR.",
    )
    p.add_argument("--pr", type=int, required=True, help="Pull request number")
    p.add_argument("--project", required=True, help="Project name (21-dev, docs-21-dev, md-21-dev)")
    p.add_argument(
        "--status",
        required=True,
        choices=[s.value for s in DeploymentStatus],
        help="Deployment status",
    )
    p.add_argument("--preview-url", required=True, help="Cloudflare preview URL")
    p.add_argument("--alias-url", required=True, help="Cloudflare alias URL")
    p.add_argument("--commit", required=True, help="Git commit SHA")
    p.add_argument("--run-url", required=True, help="GitHub Actions run URL")
    p.add_argument("--repo", default="", help="owner/repo (default: env GITHUB_REPOSITORY)")
    p.add_argument("--config", default="", help=f"Comment config YAML (default: {DEFAULT_CONFIG.name} if present)")
    p.add_argument("--dry-run", action="store_true", help="Print the rendered comment instead of posting it")
    return p


def main(argv: list[str] | None = None) -> int:
    """Main."""
    args = build_parser().parse_args(argv)

    repo = (args.repo or os.environ.get("GITHUB_REPOSITORY") or "").strip() or None

    try:
        config = load_comment_config(resolve_config_path(args.config))
    except ConfigError as exc:
        return fail(f"deployment comment config error: {exc}")

    update = DeploymentUpdate(
        pr=args.pr,
        project=args.project,
        status=DeploymentStatus.parse(args.status),
        preview_url=args.preview_url,
        alias_url=args.alias_url,
        commit=args.commit,
        run_url=args.run_url,
        repo=repo,
    )

    try:
        result = update_deployment_comment(update, config=config, dry_run=args.dry_run)
    except CommentError as exc:
        return fail(str(exc))

    if args.dry_run:
        print(result.body)
        return 0

    print(f"✅ Updated deployment comment for PR #{args.pr}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
