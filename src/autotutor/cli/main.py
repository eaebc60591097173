"""CLI entry point: parse args, load config, scan or generate a tutorial."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from autotutor.lib.errors import AutotutorError
from autotutor.lib.pipeline import (
    TutorialRequest,
    generate_tutorial,
    summarize_repository,
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for CLI mode."""
    parser = argparse.ArgumentParser(
        prog="autotutor",
        description="Generate an AI-written tutorial for a GitHub repository.",
    )
    parser.add_argument(
        "source",
        help=(
            "GitHub repository URL (https://github.com/<owner>/<name>), or a "
            "local directory when used with --scan-only."
        ),
    )
    parser.add_argument(
        "--scan-only",
        action="store_true",
        help="Only scan and rank files; do not call a model or upload.",
    )
    parser.add_argument(
        "--no-upload",
        action="store_true",
        help="Do not upload to S3; print the tutorial Markdown instead.",
    )
    parser.add_argument(
        "--bucket",
        default=None,
        help="S3 bucket for uploads (overrides S3_BUCKET_NAME).",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="AWS region for Bedrock and S3 (overrides AWS_REGION).",
    )
    parser.add_argument(
        "--provider",
        choices=("bedrock", "anthropic", "openai"),
        default=None,
        help="Text-generation provider (overrides AUTOTUTOR_PROVIDER).",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model id to use (overrides AWS_BEDROCK_MODEL_ID).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to keep the generated Markdown and JSON files in.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.scan_only:
        root = Path(args.source).expanduser()
        if not root.is_dir():
            print(f"Error: {args.source} is not a directory", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(summarize_repository(root.resolve()), indent=2))
        return

    request = TutorialRequest(
        github_url=args.source,
        upload_to_s3=False if args.no_upload else None,
        aws_region=args.region,
        s3_bucket=args.bucket,
        provider=args.provider,
        model=args.model,
        output_dir=args.output_dir,
    )
    try:
        result = generate_tutorial(request)
    except AutotutorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if "tutorial_url" in result:
        print(f"tutorial_url={result['tutorial_url']}")
        print(f"data_url={result.get('data_url')}")
    else:
        print(result["tutorial_content"]["markdown"])
    print(f"execution_time={result['execution_time']}s", file=sys.stderr)


if __name__ == "__main__":
    main()
