"""Daily build: window the snapshot history and summarise the latest changes."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from toolkits.timeetf.holdings import SnapshotFormatError, SnapshotNotFoundError

from .cli import parse_args
from .pipeline import run_pipeline

logger = logging.getLogger("holdings_build")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    try:
        run_pipeline(args)
    except (SnapshotNotFoundError, SnapshotFormatError) as exc:
        logger.error("Build aborted (%s %s): %s", exc.kind.value, exc.date, exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
