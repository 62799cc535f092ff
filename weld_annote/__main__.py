# weld_annote/__main__.py
from __future__ import annotations

import argparse
from typing import List, Optional

from .app import run_app


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="weld-annote", description="Draw and write notes on video frames.")
    p.add_argument("video", nargs="?", help="video to open instead of prompting")
    p.add_argument("--config-dir", default=None, help="directory holding config.json")
    p.add_argument("--debug", action="store_true", help="verbose logging")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run_app(video_path=args.video, debug=args.debug, config_dir=args.config_dir)


if __name__ == "__main__":
    raise SystemExit(main())
