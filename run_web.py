#!/usr/bin/env python3
"""
Serve the padel league API.

The league database lives in --data-dir (LEAGUE_DATA_DIR) and the rule for
tied rounds comes from --tie-policy (LEAGUE_TIE_POLICY); both are handed to
the app through the environment so that reloading workers pick them up.

Examples:
    python run_web.py --data-dir league
    python run_web.py --tie-policy forbid
    python run_web.py --host 0.0.0.0 --port 8080
"""
import argparse
import os

import uvicorn

from src.utils.constants import TIE_POLICIES


def parse_args():
    parser = argparse.ArgumentParser(description="Serve the padel league API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument(
        "--data-dir",
        default=os.environ.get("LEAGUE_DATA_DIR", "data"),
        help="Directory holding league.db (default: data)"
    )
    parser.add_argument(
        "--tie-policy",
        choices=TIE_POLICIES,
        default=os.environ.get("LEAGUE_TIE_POLICY"),
        help="How a tied match closes a round: 'team1' counts it for team 1, "
             "'forbid' blocks the round until the tie is broken (default: team1)"
    )
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    return parser.parse_args()


def main():
    args = parse_args()
    os.environ["LEAGUE_DATA_DIR"] = args.data_dir
    if args.tie_policy:
        os.environ["LEAGUE_TIE_POLICY"] = args.tie_policy

    print(f"League data in {args.data_dir}, tie policy {args.tie_policy or 'team1'}")
    print(f"API docs at http://{args.host}:{args.port}/docs")

    uvicorn.run("src.web.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
