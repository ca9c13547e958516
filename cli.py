from __future__ import annotations

import argparse
import sys
from collections import Counter

import requests

from smon.roster import RosterError, load_roster, render_roster


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Service Monitor CLI")
    p.add_argument("--api", default="http://localhost:8080", help="Monitor base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("config", help="Show the roster as the monitor currently reads it")

    s_met = sub.add_parser("metrics", help="Dump /metrics")
    s_met.add_argument("--filter", default=None, help="Only print lines containing this text")

    s_probe = sub.add_parser("probe", help="Call GET / repeatedly and tally status codes")
    s_probe.add_argument("--count", type=int, default=20)

    s_chk = sub.add_parser("check", help="Validate a local roster file")
    s_chk.add_argument("path")

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "config":
        r = requests.get(f"{base}/config", timeout=10)
        print(r.text, end="")
        return 0 if r.ok else 1

    if args.cmd == "metrics":
        r = requests.get(f"{base}/metrics", timeout=10)
        for line in r.text.splitlines():
            if args.filter is None or args.filter in line:
                print(line)
        return 0 if r.ok else 1

    if args.cmd == "probe":
        tally: Counter[int] = Counter()
        for _ in range(max(1, args.count)):
            tally[requests.get(f"{base}/", timeout=10).status_code] += 1
        for code, n in sorted(tally.items()):
            print(f"{code}: {n}")
        return 0

    if args.cmd == "check":
        try:
            roster = load_roster(args.path)
        except RosterError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        print(render_roster(roster), end="")
        overlap = roster.overlap()
        if overlap:
            print(f"\nwarning: listed as both up and down (reported down): {', '.join(overlap)}")
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
