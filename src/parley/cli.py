from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from parley.engine.autoplay import AutoplaySpec, play_run
from parley.engine.game import new_game
from parley.engine.views import status_view
from parley.paths import get_paths
from parley.services.content import ContentService
from parley.services.telemetry import TelemetryService

_MARKS = {"info": " ", "success": "+", "fail": "-"}


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="parley", description="Play a scripted negotiation run.")
    parser.add_argument("--difficulty", choices=["easy", "hard"], default="easy")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--telemetry", type=Path, default=None, help="append narration as JSON lines")
    parser.add_argument("--quiet", action="store_true", help="only print the final result")
    args = parser.parse_args(argv)

    paths = get_paths()
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    state = new_game(content.load_bundle(), seed=args.seed)
    telemetry = TelemetryService(args.telemetry) if args.telemetry is not None else None

    for result in play_run(state, AutoplaySpec(difficulty=args.difficulty)):
        if telemetry is not None:
            telemetry.log_events(result.events)
        if args.quiet:
            continue
        for ev in result.events:
            print(f"[{_MARKS.get(str(ev.get('category')), ' ')}] {ev.get('message')}")

    res = state.final_result
    if res is None:
        print("Run did not finish.")
        return 1
    score = status_view(state).score
    print(
        f"Rating: {res.rating} | base {res.base_score} "
        f"(tiers {res.tier1:.0f}/{res.tier2:.0f}) | total {score.display}"
    )
    return 0
