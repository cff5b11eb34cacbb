"""
Command line entry point.

    wrongway joke --scenario Queue --role Visitor --tone Dry --length short
    wrongway --stub batch requests.csv jokes.jsonl
    wrongway serve --port 8000
"""

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from wrongway.api.responses import assemble_error, assemble_success
from wrongway.common.config import Settings, load_settings
from wrongway.common.io import IncrementalJSONLWriter, read_requests
from wrongway.common.logging import get_logger
from wrongway.errors import JokeServiceError
from wrongway.generation.catalog import LENGTHS, ROLES, SCENARIOS, TONES
from wrongway.generation.pipeline import JokePipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wrongway", description="Museum jokes told the wrong way")
    parser.add_argument("--profile", default=None, help="config profile from default.yaml (e.g. stub, local)")
    parser.add_argument("--stub", action="store_true", help="skip the backend and return synthetic jokes")
    sub = parser.add_subparsers(dest="command", required=True)

    joke = sub.add_parser("joke", help="generate one joke and print it as JSON")
    joke.add_argument("--scenario", required=True, help=f"one of: {', '.join(SCENARIOS)}")
    joke.add_argument("--role", dest="roles", action="append", required=True,
                      help=f"repeat once or twice; one of: {', '.join(ROLES)}")
    joke.add_argument("--tone", required=True, help=f"one of: {', '.join(TONES)}")
    joke.add_argument("--length", default=None, choices=LENGTHS)

    batch = sub.add_parser("batch", help="generate jokes for every request in a .jsonl/.json/.csv file")
    batch.add_argument("input", help="request file")
    batch.add_argument("output", help="output .jsonl (one response per request)")

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _settings(args) -> Settings:
    settings = load_settings(profile=args.profile)
    if args.stub:
        settings = dataclasses.replace(settings, use_stub=True)
    return settings


def cmd_joke(args, settings: Settings) -> int:
    params = {"scenario": args.scenario, "roles": args.roles, "tone": args.tone}
    if args.length:
        params["length"] = args.length

    try:
        status, content = assemble_success(JokePipeline(settings).run(params))
    except JokeServiceError as e:
        status, content = assemble_error(e)

    print(json.dumps(content, ensure_ascii=False, indent=2))
    return 0 if status == 200 else 1


def cmd_batch(args, settings: Settings) -> int:
    logger = logging.getLogger("wrongway.batch")
    batch = read_requests(args.input)
    pipeline = JokePipeline(settings)
    failures = 0

    logger.info(f"Generating {len(batch)} jokes from {args.input}")

    with IncrementalJSONLWriter(args.output) as writer:
        for i, params in enumerate(tqdm(batch, desc="jokes")):
            try:
                status, content = assemble_success(pipeline.run(params))
            except JokeServiceError as e:
                status, content = assemble_error(e)
                failures += 1
                logger.warning(f"Request {i + 1} failed ({status}): {content['error']}")
            writer.write({"id": i + 1, "status": status, "response": content})

    logger.info(f"Saved {writer.count} responses to '{args.output}' ({failures} failed)")
    return 0 if failures == 0 else 1


def cmd_serve(args, settings: Settings) -> int:
    import uvicorn

    from wrongway.api.app import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


COMMANDS = {
    "joke": cmd_joke,
    "batch": cmd_batch,
    "serve": cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = _settings(args)
    get_logger("wrongway", settings.log_level)
    return COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
