import argparse
import json
from pathlib import Path

from proofly.cache.factory import ResultCacheFactory
from proofly.config.settings import Settings
from proofly.logging.logger import Log
from proofly.processor.exceptions import InvalidRequestError
from proofly.processor.processor import build_processor
from proofly.worker.dispatcher import FulfillmentDispatcher
from proofly.worker.trigger import parse_checkout_event


def main(argv: list[str] | None = None) -> None:
    """Entry point: build dependencies -> dispatch each event file -> drain the pool."""
    parser = argparse.ArgumentParser(description="Run fulfillment for checkout event files.")
    parser.add_argument("events", nargs="+", type=Path, help="checkout event JSON files")
    args = parser.parse_args(argv)

    settings = Settings()
    Log.configure(settings.log_level)

    cache = ResultCacheFactory.create(settings)
    processor = build_processor(settings, result_cache=cache)
    dispatcher = FulfillmentDispatcher(processor, cache, settings)

    try:
        for path in args.events:
            try:
                event = json.loads(path.read_text(encoding="utf-8"))
                ack = dispatcher.dispatch(parse_checkout_event(event))
            except (OSError, json.JSONDecodeError, InvalidRequestError) as exc:
                Log.error(f"Skipping event file {path}: {exc}")
                continue
            Log.info(f"Event {path.name}: accepted={ack.accepted} {ack.reason}".rstrip())
    except KeyboardInterrupt:
        Log.info("Interrupted, waiting for running fulfillments")
    finally:
        dispatcher.shutdown(wait=True)


if __name__ == "__main__":
    main()
