"""CLI entry point for the webhook observer server."""

import argparse
import os

from app.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="stripe-webhook-observer",
        description="Stripe webhook receiver: verifies, logs and records incoming events",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port}, or PORT)"
    )
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes (dev only)")
    args = parser.parse_args(argv)

    # Keep the startup banner in sync with the bound port (reload spawns a fresh process)
    settings.port = args.port
    os.environ["PORT"] = str(args.port)

    import uvicorn

    # Single worker: the last-webhook file assumes one writer process
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload, workers=1)


if __name__ == "__main__":
    main()
