"""
idforge - Main Entry Point

Supports both CLI and API modes for flexible deployment.
"""

import argparse
import os
import sys
from typing import Optional

from fastapi import FastAPI


def run_cli_mode(
    count: int,
    worker_id: Optional[int],
    data_center_id: Optional[int],
    decode: Optional[int],
) -> None:
    """
    Print freshly issued IDs, or the fields of ``decode``.
    """
    from idforge.services.id_service import IdService

    service = IdService()

    if decode is not None:
        components = service.decode_id(decode)
        print(f"🔎 ID {components.id}")
        print(f"   Generated at:   {components.generated_at.isoformat()}")
        print(f"   Timestamp (ms): {components.timestamp_ms}")
        print(f"   Data center id: {components.data_center_id}")
        print(f"   Worker id:      {components.worker_id}")
        print(f"   Sequence:       {components.sequence}")
        return

    for item in service.next_ids(count, worker_id, data_center_id):
        print(item.id)


def create_app() -> FastAPI:
    """
    Factory function to create FastAPI application.

    Called by uvicorn in factory mode to avoid import-time side effects when
    running in CLI mode.

    Returns:
        FastAPI: Configured application instance
    """
    from idforge.api.factory import create_api
    from idforge.core.config import settings
    from idforge.core.logger import setup_logging

    setup_logging()

    return create_api(
        title=settings.api__title,
        description=settings.api__description,
        version=settings.api__version,
        docs_url=settings.api__docs_url,
        redoc_url=settings.api__redoc_url,
    )


def main() -> None:
    """
    Main entry point with CLI argument parsing.
    """
    parser = argparse.ArgumentParser(
        description="idforge - Snowflake ID generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --mode cli --count 5            # Print five IDs
  python main.py --mode cli --decode 1541815603606036480
  python main.py --mode api                      # Run as FastAPI server
  python main.py --mode api --host 127.0.0.1 --port 3000
        """,
    )

    parser.add_argument(
        "--mode",
        choices=["cli", "api"],
        default="cli",
        help="Run mode: 'cli' prints IDs, 'api' runs the FastAPI server (default: cli)",
    )
    parser.add_argument(
        "--count", type=int, default=1, help="Number of IDs to print (CLI mode)"
    )
    parser.add_argument(
        "--worker-id", type=int, default=None, help="Worker id override (CLI mode)"
    )
    parser.add_argument(
        "--data-center-id",
        type=int,
        default=None,
        help="Data center id override (CLI mode)",
    )
    parser.add_argument(
        "--decode", type=int, default=None, help="Decode an ID instead of issuing"
    )
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind the API server (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "8080")),
        help="Port to bind the API server (default: 8080)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (API mode only)",
    )

    args = parser.parse_args()

    if args.mode == "cli":
        from idforge.core.exceptions import ApplicationException

        try:
            run_cli_mode(args.count, args.worker_id, args.data_center_id, args.decode)
        except ApplicationException as e:
            print(f"❌ {e}", file=sys.stderr)
            sys.exit(1)

    elif args.mode == "api":
        from idforge.core.config import settings

        print("🚀 Starting idforge API Server...")
        print(f"📍 Server will run on {args.host}:{args.port}")
        print(f"🌍 Environment: {settings.environment}")
        print(
            f"❄️  Default generator: worker_id={settings.snowflake__worker_id}, "
            f"data_center_id={settings.snowflake__data_center_id}"
        )
        print(f"📚 API docs: http://{args.host}:{args.port}{settings.api__docs_url}")
        print()

        try:
            import uvicorn

            uvicorn.run(
                "main:create_app",
                factory=True,
                host=args.host,
                port=args.port,
                reload=args.reload or settings.debug,
                log_level=settings.log_level,
            )
        except Exception as e:
            print(f"❌ Error starting API server: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
