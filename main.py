"""
Entry point for the metadata analyzer
"""
import asyncio
import sys

from app import create_cli, run_cli


def main() -> int:
    """Parse arguments and run the requested command"""
    parser = create_cli()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "serve":
        import uvicorn

        uvicorn.run("api:app", host=args.host, port=args.port, log_level="info")
        return 0

    try:
        return asyncio.run(run_cli(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
