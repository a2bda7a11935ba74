import sys
import argparse


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="corrga unified CLI: genetic template search and interactive tracking"
    )

    # Subcommand options are parsed by the subcommand itself; the subparsers
    # only provide the command list and help text.
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("search", help="Headless template search on a still image")
    subparsers.add_parser("track", help="Interactive tracking on a video file or camera")

    args, rest = parser.parse_known_args(argv)

    if args.command == "search":
        from .search import search_command
        search_command(rest)
    elif args.command == "track":
        from .track import track_command
        track_command(rest)
    else:
        parser.print_help()
        sys.exit(1)

if __name__ == "__main__":
    main()
