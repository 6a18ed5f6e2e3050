import argparse
import logging
import sys

from chat_paginator.demo import run


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Paginated chat list demo")
    parser.add_argument("--config", help="YAML file with pagination settings")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        return run(args.config)
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Demo interrupted by user (Ctrl+C)")
        return 0


if __name__ == "__main__":
    sys.exit(main())
