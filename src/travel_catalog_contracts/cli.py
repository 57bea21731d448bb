#!/usr/bin/env python3
"""
Command line entry point for running the catalog contract suites.

Example:
    travel-catalog-contracts --base-url http://localhost:5000/api --suite category
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from travel_catalog_contracts.config import KNOWN_SUITES, ConfigError, Credentials, load_config, order_suites
from travel_catalog_contracts.runner import SuiteRunner

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run contract suites against the travel catalog API")
    parser.add_argument("--base-url", help="API base URL (default: CATALOG_API_BASE_URL or http://localhost:5000/api)")
    parser.add_argument("--email", help="Login email (default: CATALOG_API_EMAIL)")
    parser.add_argument("--password", help="Login password (default: CATALOG_API_PASSWORD)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--suite", action="append", choices=KNOWN_SUITES, dest="suites",
                        help="Suite to run; repeat for several (always run in fixed order)")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default: LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log_level = args.log_level or os.environ.get("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid LOG_LEVEL '{log_level}', expected one of {', '.join(LOG_LEVELS)}")
        return 2

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config()
        credentials = None
        if args.email or args.password:
            credentials = Credentials(
                email=args.email or config.credentials.email,
                password=args.password or config.credentials.password,
            )
        config = config.with_overrides(
            base_url=args.base_url,
            credentials=credentials,
            timeout=args.timeout,
            suites=order_suites(args.suites) if args.suites else None,
        )
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    print(f"Testing travel catalog API at {config.base_url}")
    print(f"Suites: {', '.join(config.suites)}")

    report = SuiteRunner(config).run()
    print()
    for line in report.summary():
        print(line)
    return 0 if report.passed else 1


if __name__ == "__main__":
    sys.exit(main())
