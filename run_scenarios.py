#!/usr/bin/env python3
"""
Run storefront scenarios against a real browser.

Examples:
  python run_scenarios.py --list
  python run_scenarios.py --scenario full_cart_flow --headed
  STORE_BASE_URL=http://localhost:3000/ python run_scenarios.py
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from storefront_e2e.core.config import StoreConfig
from storefront_e2e.scenarios import SCENARIOS, run_scenarios

# Setup basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Load env
load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Run storefront cart scenarios',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--list', action='store_true', help='List scenario names and exit')
    parser.add_argument('--scenario', action='append', choices=sorted(SCENARIOS),
                        help='Scenario to run (repeatable, default: all)')
    parser.add_argument('--base-url', type=str, help='Store URL (overrides STORE_BASE_URL)')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    return parser


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.list:
        for name, scenario in SCENARIOS.items():
            summary = (scenario.__doc__ or '').strip().splitlines()
            print(f"{name:32} {summary[0] if summary else ''}")
        return 0

    config = StoreConfig(base_url=args.base_url, headless=False if args.headed else None)
    results = await run_scenarios(args.scenario, config)

    print("\n" + "=" * 60)
    print("SCENARIO RESULTS")
    print("=" * 60)
    for result in results:
        status = "PASS" if result.passed else "FAIL"
        print(f"{status} {result.name:32} {result.elapsed_s:6.1f}s")
        if result.error:
            print(f"     {result.error}")

    failed = [r for r in results if not r.passed]
    print(f"\n{len(results) - len(failed)}/{len(results)} passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
