#!/usr/bin/env python3
"""
Run a full checkout (mount -> session -> surface -> payment) and print each
stage to the terminal. Uses mock integrations unless --real is given.

Usage (from repo root):
  python scripts/run_checkout_demo.py --amount 25.00
  python scripts/run_checkout_demo.py --amount 0.00          # free order
  python scripts/run_checkout_demo.py --amount 0.30          # small order
  python scripts/run_checkout_demo.py --amount 25.00 --test-mode
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.checkout.factory import build_checkout
from src.integrations.clients.mocks.stripe import MockAnchor
from src.utils.checkout_config_loader import load_checkout_config


def setup_logging(verbose: bool = False):
    """Log to terminal so every stage is visible."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a checkout end-to-end")
    parser.add_argument("--amount", default="25.00", help="Order total as a decimal string")
    parser.add_argument("--currency", default=None)
    parser.add_argument("--restaurant-id", default=None)
    parser.add_argument("--test-mode", action="store_true", help="Simulate payment without the gateway")
    parser.add_argument("--real", action="store_true", help="Use the real backend and gateway")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


async def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    config = load_checkout_config()
    if args.test_mode:
        config.checkout.test_mode = True
    if not args.real and not config.gateway.publishable_key:
        config.gateway.publishable_key = "pk_test_mock"

    def on_success(result):
        print_stage("PAYMENT SUCCEEDED", result.to_dict())

    def on_error(error):
        print_stage("PAYMENT FAILED", error.to_dict())

    checkout = build_checkout(
        config,
        args.amount,
        on_success,
        on_error,
        currency=args.currency,
        restaurant_id=args.restaurant_id,
        real=args.real,
    )

    print_stage("BEFORE MOUNT", checkout.view())
    await checkout.mount(MockAnchor())
    print_stage(f"MOUNTED (phase={checkout.phase.value})", checkout.view())

    ok = await checkout.process_payment()
    print_stage("PROCESS PAYMENT RETURNED", {"ok": ok, "phase": checkout.phase.value})

    checkout.unmount()

    print("\n" + "=" * 60)
    print("  Demo complete. Check logs above for each stage.")
    print("=" * 60 + "\n")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
