"""Command-line entry point for focus audits."""

import asyncio
import sys
import json
import logging
import argparse

from .auditor import run_audit, run_device_audits
from .config import load_config
from .host import DEVICE_PROFILES
from .schemas import format_report


async def main():
    """Main entry point for running audits."""
    parser = argparse.ArgumentParser(
        description="Focus Audit - Keyboard and mobile accessibility checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Audit as the default device (iPhone 15)
  python -m focus_audit https://example.com

  # Audit every known device concurrently
  python -m focus_audit https://example.com --all-devices

  # Larger walk budgets and strict CSS parsing
  python -m focus_audit https://example.com --steps 300 --strict-css
        """
    )

    parser.add_argument(
        "url",
        help="Target URL to audit"
    )
    parser.add_argument(
        "--device", "-d",
        choices=sorted(DEVICE_PROFILES),
        default=None,
        help="Device profile to emulate (default: from config, iPhone 15)"
    )
    parser.add_argument(
        "--all-devices",
        action="store_true",
        help="Audit every mobile device profile in parallel"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="YAML file with configuration overrides"
    )
    parser.add_argument(
        "--steps", "-s",
        type=int,
        default=None,
        help="Shift budget for the tab navigation and focus visibility walks (default: 150)"
    )
    parser.add_argument(
        "--strict-css",
        action="store_true",
        help="Parse CSS and viewport values instead of substring matching"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable walk step tracing and check timings"
    )
    parser.add_argument(
        "--debug-verbose",
        action="store_true",
        help="Enable verbose walk tracing"
    )

    args = parser.parse_args()

    # Validate URL
    if not args.url.startswith(("http://", "https://")):
        print(f"Error: Invalid URL: {args.url}")
        print("URL must start with http:// or https://")
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.debug or args.debug_verbose:
        from .debug import enable_debug
        enable_debug(enabled=True, verbose=args.debug_verbose)
        print("[INFO] Walk debugging enabled")

    config = load_config(
        args.config,
        device=args.device,
        tab_walk_budget=args.steps,
        focus_check_budget=args.steps,
        strict_css=True if args.strict_css else None,
    )

    if args.all_devices:
        devices = [name for name, profile in DEVICE_PROFILES.items() if profile.is_mobile]
    else:
        devices = [config.device]
    print(f"Starting audit of {args.url} on {', '.join(devices)}...")
    print("-" * 60)

    try:
        if args.all_devices:
            reports = await run_device_audits(args.url, devices, config)
        else:
            reports = [await run_audit(args.url, config)]

        for report in reports:
            print()
            print(format_report(report))

        # Output JSON for programmatic use
        print("\nJSON Output:")
        print(json.dumps([r.model_dump() for r in reports], indent=2, default=str))

    except KeyboardInterrupt:
        print("\n\nAudit interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"\nError during audit: {str(e)}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
