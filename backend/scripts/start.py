#!/usr/bin/env python3
"""
SOL pointer trader launch script
================================

Features:
  - Check environment and dependencies
  - Check trading.yaml and wallet settings
  - Start the trader loop

Usage:
    python scripts/start.py              # check, then start
    python scripts/start.py --check      # only run the checks
"""

import argparse
import asyncio
import os
import sys
import warnings

# Ignore third-party deprecation warnings
warnings.filterwarnings("ignore", category=DeprecationWarning)

# Make the app/core packages importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def print_banner():
    """Print the startup banner."""
    print()
    print("=" * 60)
    print("   SOL Pointer / Hands Trader")
    print("   Jupiter swaps on Solana")
    print("=" * 60)
    print()


def check_python_version():
    """Check the Python version."""
    print("[check] Python version...", end=" ")
    version = sys.version_info
    if version.major >= 3 and version.minor >= 11:
        print(f"✓ Python {version.major}.{version.minor}.{version.micro}")
        return True
    else:
        print(f"✗ Python {version.major}.{version.minor} (need >= 3.11)")
        return False


def check_dependencies():
    """Check required libraries."""
    print("[check] Dependencies...")

    deps = [
        ("pydantic", "pydantic", "Pydantic"),
        ("pydantic_settings", "pydantic-settings", "pydantic-settings"),
        ("httpx", "httpx", "HTTPX"),
        ("yaml", "pyyaml", "PyYAML"),
        ("dotenv", "python-dotenv", "python-dotenv"),
        ("solders", "solders", "solders"),
    ]

    all_ok = True
    for module, package, name in deps:
        try:
            __import__(module)
            print(f"  ✓ {name}")
        except ImportError:
            print(f"  ✗ {name} (pip install {package})")
            all_ok = False

    return all_ok


def check_trading_config():
    """Check that trading.yaml (if any) parses."""
    print("[check] trading.yaml...", end=" ")
    try:
        from app.trading_config import load_trading_config

        config = load_trading_config()
        strategy = config.strategy
        mode = "dry-run" if config.dry_run else "LIVE"
        print(
            f"✓ buy -${strategy.buy_trigger_usd} / sell +${strategy.sell_trigger_usd}, "
            f"size {strategy.buy_size_pct * 100:.2f}%, {mode}"
        )
        return config
    except Exception as e:
        print(f"✗ Invalid config: {e}")
        return None


def check_wallet(dry_run: bool):
    """Check the wallet key when trading live."""
    print("[check] Wallet...", end=" ")
    if dry_run:
        print("- skipped (dry-run)")
        return True
    try:
        from app.clients import load_keypair
        from app.config import get_settings

        keypair = load_keypair(get_settings().wallet_private_key)
        print(f"✓ {keypair.pubkey()}")
        return True
    except Exception as e:
        print(f"✗ {e}")
        return False


async def check_jupiter():
    """Check the Jupiter price API."""
    print("[check] Jupiter price API...", end=" ")
    try:
        from app.clients import JupiterClient
        from app.config import get_settings
        from app.services import PriceFeed

        settings = get_settings()
        client = JupiterClient(
            api_key=settings.jup_api_key,
            price_url=settings.jupiter_price_url,
            swap_url=settings.jupiter_swap_url,
            timeout=settings.http_timeout,
        )
        try:
            price = await PriceFeed(client).get_price()
        finally:
            await client.close()

        print(f"✓ SOL = ${price}")
        return True
    except Exception as e:
        print(f"✗ Request failed: {e}")
        return False


async def run_checks():
    """Run all checks."""
    print()
    print("-" * 60)
    print("Environment checks")
    print("-" * 60)

    results = []

    results.append(check_python_version())
    deps_ok = check_dependencies()
    results.append(deps_ok)

    if deps_ok:
        config = check_trading_config()
        results.append(config is not None)
        if config is not None:
            results.append(check_wallet(config.dry_run))
        results.append(await check_jupiter())

    print()
    print("-" * 60)

    if all(results):
        print("✓ All checks passed!")
        return True
    else:
        print("✗ Some checks failed, fix them and retry")
        return False


def main():
    parser = argparse.ArgumentParser(
        description="SOL pointer trader launch script",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/start.py              # check, then start
  python scripts/start.py --check      # only run the checks
        """
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Only run the checks, do not start trading"
    )

    args = parser.parse_args()

    print_banner()

    # Run environment checks
    if not asyncio.run(run_checks()):
        sys.exit(1)

    # Check-only mode
    if args.check:
        print()
        print("Checks done, exiting.")
        return

    from app.main import main as run_app

    sys.exit(run_app())


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nTrader stopped.")
        sys.exit(0)
