"""
Localnet Check Script
Verifies tools, configuration and validator reachability before deploying
"""

import os
import sys
import json
import shutil
import asyncio
from loguru import logger

from gate.progress_source import HorizonProgressSource
from utils.config_loader import DEFAULT_CONFIG_PATH, load_config


def check_binaries():
    """Check docker and soroban are on PATH"""
    logger.info("Checking required binaries...")

    missing = []
    for binary in ('docker', 'soroban'):
        path = shutil.which(binary)
        if path:
            logger.success(f"  ✓ {binary}: {path}")
        else:
            logger.error(f"  ✗ {binary}: not found on PATH")
            missing.append(binary)

    return not missing


def check_configuration_file():
    """Check the config file parses"""
    logger.info("Checking configuration file...")

    if not os.path.exists(DEFAULT_CONFIG_PATH):
        logger.warning(f"  {DEFAULT_CONFIG_PATH} not found - defaults will be used")
        return True

    try:
        with open(DEFAULT_CONFIG_PATH, 'r') as f:
            json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"  ✗ {DEFAULT_CONFIG_PATH}: {e}")
        return False

    logger.success(f"  ✓ {DEFAULT_CONFIG_PATH}")
    return True


def check_contract_artifact(config):
    """Check the default contract has been compiled"""
    logger.info("Checking contract artifact...")

    wasm = os.path.join(
        config['deploy']['wasm_dir'],
        f"{config['deploy']['default_contract']}.wasm"
    )

    if not os.path.exists(wasm):
        logger.warning(f"  Artifact not built yet: {wasm}")
        logger.info("  Run: cargo build --target wasm32-unknown-unknown --release")
        return False

    logger.success(f"  ✓ {wasm}")
    return True


def check_validator(config):
    """Report whether Horizon answers (informational)"""
    logger.info("Checking local validator...")

    source = HorizonProgressSource(
        config['horizon']['url'],
        config['horizon'].get('request_timeout_s', 5)
    )
    ledger = asyncio.run(source.fetch_progress())

    if ledger is None:
        logger.info(f"  Validator not reachable at {source.url} (start it with: python main.py start)")
    else:
        logger.success(f"  ✓ Validator live at ledger {ledger}")

    return True


def main():
    """Run all localnet checks"""
    logger.info("=" * 70)
    logger.info("Soroban Localnet Check")
    logger.info("=" * 70)

    try:
        config = load_config()
    except ValueError as e:
        logger.error(str(e))
        return 1

    checks = [
        ("Binaries", check_binaries),
        ("Configuration File", check_configuration_file),
        ("Contract Artifact", lambda: check_contract_artifact(config)),
        ("Validator", lambda: check_validator(config))
    ]

    results = []

    for name, check_func in checks:
        logger.info("")
        results.append((name, check_func()))

    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy: python main.py")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
