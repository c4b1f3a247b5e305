"""
Soroban Localnet - Main Entry Point
Start a local Stellar validator, fund the deployer and deploy contracts

Usage:
    python main.py                    # full sequence
    python main.py start | stop | config-cli | fund
    python main.py await-startup [floor]
    python main.py deploy <contract>
    python main.py full [contract]
"""

import asyncio
import sys
from loguru import logger

from gate.readiness_gate import GateError
from localnet.orchestrator import LocalnetOrchestrator
from utils.command_runner import CommandError
from utils.config_loader import load_config

# Configure logging
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level="INFO"
)
logger.add(
    "data/logs/localnet.log",
    rotation="1 day",
    retention="7 days",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    level="DEBUG"
)


USAGE = __doc__.split("Usage:", 1)[1].rstrip()


class UsageError(Exception):
    """Unknown command or bad arguments"""


def _dispatch(orchestrator: LocalnetOrchestrator, argv: list):
    """Map command-line words to an orchestrator coroutine"""
    if not argv:
        return orchestrator.full()

    command, args = argv[0], argv[1:]

    if command == 'start' and not args:
        return orchestrator.start()
    if command == 'stop' and not args:
        return orchestrator.stop()
    if command == 'config-cli' and not args:
        return orchestrator.config_cli()
    if command == 'fund' and not args:
        return orchestrator.fund()
    if command == 'await-startup' and len(args) <= 1:
        try:
            floor = int(args[0]) if args else 0
        except ValueError:
            raise UsageError(f"await-startup expects an integer floor, got {args[0]!r}")
        return orchestrator.await_startup(floor)
    if command == 'deploy' and len(args) == 1:
        return orchestrator.deploy(args[0])
    if command == 'full' and len(args) <= 1:
        return orchestrator.full(*args)

    raise UsageError(f"Unknown command: {' '.join(argv)}")


async def main(argv: list) -> int:
    """
    Main entry point

    Returns:
        Process exit code
    """
    try:
        config = load_config()
    except ValueError as e:
        logger.error(str(e))
        return 1

    orchestrator = LocalnetOrchestrator(config)

    try:
        coroutine = _dispatch(orchestrator, argv)
    except UsageError as e:
        logger.error(str(e))
        logger.info(f"Usage:{USAGE}")
        return 2

    try:
        result = await coroutine
    except GateError as e:
        logger.error(f"Readiness gate failed: {e}")
        return 1
    except CommandError as e:
        logger.error(str(e))
        return 1
    except FileNotFoundError as e:
        logger.error(f"Missing file: {e}")
        return 1

    if isinstance(result, str) and result:
        print(result)

    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main(sys.argv[1:])))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
