"""
Localnet Orchestrator
Sequences validator startup, deployer funding and contract deployment
"""

import asyncio
from typing import Dict, Optional
from loguru import logger

from gate.readiness_gate import ReadinessGate, RetryLadder, GateResult, StartupTimeoutError
from gate.progress_source import HorizonProgressSource
from utils.command_runner import CommandRunner
from .container_manager import ContainerManager
from .soroban_cli import SorobanCLI


class LocalnetOrchestrator:
    """
    Drives a fresh local validator from nothing to a deployed contract

    Components can be injected for testing; by default they are built
    from the configuration.
    """

    def __init__(
        self,
        config: Dict,
        runner: Optional[CommandRunner] = None,
        container: Optional[ContainerManager] = None,
        soroban: Optional[SorobanCLI] = None,
        gate: Optional[ReadinessGate] = None,
        sleep=asyncio.sleep
    ):
        """
        Initialize Orchestrator

        Args:
            config: Localnet configuration (see utils.config_loader)
            runner: Shared command runner
            container: Container manager
            soroban: Soroban CLI wrapper
            gate: Readiness gate
            sleep: Sleep coroutine
        """
        self.config = config
        self.runner = runner or CommandRunner()

        self.container = container or ContainerManager(self.runner, config['container'])
        self.soroban = soroban or SorobanCLI(self.runner, config)

        gate_config = config['gate']
        self.startup_floor = gate_config.get('startup_floor', 0)
        self.startup_timeout = gate_config.get('startup_timeout_s')
        self.ladder_thresholds = gate_config.get('retry_ladder', [10, 20, 30])
        self.default_contract = config['deploy']['default_contract']

        if gate is None:
            progress_source = HorizonProgressSource(
                config['horizon']['url'],
                config['horizon'].get('request_timeout_s', 5)
            )
            gate = ReadinessGate(
                progress_source,
                self.soroban.fund_identity,
                poll_interval=gate_config.get('poll_interval_s', 1.0),
                wait_timeout=self.startup_timeout
            )

        self.gate = gate
        self._sleep = sleep

    async def start(self) -> str:
        """Start the validator container"""
        return await self.container.start()

    async def stop(self, ignore_errors: bool = False) -> bool:
        """Stop the validator container"""
        return await self.container.stop(ignore_errors=ignore_errors)

    async def config_cli(self):
        """Configure the soroban CLI for the local network"""
        await self.soroban.configure()

    async def await_startup(self, floor: int = 0):
        """
        Wait for the validator to be live with more than `floor` ledgers

        Raises:
            StartupTimeoutError: startup_timeout_s is set and expired
        """
        logger.info("Waiting for local validator to start...")

        result = await self.gate.await_progress(floor, timeout=self.startup_timeout)

        if result is GateResult.TIMED_OUT:
            raise StartupTimeoutError(floor, self.startup_timeout)

        logger.success("Validator is live")

    async def fund(self):
        """Fund the deployer identity with the configured retry ladder"""
        await self.gate.fund_with_retry(RetryLadder(self.ladder_thresholds))

    async def await_startup_and_fund(self):
        """Wait for first ledgers, then fund the deployer"""
        await self.await_startup(self.startup_floor)
        await self.fund()

    async def deploy(self, contract: Optional[str] = None) -> str:
        """Deploy a contract (default from config)"""
        return await self.soroban.deploy(contract or self.default_contract)

    async def full(self, contract: Optional[str] = None) -> str:
        """
        Start a fresh validator and deploy a contract

        Returns:
            Deployed contract id
        """
        logger.info("=" * 70)
        logger.info("Starting fresh local validator")
        logger.info("=" * 70)

        if await self.stop(ignore_errors=True):
            await self._sleep(0.1)

        await self.config_cli()
        await self.start()
        await self.await_startup_and_fund()

        return await self.deploy(contract)
