"""
Soroban CLI
Wraps the soroban binary: network/identity setup, funding and deployment
"""

import os
from typing import Dict
from loguru import logger

from utils.command_runner import CommandRunner


class SorobanCLI:
    """
    Thin async wrapper around `soroban` commands against the local network
    """

    def __init__(self, runner: CommandRunner, config: Dict):
        """
        Initialize Soroban CLI

        Args:
            runner: Command runner
            config: Full localnet configuration
        """
        self.runner = runner

        self.network = config['network']['name']
        self.rpc_url = config['network']['rpc_url']
        self.passphrase = config['network']['passphrase']
        self.identity = config['identity']['name']
        self.wasm_dir = config['deploy']['wasm_dir']

    async def configure_network(self):
        """Register the local network globally"""
        await self.runner.run(
            'soroban', 'config', 'network', 'add', '--global', self.network,
            '--rpc-url', self.rpc_url,
            '--network-passphrase', self.passphrase
        )
        logger.info(f"Network '{self.network}' -> {self.rpc_url}")

    async def generate_identity(self):
        """Generate the deployer identity"""
        await self.runner.run(
            'soroban', 'config', 'identity', 'generate', '--global', self.identity
        )
        logger.info(f"Identity '{self.identity}' generated")

    async def configure(self):
        """Configure network and deployer identity"""
        await self.configure_network()
        await self.generate_identity()

    async def fund_identity(self) -> bool:
        """
        Fund the deployer identity from friendbot

        Returns:
            True if funding succeeded
        """
        result = await self.runner.run(
            'soroban', 'config', 'identity', 'fund', self.identity,
            '--network', self.network,
            check=False
        )

        if not result.ok:
            logger.debug(f"Funding '{self.identity}' exited {result.returncode}")

        return result.ok

    def wasm_path(self, contract: str) -> str:
        """Path of the compiled artifact for a contract"""
        return os.path.join(self.wasm_dir, f"{contract}.wasm")

    async def deploy(self, contract: str) -> str:
        """
        Deploy a compiled contract

        Args:
            contract: Contract crate name (e.g. 'dex_market')

        Returns:
            Deployed contract id
        """
        wasm = self.wasm_path(contract)

        if not os.path.exists(wasm):
            logger.error(f"Contract artifact not found: {wasm}")
            logger.info("Run 'cargo build --target wasm32-unknown-unknown --release' first")
            raise FileNotFoundError(wasm)

        result = await self.runner.run(
            'soroban', 'contract', 'deploy',
            '--wasm', wasm,
            '--source', self.identity,
            '--network', self.network
        )

        contract_id = result.stdout.strip()
        logger.success(f"Deployed {contract}: {contract_id}")
        return contract_id
