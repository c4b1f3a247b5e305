"""
Container Manager
Starts and stops the stellar/quickstart validator container
"""

from typing import Dict
from loguru import logger

from utils.command_runner import CommandRunner, CommandError


class ContainerManager:
    """Manages the local validator's Docker container"""

    def __init__(self, runner: CommandRunner, container_config: Dict):
        """
        Initialize Container Manager

        Args:
            runner: Command runner
            container_config: 'container' section of the localnet config
        """
        self.runner = runner
        self.name = container_config['name']
        self.image = container_config['image']
        self.port = int(container_config['port'])
        self.args = list(container_config.get('args', []))

    async def start(self) -> str:
        """
        Start the validator in the background

        Returns:
            Container id printed by docker
        """
        result = await self.runner.run(
            'docker', 'run', '--rm', '-d',
            '-p', f"{self.port}:{self.port}",
            '--name', self.name,
            self.image,
            *self.args
        )

        container_id = result.stdout.strip()
        logger.success(f"Started {self.image} as '{self.name}' ({container_id[:12]})")
        return container_id

    async def stop(self, ignore_errors: bool = False) -> bool:
        """
        Stop the validator container

        Args:
            ignore_errors: Log and return False instead of raising

        Returns:
            True if the container was stopped
        """
        try:
            await self.runner.run('docker', 'stop', self.name)
        except CommandError as e:
            if not ignore_errors:
                raise
            logger.info(f"No running container '{self.name}' to stop ({e.returncode})")
            return False

        logger.info(f"Stopped container '{self.name}'")
        return True
