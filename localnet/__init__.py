"""
Localnet Package
Container lifecycle, Soroban CLI calls and the full deployment sequence
"""

from .container_manager import ContainerManager
from .soroban_cli import SorobanCLI
from .orchestrator import LocalnetOrchestrator

__all__ = ['ContainerManager', 'SorobanCLI', 'LocalnetOrchestrator']
