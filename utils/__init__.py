"""
Utilities Package
Subprocess execution and configuration loading
"""

from .command_runner import CommandRunner, CommandResult, CommandError
from .config_loader import load_config

__all__ = [
    'CommandRunner',
    'CommandResult',
    'CommandError',
    'load_config'
]
