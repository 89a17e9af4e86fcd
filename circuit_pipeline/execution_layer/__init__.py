from .command import CommandResult, CommandRunner, ExternalCommand
from .toolchain import CircomToolchain

__all__ = ["CommandResult", "CommandRunner", "ExternalCommand", "CircomToolchain"]
