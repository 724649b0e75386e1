"""CLI command modules for anima.

Each handler takes the parsed args and an EvolutionEngine.
"""

from anima.cli.commands.interact import cmd_interact
from anima.cli.commands.simulate import cmd_simulate, load_script

__all__ = ["cmd_interact", "cmd_simulate", "load_script"]
