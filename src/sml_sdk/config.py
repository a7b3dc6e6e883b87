"""
SML SDK Configuration
=====================

Machine and toolchain settings shared by the assembler, the emulator and the
command-line tools. Configuration can come from:
- Default values (defined here)
- Environment variables
- Explicit keyword arguments / CLI options (applied by the caller)

Environment variables (all optional):
    SML_MEMORY_SIZE: Memory capacity in words (integer, default 100)
    SML_MAX_CYCLES: Cycle limit for run-to-completion (integer, default none)
    SML_STRICT_SYMBOLS: "1"/"true"/"yes" to make undefined operands an error
    SML_PROMPT: Prompt shown by console READ
"""

from dataclasses import dataclass, replace
from typing import Optional
import os


# Two-digit operands address at most 100 words.
DEFAULT_MEMORY_SIZE = 100


@dataclass
class MachineConfig:
    """
    Configuration for assembly and execution.

    Attributes:
        memory_size: Number of addressable memory words (default: 100)
        max_cycles: Stop run-to-completion after this many cycles.
                    None (default) runs until halt, fault or end of memory.
        strict_symbols: Treat undefined operand symbols as errors instead of
                        warning and substituting 0 (default: False)
        prompt: Prompt text for console READ input
    """

    memory_size: int = DEFAULT_MEMORY_SIZE
    max_cycles: Optional[int] = None
    strict_symbols: bool = False
    prompt: str = "Enter value: "

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """
        Create MachineConfig from environment variables.

        Invalid numeric values are ignored and the default is kept.

        Returns:
            MachineConfig with values from environment variables
        """
        config = cls()

        if memory_size := os.environ.get("SML_MEMORY_SIZE"):
            try:
                size = int(memory_size)
                if size > 0:
                    config.memory_size = size
            except ValueError:
                pass

        if max_cycles := os.environ.get("SML_MAX_CYCLES"):
            try:
                config.max_cycles = int(max_cycles)
            except ValueError:
                pass

        if strict := os.environ.get("SML_STRICT_SYMBOLS"):
            config.strict_symbols = strict.strip().lower() in ("1", "true", "yes", "on")

        if prompt := os.environ.get("SML_PROMPT"):
            config.prompt = prompt

        return config

    def with_overrides(self, **changes) -> "MachineConfig":
        """
        Return a copy with the given fields replaced.

        Fields passed as None are left unchanged, which lets CLI options
        that were not given fall through to the base configuration.
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)


# ═══════════════════════════════════════════════════════════════════════════════
# DEFAULT CONFIGURATION INSTANCE
# ═══════════════════════════════════════════════════════════════════════════════

_default_config: Optional[MachineConfig] = None


def get_default_config() -> MachineConfig:
    """
    Get the default configuration.

    Creates from environment variables on first access.
    Can be overridden by calling set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = MachineConfig.from_env()
    return _default_config


def set_default_config(config: Optional[MachineConfig]) -> None:
    """
    Set the default configuration.

    Passing None resets it so the next get_default_config() call re-reads
    the environment.
    """
    global _default_config
    _default_config = config
