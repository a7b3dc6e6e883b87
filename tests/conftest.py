"""
SML SDK - Test Configuration
============================

Shared pytest fixtures for the SML SDK test suite.

It provides:
- Isolation of the default MachineConfig from the environment
- Helpers to assemble and run small programs with scripted input
"""

import pytest

from sml_sdk.assembler import assemble
from sml_sdk.config import MachineConfig, set_default_config
from sml_sdk.emulator import Emulator, ScriptedInput


# ═══════════════════════════════════════════════════════════════════════════════
# ISOLATION
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """
    Fixture: Run every test against the built-in defaults.

    Removes SML_* environment variables and resets the cached default
    configuration before and after the test.
    """
    for name in ("SML_MEMORY_SIZE", "SML_MAX_CYCLES", "SML_STRICT_SYMBOLS", "SML_PROMPT"):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# ═══════════════════════════════════════════════════════════════════════════════
# HELPER FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def make_emulator():
    """
    Fixture: Factory for emulators with scripted input and captured output.

    Usage:
        emu = make_emulator("x 5\\nWRITE x\\nHALT\\n", inputs=["7"])
    """
    def _make(source: str, inputs=(), config: MachineConfig | None = None) -> Emulator:
        emu = Emulator(
            config or MachineConfig(),
            input_source=ScriptedInput(inputs),
            output_sink=lambda line: None,
        )
        emu.load_program(assemble(source))
        return emu

    return _make
