"""Runtime environment and application startup."""

from nightcap.core.environment import NightcapContext, RuntimeEnvironment
from nightcap.core.nightcap import Nightcap

__all__ = ["Nightcap", "NightcapContext", "RuntimeEnvironment"]
