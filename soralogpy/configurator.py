"""Interface of objects that set up a logging system from a config."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ConfigResult:
    """Outcome of applying a config.

    ``has_error`` means logging cannot work correctly, ``has_warning`` that it
    can; ``message`` explains both.
    """

    has_error: bool = False
    has_warning: bool = False
    message: str = ""


class Configurator(ABC):
    """Sets up a logging system by adding sinks and groups to it."""

    @abstractmethod
    def apply_on(self, system) -> ConfigResult:
        """Apply the config to ``system`` and report how it went."""