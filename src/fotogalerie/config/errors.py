"""Errors raised while reading fotogalerie settings from the environment.

The CLI maps both to exit code 2 before any connection is attempted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, e.g. a non-numeric channel id."""


class MissingConfigurationError(ConfigurationError):
    """One or more required variables are unset or blank.

    ``names`` lists them sorted, so the message reports every gap at once.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")
