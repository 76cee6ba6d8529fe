"""Method configuration received from apt in 601 Configuration messages."""

import logging
from typing import Iterable

from pydantic import BaseModel

from .constants import CONFIG_DEBUG, CONFIG_SERVICE_ACCOUNT_EMAIL, CONFIG_SERVICE_ACCOUNT_JSON
from .errors import ConfigItemError

logger = logging.getLogger(__name__)

# Same words apt's StringToBool accepts
TRUE_WORDS = frozenset({"yes", "true", "with", "on", "enable"})


def parse_apt_bool(value: str) -> bool:
    """Interpret a configuration value the way apt does.

    Integers are true only when exactly 1. Otherwise the lower-cased value
    must be one of TRUE_WORDS; anything else is false.
    """
    value = value.strip()
    try:
        return int(value) == 1
    except ValueError:
        pass
    return value.lower() in TRUE_WORDS


class MethodConfig(BaseModel):
    """Process-lifetime method configuration.

    The JSON key file and the service account email select mutually
    exclusive credential sources; a non-empty JSON path wins.
    """

    service_account_json: str = ""
    service_account_email: str = ""
    debug: bool = False

    def apply_items(self, items: Iterable[str]) -> None:
        """Apply "Key=Value" configuration items in order.

        Unknown keys are ignored. Processing stops at the first item
        without "=", leaving later items unapplied.

        Raises:
            ConfigItemError: On the first malformed item
        """
        try:
            for item in items:
                key, sep, value = item.partition("=")
                if not sep:
                    raise ConfigItemError(item)
                key = key.strip()
                value = value.strip()

                if key == CONFIG_SERVICE_ACCOUNT_JSON:
                    self.service_account_json = value
                elif key == CONFIG_SERVICE_ACCOUNT_EMAIL:
                    self.service_account_email = value
                elif key == CONFIG_DEBUG:
                    self.debug = parse_apt_bool(value)
                else:
                    logger.debug("Ignoring config item %s", key)
        finally:
            self.enforce_precedence()

    def enforce_precedence(self) -> None:
        """A JSON key file always overrides the service account email."""
        if self.service_account_json:
            self.service_account_email = ""


__all__ = ["MethodConfig", "parse_apt_bool", "TRUE_WORDS"]
