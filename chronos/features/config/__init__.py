"""User config feature module"""

from chronos.features.config.repository import ConfigRepository
from chronos.features.config.schemas import UpdateConfigRequest

# Router lives in chronos.features.config.api (imports the timer manager)
__all__ = ["ConfigRepository", "UpdateConfigRequest"]
