from dataclasses import dataclass

from src.marketplace.core.services import AuthService, DbSessionService
from src.marketplace.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    auth_service: AuthService
