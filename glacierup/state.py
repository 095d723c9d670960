from dataclasses import dataclass, replace

from .client import MAX_RETRIES, SOCKET_TIMEOUT_MS, build_client
from .config import Config
from .logwriter import LogWriter
from .regions import Region, by_index


@dataclass(frozen=True)
class AppState:
    """
    Everything an action needs, copied out of the config when the action
    starts. Workers only ever see one of these, so editing the config while
    a job is in flight has no effect on it.
    """

    access_key: str
    secret_key: str
    vault: str
    region_index: int
    log_type: int
    directory: str
    logging_enabled: bool = True
    timeout_ms: int = SOCKET_TIMEOUT_MS
    max_retries: int = MAX_RETRIES

    @classmethod
    def from_config(cls, config: Config, **overrides) -> "AppState":
        state = cls(
            access_key=config.access_key or "",
            secret_key=config.secret_key or "",
            vault=config.vault_key or "",
            region_index=config.location_index,
            log_type=config.log_type_index,
            directory=config.directory,
        )
        return replace(state, **overrides)

    @property
    def region(self) -> Region:
        return by_index(self.region_index)

    def missing(self):
        """
        Returns the names of required fields that are empty.
        """
        fields = [
            ("access key", self.access_key),
            ("secret key", self.secret_key),
            ("vault", self.vault),
        ]
        return [name for name, value in fields if not value]

    def client(self):
        return build_client(
            self.access_key,
            self.secret_key,
            self.region_index,
            timeout_ms=self.timeout_ms,
            max_retries=self.max_retries,
        )

    def log_writer(self):
        if not self.logging_enabled:
            return None
        return LogWriter(self.directory, self.log_type)
