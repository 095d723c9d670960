import configparser
import logging
import os
from typing import Optional

from .exceptions import ConfigDirectoryError

logger = logging.getLogger(__name__)

PROPERTIES_FILE_NAME = "SAGU.properties"
HOME_DIR = os.path.expanduser("~/.sagu")

ACCESS_KEY = "accessKey"
SECRET_KEY = "secretKey"
VAULT_KEY = "vaultKey"
LOCATION_INDEX = "locationSet"
LOG_TYPE_INDEX = "logType"

# The file is sectionless; configparser gets this header supplied in memory
SECTION = "properties"


def resolve_directory(working_dir: str, home_dir: str) -> str:
    """
    Uses the working directory if it already holds a properties file,
    otherwise the per-user directory, creating it if needed.
    """
    if os.path.isfile(os.path.join(working_dir, PROPERTIES_FILE_NAME)):
        return working_dir
    if not os.path.isdir(home_dir):
        try:
            os.mkdir(home_dir)
        except OSError as e:
            raise ConfigDirectoryError(
                "Cannot create directory '%s' for properties and logs: %s"
                % (home_dir, e)
            )
    return home_dir


class Config(object):
    """
    Config accessing class.

    Wraps the flat key=value properties file holding credentials, the
    vault name and the selected region and log type. Reads never fail:
    anything missing comes back as None (strings) or 0 (indices).
    """

    def __init__(
        self,
        directory: Optional[str] = None,
        working_dir: Optional[str] = None,
        home_dir: Optional[str] = None,
    ):
        if directory is None:
            directory = resolve_directory(
                working_dir or os.getcwd(),
                home_dir or HOME_DIR,
            )
        self.directory = directory
        self.load()

    @property
    def path(self) -> str:
        return os.path.join(self.directory, PROPERTIES_FILE_NAME)

    def load(self):
        """
        Loads the properties, treating a missing file as empty. Lines that
        cannot be parsed are skipped; the rest of the file still loads.
        """
        self.load_empty()
        try:
            with open(self.path, "r") as fh:
                contents = fh.read()
        except OSError:
            logger.debug("No properties file at %s", self.path)
            return
        try:
            self.config.read_string("[%s]\n%s" % (SECTION, contents))
        except configparser.Error as e:
            logger.warning("Skipping unreadable lines in %s: %s", self.path, e)

    def load_empty(self):
        # Bare keys with no separator are valid and read as empty values
        self.config = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            allow_no_value=True,
            comment_prefixes=("#", "!"),
        )
        self.config.optionxform = str
        self.config.add_section(SECTION)

    def save(self) -> bool:
        """
        Writes the current values back over the file they were loaded from.
        Failures are logged, not raised; the return value says whether it
        worked.
        """
        try:
            with open(self.path, "w") as fh:
                fh.write("#Properties\n")
                for key, value in self.config.items(SECTION):
                    fh.write("%s=%s\n" % (key, "" if value is None else value))
        except OSError as e:
            logger.error("Could not save properties to %s: %s", self.path, e)
            return False
        return True

    # Getters

    def get(self, key: str) -> Optional[str]:
        return self.config.get(SECTION, key, fallback=None)

    def get_index(self, key: str) -> int:
        value = self.get(key)
        if not value:
            return 0
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring non-numeric %s=%r", key, value)
            return 0

    @property
    def access_key(self) -> Optional[str]:
        return self.get(ACCESS_KEY)

    @property
    def secret_key(self) -> Optional[str]:
        return self.get(SECRET_KEY)

    @property
    def vault_key(self) -> Optional[str]:
        return self.get(VAULT_KEY)

    @property
    def location_index(self) -> int:
        return self.get_index(LOCATION_INDEX)

    @property
    def log_type_index(self) -> int:
        return self.get_index(LOG_TYPE_INDEX)

    # Setters; each returns True if the stored value changed

    def set(self, key: str, value: Optional[str]) -> bool:
        new_value = (value or "").strip()
        if (self.get(key) or "") == new_value:
            return False
        self.config.set(SECTION, key, new_value)
        return True

    def set_access_key(self, value: Optional[str]) -> bool:
        return self.set(ACCESS_KEY, value)

    def set_secret_key(self, value: Optional[str]) -> bool:
        return self.set(SECRET_KEY, value)

    def set_vault_key(self, value: Optional[str]) -> bool:
        return self.set(VAULT_KEY, value)

    def set_location_index(self, value: int) -> bool:
        return self.set(LOCATION_INDEX, str(int(value)))

    def set_log_type_index(self, value: int) -> bool:
        return self.set(LOG_TYPE_INDEX, str(int(value)))

    def __getitem__(self, key):
        return self.get(key)
