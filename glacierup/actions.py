"""
User actions, dispatched by command.

Each action takes an AppState snapshot plus its own arguments and a report
callable for progress, and returns whatever the presentation layer should
show. run() is the boundary where failures become notifications.
"""

import enum
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .exceptions import GlacierUpError, LogWriteError
from .jobs import JobPoller
from .logwriter import TEXT, export_text_log, log_file
from .regions import RegionIndexError
from .state import AppState
from .uploader import Uploader

logger = logging.getLogger(__name__)


class Command(enum.Enum):
    LIST_VAULTS = "list-vaults"
    CREATE_VAULT = "create-vault"
    DELETE_ARCHIVE = "delete-archive"
    UPLOAD = "upload"
    INVENTORY = "inventory"
    RETRIEVE = "retrieve"
    EXPORT_LOG = "export-log"


@dataclass
class Notification:
    level: str
    message: str
    result: Any = None

    @property
    def ok(self) -> bool:
        return self.level != "error"


def noop(event):
    pass


def list_vaults(state: AppState, report=noop):
    return state.client().list_vaults()


def create_vault(state: AppState, name: str, report=noop):
    name = name.strip()
    if not name:
        raise ValueError("Enter the name of the vault to add.")
    location = state.client().create_vault(name)
    logger.info("Added vault %s", location)
    return name


def delete_archive(state: AppState, archive_id: str, report=noop):
    archive_id = archive_id.strip()
    if not archive_id:
        raise ValueError("Enter the Archive ID of the file to be deleted.")
    state.client().delete_archive(state.vault, archive_id)
    return archive_id


def upload(state: AppState, paths, report=noop, **kwargs):
    return Uploader(state, report=report, **kwargs).upload(list(paths))


def inventory(state: AppState, directory: Optional[str] = None, report=noop, **kwargs):
    poller = JobPoller(state.client(), **kwargs)
    return poller.inventory(state.vault, directory)


def retrieve(state: AppState, archive_id: str, destination: str, report=noop, **kwargs):
    archive_id = archive_id.strip()
    if not archive_id:
        raise ValueError("Enter the Archive ID of the file to be requested.")
    poller = JobPoller(state.client(), **kwargs)
    return poller.retrieve(state.vault, archive_id, destination)


def export_log(state: AppState, destination: str, report=noop):
    source = log_file(TEXT, state.directory)
    return export_text_log(source, os.path.abspath(destination))


ACTIONS: Dict[Command, Callable] = {
    Command.LIST_VAULTS: list_vaults,
    Command.CREATE_VAULT: create_vault,
    Command.DELETE_ARCHIVE: delete_archive,
    Command.UPLOAD: upload,
    Command.INVENTORY: inventory,
    Command.RETRIEVE: retrieve,
    Command.EXPORT_LOG: export_log,
}

# Commands that talk to a vault and so need it named
NEEDS_VAULT = {
    Command.DELETE_ARCHIVE,
    Command.UPLOAD,
    Command.INVENTORY,
    Command.RETRIEVE,
}


def dispatch(command: Command, state: AppState, *args, **kwargs):
    """
    Runs the action for command, letting exceptions through.
    """
    if command is not Command.EXPORT_LOG:
        missing = [m for m in state.missing() if m != "vault" or command in NEEDS_VAULT]
        if missing:
            raise ValueError("Missing %s." % ", ".join(missing))
    return ACTIONS[command](state, *args, **kwargs)


def run(command: Command, state: AppState, *args, **kwargs) -> Notification:
    """
    Runs the action for command and turns its outcome into a Notification.
    LogWriteError is the one failure that is not caught here.
    """
    try:
        result = dispatch(command, state, *args, **kwargs)
    except LogWriteError:
        raise
    except (GlacierUpError, ValueError, RegionIndexError, OSError) as e:
        logger.debug("%s failed", command.value, exc_info=True)
        return Notification("error", str(e))
    return Notification("info", "%s done" % command.value, result)
