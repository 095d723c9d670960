import csv
import json
import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Tuple

from .exceptions import ExportError, LogWriteError

logger = logging.getLogger(__name__)

TEXT, CSV, YAML, XML = range(4)
ERRORS = 4

# Log type index -> (display name, file name)
LOG_TYPES: Dict[int, Tuple[str, str]] = {
    TEXT: ("Text", "Glacier.log"),
    CSV: ("CSV", "Glacier.csv"),
    YAML: ("YAML", "Glacier.yaml"),
    XML: ("XML", "Glacier.xml"),
    ERRORS: ("Errors", "GlacierErrors.log"),
}

CSV_HEADER = ["ArchiveID", "Vault", "Location", "Date", "Length", "Hash", "File"]

# Lines per record in the text log
RECORD_LINES = 3


def log_file(log_type: int, directory: str) -> str:
    try:
        return os.path.join(directory, LOG_TYPES[log_type][1])
    except KeyError:
        raise ValueError("Unknown log type %s" % log_type)


@dataclass
class LogEntry:
    vault: str
    region: str
    path: str
    length: int
    checksum: str
    archive_id: str
    date: datetime = field(default_factory=datetime.now)

    def text_lines(self):
        return [
            "| ArchiveID: %s " % self.archive_id,
            "| Vault: %s | Location: %s | Date: %s "
            % (self.vault, self.region, self.date.strftime("%Y-%m-%d %H:%M:%S")),
            "| Length: %s | Hash: %s | File: %s "
            % (self.length, self.checksum, self.path),
        ]

    def csv_row(self):
        return [
            self.archive_id,
            self.vault,
            self.region,
            self.date.isoformat(timespec="seconds"),
            self.length,
            self.checksum,
            self.path,
        ]

    def yaml_item(self):
        # JSON strings are valid YAML scalars and keep paths safely quoted
        return (
            "- archive_id: {}\n"
            "  vault: {}\n"
            "  location: {}\n"
            "  date: {}\n"
            "  length: {}\n"
            "  hash: {}\n"
            "  file: {}\n"
        ).format(
            json.dumps(self.archive_id),
            json.dumps(self.vault),
            json.dumps(self.region),
            self.date.isoformat(timespec="seconds"),
            self.length,
            json.dumps(self.checksum),
            json.dumps(self.path),
        )

    def xml_element(self):
        element = ET.Element("archive")
        for tag, value in zip(CSV_HEADER, self.csv_row()):
            ET.SubElement(element, tag).text = str(value)
        return ET.tostring(element, encoding="unicode")


class LogWriter:
    """
    Appends upload records to the log selected by log type. The log is the
    only place archive IDs are kept, so every failure here is raised as
    LogWriteError.
    """

    def __init__(self, directory: str, log_type: int = TEXT):
        if log_type == ERRORS:
            raise ValueError("Upload records cannot go to the error log")
        self.directory = directory
        self.log_type = log_type
        self.path = log_file(log_type, directory)

    def __repr__(self):
        return f"LogWriter: {self.path}"

    def append(
        self,
        vault: str,
        region: str,
        path: str,
        length: int,
        checksum: str,
        archive_id: str,
    ) -> LogEntry:
        entry = LogEntry(vault, region, path, length, checksum, archive_id)
        try:
            if self.log_type == CSV:
                new_file = not os.path.exists(self.path)
                with open(self.path, "a", newline="", encoding="utf-8") as fh:
                    writer = csv.writer(fh)
                    if new_file:
                        writer.writerow(CSV_HEADER)
                    writer.writerow(entry.csv_row())
            elif self.log_type == YAML:
                with open(self.path, "a", encoding="utf-8") as fh:
                    fh.write(entry.yaml_item())
            elif self.log_type == XML:
                with open(self.path, "a", encoding="utf-8") as fh:
                    fh.write(entry.xml_element() + "\n")
            else:
                with open(self.path, "a", encoding="utf-8") as fh:
                    for line in entry.text_lines():
                        fh.write(line + "\n")
        except OSError as e:
            raise LogWriteError("There was an error writing to the log %s: %s" % (self.path, e))
        logger.debug("Logged archive %s for %s", archive_id, path)
        return entry

    def append_error(self, path: str, message: str) -> None:
        append_error(self.directory, path, message)


def append_error(directory: str, path: str, message: str) -> None:
    """
    Adds a timestamped line about a failed upload to the error log.
    """
    error_path = log_file(ERRORS, directory)
    try:
        with open(error_path, "a", encoding="utf-8") as fh:
            fh.write('\n%s: "%s" *ERROR* %s\n' % (datetime.now().ctime(), path, message))
    except OSError as e:
        raise LogWriteError("There was an error writing to the log %s: %s" % (error_path, e))


def export_text_log(source: str, destination: str) -> int:
    """
    Copies the text log to destination in CRLF-terminated three-line
    records, padding a short final record. Returns the number of records.
    """
    try:
        with open(source, "r", encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except OSError as e:
        raise ExportError("Unable to read log %s: %s" % (source, e))
    count = 0
    try:
        with open(destination, "w", newline="", encoding="utf-8") as out:
            for start in range(0, len(lines), RECORD_LINES):
                record = lines[start : start + RECORD_LINES]
                record += [""] * (RECORD_LINES - len(record))
                for line in record:
                    out.write(line + "\r\n")
                count += 1
    except OSError as e:
        raise ExportError("Unable to write %s: %s" % (destination, e))
    return count
