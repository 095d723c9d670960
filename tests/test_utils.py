import io
import logging

from glacierup.utils import ProgressLogger, ProgressReader, human_size, path_to_description, percentage, printable


def test_human_size():
    assert human_size(512) == "512.0 B"
    assert human_size(1536) == "1.5 KB"


def test_description_is_printable_ascii():
    assert path_to_description("/home/zoë/tab\there.zip") == "/home/zo/tabhere.zip"


def test_description_keeps_the_end_of_long_paths():
    path = "/" + "d" * 2000 + "/file.zip"
    description = path_to_description(path)
    assert len(description) == 1024
    assert description.endswith("/file.zip")


def test_printable():
    assert printable("ABC\x00\r\nDEF") == "ABCDEF"


def test_percentage():
    assert percentage(1, 3) == 33
    assert percentage(3, 3) == 100
    assert percentage(0, 0) == 100


def test_progress_reader_counts_each_byte_once():
    seen = []
    reader = ProgressReader(io.BytesIO(b"x" * 100), seen.append)
    reader.read(60)
    reader.seek(0)
    reader.read()
    reader.seek(0)
    reader.read(10)
    assert sum(seen) == 100
    assert seen == [60, 40]


def test_progress_reader_reports_from_first_pass():
    # Hashing reads the body before it is sent; the send pass adds nothing
    seen = []
    reader = ProgressReader(io.BytesIO(b"x" * 100), seen.append)
    reader.read()
    reader.seek(0)
    reader.read(50)
    reader.read(50)
    assert seen == [100]


def test_progress_logger_logs_every_64_megabytes(caplog):
    progress = ProgressLogger()
    with caplog.at_level(logging.INFO):
        progress(32 * 1024**2)
        progress(40 * 1024**2)
        progress(1024)
    assert [r.getMessage() for r in caplog.records] == ["  72.0 MB"]
