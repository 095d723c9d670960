import logging
import string

# Archive descriptions may only hold printable ASCII, up to 1024 chars
DESCRIPTION_CHARS = set(string.printable) - set("\t\n\r\x0b\x0c")
DESCRIPTION_LIMIT = 1024


def human_size(num, suffix="B"):
    """
    Given a size in bytes, returns the human-readable version.
    """
    for unit in ["", "K", "M", "G", "T", "P", "E", "Z"]:
        if abs(num) < 1024.0:
            return "%3.1f %s%s" % (num, unit, suffix)
        num /= 1024.0
    return "%.1f%s%s" % (num, "Y", suffix)


def path_to_description(path: str) -> str:
    """
    Turns a local file path into an archive description the service
    accepts.
    """
    description = "".join(c for c in path if c in DESCRIPTION_CHARS)
    return description[-DESCRIPTION_LIMIT:]


def printable(text: str) -> str:
    """
    Strips anything unprintable, such as stray characters pasted from
    older logs.
    """
    return "".join(c for c in text if c.isprintable())


def percentage(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return int(done / total * 100)


class ProgressReader:
    """
    File wrapper that reports every chunk read through it, so an upload
    through the SDK can drive a progress display.

    The SDK reads the whole body once to compute its tree hash and SHA-256
    before any of it is sent, and progress is reported from that first
    pass. The count reaches the file size before the transfer starts; it
    measures the file being read, not bytes on the wire.
    """

    def __init__(self, fileobj, callback):
        self.fileobj = fileobj
        self.callback = callback
        self.seen = 0

    def read(self, size=-1):
        chunk = self.fileobj.read(size)
        # The body is read to hash it, then rewound and read again to send
        # it; only count bytes past the furthest point reached so far
        position = self.fileobj.tell()
        if position > self.seen:
            self.callback(position - self.seen)
            self.seen = position
        return chunk

    def seek(self, offset, whence=0):
        return self.fileobj.seek(offset, whence)

    def tell(self):
        return self.fileobj.tell()

    def __getattr__(self, name):
        return getattr(self.fileobj, name)


class ProgressLogger:
    def __init__(self):
        self.seen = 0

    def __call__(self, chunk_size):
        old_seen_megs = self.seen // ((1024**2) * 64)
        self.seen += chunk_size
        new_seen_megs = self.seen // ((1024**2) * 64)
        if old_seen_megs != new_seen_megs:
            logging.info(f"  {human_size(self.seen)}")
