"""Decompression transforms applied before a container is read as tar.

Every transform turns a raw byte stream into a stream that supports exactly
one forward read pass.  Ownership rules:

* The *raw* stream stays owned by the caller; no transform closes it.
* The returned stream is owned by the caller of :meth:`Transform.open` and
  must be closed on every exit path.

Two strategies exist.  gzip and bzip2 run in-process on top of the standard
library.  xz and zstd delegate to an external decompressor whose stdin is fed
by a background thread and whose stdout becomes the returned stream; the
process and its pipes are released together by :meth:`ProcessStream.close`.
"""

from __future__ import annotations

import bz2
import gzip
import io
import logging
import shlex
import subprocess
import tarfile
import tempfile
import threading
import zlib
from abc import ABC, abstractmethod
from typing import BinaryIO, Sequence

from tarsift.config.schema import FinderSettings
from tarsift.utils.archive import ContainerKind
from tarsift.utils.errors import DecompressionError

log = logging.getLogger(__name__)

#: Errors a stream may raise while being read.  ``tarfile.TarError`` shows up
#: when the raw stream is itself the content of a truncated tar entry.
READ_ERRORS = (OSError, EOFError, zlib.error, tarfile.TarError)

_STDERR_TAIL = 2000  # bytes of decompressor stderr kept in error messages


# ---------------------------------------------------------------------------
# Stream wrappers
# ---------------------------------------------------------------------------
class BorrowedStream(io.BufferedIOBase):
    """Read-only view over a stream owned by someone else.

    Closing the view leaves the underlying stream open, which lets the
    identity transform follow the same close-what-you-open rule as the others.
    """

    def __init__(self, raw: BinaryIO) -> None:
        super().__init__()
        self._raw = raw

    def readable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._raw.read(-1 if size is None else size)

    read1 = read


class ProcessStream(io.BufferedIOBase):
    """Stdout of a decompressor process, released together with the process.

    :meth:`close` drains whatever output remains, closes the pipes, joins the
    feeder thread and waits for the child.  A feeder read error or a non-zero
    exit status is raised from :meth:`close` as :class:`DecompressionError`.
    """

    def __init__(
        self,
        proc: subprocess.Popen,
        raw: BinaryIO,
        *,
        chunk_size: int,
        stderr_log: BinaryIO,
    ) -> None:
        super().__init__()
        self._proc = proc
        self._raw = raw
        self._chunk_size = chunk_size
        self._stderr_log = stderr_log
        self._feed_error: BaseException | None = None
        self._abandoned = False
        self._feeder = threading.Thread(
            target=self._feed,
            name=f"tarsift-feed-{proc.pid}",
            daemon=True,
        )
        self._feeder.start()

    @property
    def command(self) -> str:
        return shlex.join(str(a) for a in self._proc.args)

    # ------------------------------------------------------------------ #
    # feeder thread
    # ------------------------------------------------------------------ #
    def _feed(self) -> None:
        """Copy the raw stream into the child's stdin until EOF."""
        stdin = self._proc.stdin
        try:
            while True:
                chunk = self._raw.read(self._chunk_size)
                if not chunk:
                    break
                stdin.write(chunk)
        except BrokenPipeError:
            # The child exited or its output was abandoned; close() reports
            # the exit status.
            log.debug("%s stopped reading its input early", self.command)
        except READ_ERRORS as exc:
            self._feed_error = exc
        finally:
            try:
                stdin.close()
            except BrokenPipeError:
                log.debug("%s closed its input before the final flush", self.command)

    # ------------------------------------------------------------------ #
    # io interface
    # ------------------------------------------------------------------ #
    def readable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._proc.stdout.read(-1 if size is None else size)

    def read1(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._proc.stdout.read1(size)

    def peek(self, size: int = 0) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._proc.stdout.peek(size)

    def abandon(self) -> None:
        """Kill the child so :meth:`close` neither drains nor reports its exit.

        Used when the search was stopped and the rest of the output is not
        wanted.
        """
        self._abandoned = True
        if self._proc.poll() is None:
            self._proc.kill()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._release()
        finally:
            super().close()

    def _release(self) -> None:
        stdout = self._proc.stdout
        try:
            # Reading to EOF keeps the child from dying on a broken pipe when
            # the tar reader stopped at the end-of-archive marker.
            while not self._abandoned and stdout.read(self._chunk_size):
                pass
        finally:
            stdout.close()
            self._feeder.join()
            returncode = self._proc.wait()
            stderr = self._read_stderr()

        if self._abandoned:
            log.debug("%s abandoned (status %d)", self.command, returncode)
            return
        log.debug("%s exited with status %d", self.command, returncode)
        if self._feed_error is not None:
            raise DecompressionError(
                f"reading input for {self.command} failed: {self._feed_error}"
            ) from self._feed_error
        if returncode != 0:
            detail = f": {stderr}" if stderr else ""
            raise DecompressionError(
                f"{self.command} exited with status {returncode}{detail}"
            )

    def _read_stderr(self) -> str:
        try:
            self._stderr_log.seek(0)
            text = self._stderr_log.read().decode("utf-8", "replace").strip()
        finally:
            self._stderr_log.close()
        return text[-_STDERR_TAIL:]


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------
class Transform(ABC):
    """Adapter from a raw byte stream to a decompressed byte stream."""

    kind: ContainerKind

    @abstractmethod
    def open(self, raw: BinaryIO) -> BinaryIO:
        """Return a decompressed stream over *raw*.

        Raises:
            DecompressionError: When the input is rejected up-front or the
                decompressor cannot be started.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value})"


class IdentityTransform(Transform):
    """Plain ``.tar``: no decompression, the raw bytes are borrowed."""

    kind = ContainerKind.TAR

    def open(self, raw: BinaryIO) -> BinaryIO:
        return BorrowedStream(raw)


class _InProcessTransform(Transform):
    """Shared logic for stdlib streaming decompressors."""

    def _wrap(self, raw: BinaryIO) -> BinaryIO:
        raise NotImplementedError

    def open(self, raw: BinaryIO) -> BinaryIO:
        stream = self._wrap(raw)
        try:
            # Decoding the first byte validates the header now rather than
            # deep inside the tar reader.
            stream.peek(1)
        except READ_ERRORS as exc:
            stream.close()
            raise DecompressionError(f"invalid {self.kind.value} data: {exc}") from exc
        return stream


class GzipTransform(_InProcessTransform):
    kind = ContainerKind.GZIP

    def _wrap(self, raw: BinaryIO) -> BinaryIO:
        return gzip.GzipFile(fileobj=raw, mode="rb")


class Bzip2Transform(_InProcessTransform):
    kind = ContainerKind.BZIP2

    def _wrap(self, raw: BinaryIO) -> BinaryIO:
        return bz2.BZ2File(raw, mode="rb")


class ProcessTransform(Transform):
    """Pipe the raw stream through an external decompressor."""

    def __init__(self, kind: ContainerKind, argv: Sequence[str], *, chunk_size: int = 64 * 1024) -> None:
        self.kind = kind
        self.argv = list(argv)
        self.chunk_size = chunk_size

    def open(self, raw: BinaryIO) -> BinaryIO:
        stderr_log = tempfile.TemporaryFile()
        try:
            proc = subprocess.Popen(
                self.argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=stderr_log,
            )
        except (OSError, ValueError) as exc:
            stderr_log.close()
            raise DecompressionError(f"cannot start {shlex.join(self.argv)}: {exc}") from exc

        log.debug("started %s (pid %d)", shlex.join(self.argv), proc.pid)
        stream = ProcessStream(proc, raw, chunk_size=self.chunk_size, stderr_log=stderr_log)
        if not stream.peek(1):
            # No output at all: settle the exit status here so a rejected
            # input is reported as a decompression failure.
            stream.close()
            return io.BytesIO()
        return stream

    def __repr__(self) -> str:
        return f"ProcessTransform({self.kind.value}, {shlex.join(self.argv)!r})"


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------
def transform_for(kind: ContainerKind, settings: FinderSettings | None = None) -> Transform:
    """Return the transform that prepares a *kind* container for tar reading.

    Args:
        kind: Result of :func:`tarsift.utils.archive.classify`.
        settings: Supplies the external decompressor commands.

    Raises:
        ValueError: For :attr:`ContainerKind.NONE`.
    """
    settings = settings or FinderSettings()
    if kind is ContainerKind.TAR:
        return IdentityTransform()
    if kind is ContainerKind.GZIP:
        return GzipTransform()
    if kind is ContainerKind.BZIP2:
        return Bzip2Transform()
    if kind is ContainerKind.XZ:
        return ProcessTransform(kind, settings.xz_command, chunk_size=settings.chunk_size)
    if kind is ContainerKind.ZSTD:
        return ProcessTransform(kind, settings.zstd_command, chunk_size=settings.chunk_size)
    raise ValueError(f"{kind} is not a container kind")
