"""
Streaming name search through nested tar containers.

:class:`Finder` is the public entry-point.  It compiles the pattern once,
starts one worker per root path and hands every :class:`Result` to the
caller through a bounded queue:

.. code-block:: python

    finder = Finder(r"\\.conf$")
    finder.start(["/backups/host1.tar.gz", "/backups/host2.tar.zst"])
    for res in finder.results():
        print(res)

Inside a worker, :class:`Descender` walks a single root depth-first.  Each
container is read strictly sequentially in tar order; nested containers are
opened directly on the parent's entry stream, so nothing is extracted to
disk and no container is ever held in memory as a whole.

Per-branch problems (unreadable root, bad compression, corrupt tar header)
become failure results and never stop sibling branches or other roots.
"""

from __future__ import annotations

import contextlib
import logging
import os
import queue
import tarfile
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO, Callable, Iterable, Iterator, List, Optional

from tarsift.config.schema import FinderSettings
from tarsift.io.decompress import READ_ERRORS, transform_for
from tarsift.utils.archive import classify
from tarsift.utils.errors import (
    ContainerReadError,
    DecompressionError,
    OpenError,
    TraversalStopped,
)
from tarsift.utils.matching import NameMatcher

from .types import PathChain, Result

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────
_DONE = object()            # completion sentinel, enqueued at most once
_POLL_SECONDS = 0.1         # how often a blocked queue call re-checks state
_EMPTY_STREAM = "empty file"  # tarfile's message when no header block exists


def _show(chain: PathChain) -> str:
    return " > ".join(chain)


# ─────────────────────────────────────────────────────────────────────────────
# Recursive descent over one stream
# ─────────────────────────────────────────────────────────────────────────────
class Descender:
    """Depth-first walk of one stream and every container nested inside it.

    Args:
        matcher: Predicate applied to the terminal name of each chain.
        emit: Callable receiving each :class:`Result`.  It may raise
            :class:`TraversalStopped` to unwind the walk.
        settings: Supplies the external decompressor commands.
        stopped: Optional event checked between tar entries.
    """

    def __init__(
        self,
        matcher: NameMatcher,
        emit: Callable[[Result], None],
        *,
        settings: FinderSettings | None = None,
        stopped: threading.Event | None = None,
    ) -> None:
        self._matcher = matcher
        self._emit = emit
        self._settings = settings or FinderSettings()
        self._stopped = stopped or threading.Event()

    def report_failure(self, chain: PathChain, error: BaseException) -> None:
        log.warning("%s: %s", _show(chain), error)
        self._emit(Result.failure(chain, error))

    def descend(self, stream: Optional[BinaryIO], chain: PathChain) -> None:
        """Report *chain* if it matches, then recurse when it is a container.

        *stream* stays owned by the caller.  ``None`` marks an entry without
        content (directory, link, device); it is match-checked only.
        """
        name = chain[-1]
        if self._matcher.matches(name):
            self._emit(Result.match(chain))

        kind = classify(name)
        if not kind.is_container or stream is None:
            return

        log.debug("descending into %s (%s)", _show(chain), kind.value)
        try:
            reader = transform_for(kind, self._settings).open(stream)
        except DecompressionError as exc:
            self.report_failure(chain, exc)
            return

        try:
            with reader:
                try:
                    self._walk(reader, chain)
                except TraversalStopped:
                    # Remaining output is not wanted; skip draining it.
                    abandon = getattr(reader, "abandon", None)
                    if abandon is not None:
                        abandon()
                    raise
        except DecompressionError as exc:
            # Raised while releasing an external decompressor.
            self.report_failure(chain, exc)

    def _walk(self, reader: BinaryIO, chain: PathChain) -> None:
        """Visit every tar entry of *reader* in archive order."""
        try:
            archive = tarfile.open(fileobj=reader, mode="r|")
        except tarfile.ReadError as exc:
            if str(exc) == _EMPTY_STREAM:
                log.debug("%s is empty", _show(chain))
            else:
                self.report_failure(chain, _container_error(exc))
            return
        except READ_ERRORS as exc:
            self.report_failure(chain, _container_error(exc))
            return

        with archive:
            while True:
                if self._stopped.is_set():
                    raise TraversalStopped(_show(chain))
                try:
                    member = archive.next()
                except READ_ERRORS as exc:
                    self.report_failure(chain, _container_error(exc))
                    return
                if member is None:
                    return

                child = chain + (member.name,)
                if not member.isfile():
                    self.descend(None, child)
                    continue
                with archive.extractfile(member) as content:
                    self.descend(content, child)


def _container_error(exc: BaseException) -> ContainerReadError:
    err = ContainerReadError(f"cannot read tar stream: {exc}")
    err.__cause__ = exc
    return err


# ─────────────────────────────────────────────────────────────────────────────
# Root dispatcher
# ─────────────────────────────────────────────────────────────────────────────
class Finder:
    """Search many root paths concurrently and stream the results back.

    Args:
        pattern: Regular expression searched in every entry name.
        settings: Runtime settings; defaults to :class:`FinderSettings`.
        ignore_case: Overrides ``settings.ignore_case`` when not ``None``.

    Raises:
        PatternError: When *pattern* does not compile.  Nothing has started
            at that point.
    """

    def __init__(
        self,
        pattern: str,
        *,
        settings: FinderSettings | None = None,
        ignore_case: bool | None = None,
    ) -> None:
        self.settings = settings or FinderSettings()
        if ignore_case is None:
            ignore_case = self.settings.ignore_case
        self.matcher = NameMatcher(pattern, ignore_case=ignore_case)

        self._queue: queue.Queue = queue.Queue(maxsize=self.settings.queue_size)
        self._stopped = threading.Event()
        self._done = threading.Event()
        self._drained = False
        self._started = False
        self._lock = threading.Lock()
        self._dispatcher: threading.Thread | None = None

    # ------------------------------------------------------------------ #
    # producer side
    # ------------------------------------------------------------------ #
    def start(self, roots: Iterable[str | os.PathLike]) -> None:
        """Launch one descent per root; returns immediately.

        Raises:
            RuntimeError: When called more than once.
        """
        with self._lock:
            if self._started:
                raise RuntimeError("Finder.start() may only be called once")
            self._started = True

        paths = [os.fspath(r) for r in roots]
        log.debug("searching %d root(s) for %r", len(paths), self.matcher.pattern)
        self._dispatcher = threading.Thread(
            target=self._dispatch,
            args=(paths,),
            name="tarsift-dispatch",
            daemon=True,
        )
        self._dispatcher.start()

    def _dispatch(self, paths: List[str]) -> None:
        """Run every root on the pool, then close the queue exactly once."""
        workers = len(paths)
        if self.settings.max_workers is not None:
            workers = min(workers, self.settings.max_workers)
        try:
            with ThreadPoolExecutor(
                max_workers=max(1, workers), thread_name_prefix="tarsift"
            ) as pool:
                for path in paths:
                    pool.submit(self._search_root, path)
            # Leaving the block waits for every descent.
        finally:
            self._close()

    def _search_root(self, path: str) -> None:
        chain: PathChain = (path,)
        descender = Descender(
            self.matcher, self._emit, settings=self.settings, stopped=self._stopped
        )
        try:
            try:
                fh = open(path, "rb")
            except OSError as exc:
                err = OpenError(f"cannot open {path}: {exc.strerror or exc}")
                err.__cause__ = exc
                descender.report_failure(chain, err)
                return
            with fh:
                descender.descend(fh, chain)
        except TraversalStopped:
            log.debug("search of %s stopped", path)
        except Exception as exc:  # pragma: no cover – visible error path
            log.exception("Unexpected failure while searching %s", path)
            with contextlib.suppress(TraversalStopped):
                self._emit(Result.failure(chain, exc))

    def _emit(self, result: Result) -> None:
        """Enqueue *result*, waiting for the consumer unless stopped."""
        while True:
            if self._stopped.is_set():
                raise TraversalStopped(result.display())
            try:
                self._queue.put(result, timeout=_POLL_SECONDS)
                return
            except queue.Full:
                continue

    def _close(self) -> None:
        while not self._stopped.is_set():
            try:
                self._queue.put(_DONE, timeout=_POLL_SECONDS)
                break
            except queue.Full:
                continue
        self._done.set()
        log.debug("search finished")

    # ------------------------------------------------------------------ #
    # consumer side
    # ------------------------------------------------------------------ #
    def results(self) -> Iterator[Result]:
        """Yield results until every descent has finished.

        Leaving the loop early (``break`` or an exception) calls
        :meth:`stop` so no producer waits forever.

        Raises:
            RuntimeError: When :meth:`start` has not been called.
        """
        if not self._started:
            raise RuntimeError("Finder.start() must be called before results()")
        if self._drained:
            return
        try:
            while True:
                try:
                    item = self._queue.get(timeout=_POLL_SECONDS)
                except queue.Empty:
                    # A stopped search finishes without the sentinel.
                    if self._done.is_set() and self._queue.empty():
                        self._drained = True
                        return
                    continue
                if item is _DONE:
                    self._drained = True
                    return
                yield item
        finally:
            if not self._drained:
                self.stop()

    __iter__ = results

    def stop(self) -> None:
        """Ask every descent to finish at the next entry boundary."""
        self._stopped.set()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the dispatcher has finished; ``False`` on timeout."""
        return self._done.wait(timeout)


# ─────────────────────────────────────────────────────────────────────────────
# Convenience wrappers
# ─────────────────────────────────────────────────────────────────────────────
def search(
    roots: Iterable[str | os.PathLike],
    pattern: str,
    *,
    settings: FinderSettings | None = None,
    ignore_case: bool | None = None,
) -> Iterator[Result]:
    """Compile *pattern*, start searching *roots* and return the result iterator.

    The pattern is compiled before this function returns, so a
    :class:`PatternError` surfaces here rather than on first iteration.
    """
    finder = Finder(pattern, settings=settings, ignore_case=ignore_case)
    finder.start(roots)
    return finder.results()


def find_matches(
    roots: Iterable[str | os.PathLike],
    pattern: str,
    *,
    settings: FinderSettings | None = None,
    ignore_case: bool | None = None,
) -> List[Result]:
    """Return every result (matches and failures) as a list."""
    return list(search(roots, pattern, settings=settings, ignore_case=ignore_case))
