"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
Streaming content digests and the concurrent hashing pool.

HasherImpl reads a file in fixed-size chunks through a pluggable HashAlgorithm,
so a file is never held in memory as a whole.

ConcurrentHasher runs a fixed pool of worker threads over a shared work queue.
Workers never touch shared results: each attempted file produces exactly one
outcome message on a result queue, consumed by a single aggregator (the calling
thread) which owns the digest buckets, the hashed counter and progress events.
"""

import os
import queue
import threading
from collections import defaultdict
from typing import List, Dict, Optional, NamedTuple
import logging

import xxhash

from dupescan.core.errors import FileSystemError, NotAccessibleError, FatalScanError
from dupescan.core.filesystem import LocalFileSystem
from dupescan.core.interfaces import Hasher, HashAlgorithm, FileSystem, ProgressCallback
from dupescan.core.models import ScanProgress
from dupescan.core.session import ScanSession

logger = logging.getLogger(__name__)


class HashingConfig:
    READ_CHUNK_SIZE = 1024 * 1024  # bytes per read() while streaming
    MIN_WORKERS = 4
    MAX_WORKERS = 16
    TEXT_EXTENSIONS = frozenset({
        ".txt", ".js", ".json", ".html", ".css", ".xml", ".md",
        ".py", ".java", ".c", ".cpp", ".h", ".cs",
    })

    @staticmethod
    def get_pool_size(cpu_count: Optional[int] = None) -> int:
        """clamp(2 × logical cores, MIN_WORKERS, MAX_WORKERS)"""
        cores = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
        return max(HashingConfig.MIN_WORKERS, min(HashingConfig.MAX_WORKERS, cores * 2))


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    def new(self):
        return xxhash.xxh3_128()

    def hash_text(self, text: str) -> str:
        return xxhash.xxh3_128(text.encode("utf-8")).hexdigest()


class HasherImpl(Hasher):
    """
    Computes full-content digests by streaming through any HashAlgorithm.
    """

    def __init__(
        self,
        algorithm: Optional[HashAlgorithm] = None,
        fs: Optional[FileSystem] = None,
        chunk_size: int = HashingConfig.READ_CHUNK_SIZE
    ):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.fs = fs or LocalFileSystem()
        self.chunk_size = chunk_size

    def compute_digest(self, path: str) -> str:
        """
        Hex digest of the whole file.

        Raises:
            NotAccessibleError: if the file cannot be opened or a read fails
        """
        digest = self.algorithm.new()
        with self.fs.open_read_stream(path) as stream:
            while True:
                try:
                    chunk = stream.read(self.chunk_size)
                except OSError as e:
                    raise NotAccessibleError(path, e.strerror or str(e)) from e
                if not chunk:
                    break
                digest.update(chunk)
        return digest.hexdigest()


class HashOutcome(NamedTuple):
    index: int  # position in the to-hash list
    path: str
    digest: Optional[str]  # None when the file was skipped


class _WorkerFailure(NamedTuple):
    error: BaseException


_WORKER_DONE = object()


class ConcurrentHasher:
    """
    Fixed-size pool of hashing threads with cooperative cancellation.

    The session's cancellation flag is checked before every claim; a read
    already in progress is always allowed to finish.
    """

    def __init__(self, hasher: Optional[Hasher] = None, pool_size: Optional[int] = None):
        self.hasher = hasher or HasherImpl()
        self.pool_size = max(1, pool_size) if pool_size else HashingConfig.get_pool_size()

    def hash_files(
        self,
        paths: List[str],
        session: ScanSession,
        total_files_found: int = 0,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Dict[str, List[str]]:
        """
        Hash every path and bucket the results by digest.

        Args:
            paths: Files to hash, in their deterministic order
            session: Supplies the cancellation flag and the hashed counter
            total_files_found: Walked file count, echoed in progress events
            progress_callback: Receives one ScanProgress per attempted file

        Returns:
            Dict[digest, List[path]] holding only buckets with 2+ members.
            Members keep their order from `paths`; buckets are ordered by
            their first member.

        Raises:
            FatalScanError: if a worker failed outside the per-file guard
        """
        work: "queue.Queue[tuple]" = queue.Queue()
        for item in enumerate(paths):
            work.put(item)

        results: "queue.Queue" = queue.Queue()
        abort = threading.Event()
        worker_count = min(self.pool_size, len(paths))
        if worker_count == 0:
            return {}

        logger.debug(f"Hashing {len(paths)} files with {worker_count} workers")
        threads = [
            threading.Thread(
                target=self._worker,
                args=(work, results, session, abort),
                name=f"dupescan-hasher-{i}",
                daemon=True,
            )
            for i in range(worker_count)
        ]
        for t in threads:
            t.start()

        buckets: Dict[str, List[HashOutcome]] = defaultdict(list)
        failure: Optional[BaseException] = None
        finished = 0
        try:
            while finished < worker_count:
                item = results.get()
                if item is _WORKER_DONE:
                    finished += 1
                    continue
                if isinstance(item, _WorkerFailure):
                    failure = failure or item.error
                    abort.set()
                    continue

                hashed = session.record_hashed()
                if item.digest is not None:
                    buckets[item.digest].append(item)

                if progress_callback:
                    progress_callback(ScanProgress(
                        total_files_found=total_files_found,
                        total_to_hash=len(paths),
                        hashed=hashed,
                        current_file=item.path,
                    ))
        finally:
            # Stops the pool if the aggregator itself failed (e.g. a callback raised)
            abort.set()
            for t in threads:
                t.join()

        if failure is not None:
            raise FatalScanError(f"Hashing worker failed: {failure}") from failure

        if session.is_cancelled():
            logger.debug(f"Hashing cancelled after {session.files_hashed}/{len(paths)} files")

        ordered = sorted(
            (outcomes for outcomes in buckets.values() if len(outcomes) >= 2),
            key=lambda outcomes: min(o.index for o in outcomes),
        )
        return {
            outcomes[0].digest: [o.path for o in sorted(outcomes, key=lambda o: o.index)]
            for outcomes in ordered
        }

    def _worker(
        self,
        work: "queue.Queue[tuple]",
        results: "queue.Queue",
        session: ScanSession,
        abort: threading.Event
    ) -> None:
        try:
            while not (session.is_cancelled() or abort.is_set()):
                try:
                    index, path = work.get_nowait()
                except queue.Empty:
                    break

                try:
                    digest = self.hasher.compute_digest(path)
                except FileSystemError as e:
                    logger.debug(f"Skipping unreadable file {path}: {e.reason}")
                    digest = None

                results.put(HashOutcome(index=index, path=path, digest=digest))
        except Exception as e:
            logger.exception("Unexpected error in hashing worker")
            results.put(_WorkerFailure(e))
        finally:
            results.put(_WORKER_DONE)
