import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Generic, NamedTuple, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _CacheEntry(NamedTuple):
    value: Any
    loaded_at: float


class SingleFlightCache(Generic[T]):
    """
    单值 TTL 缓存，并发刷新时只调用一次 loader

    - 缓存新鲜时直接返回，不加锁
    - 缓存缺失或过期时，第一个到达的调用方负责加载，其余调用方等待同一个 Future
    - 加载失败不缓存，异常传递给本轮所有等待方，下一次调用重新加载
    """

    def __init__(
        self,
        loader: Callable[[], T],
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._loader = loader
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[_CacheEntry] = None
        self._inflight: Optional[Future] = None
        logger.debug("SingleFlightCache initialized with TTL=%s seconds", ttl)

    def _is_fresh(self, entry: Optional[_CacheEntry]) -> bool:
        if entry is None:
            return False
        return self._clock() - entry.loaded_at < self.ttl

    def get(self) -> T:
        # 快速路径：一次读取拿到 (value, loaded_at)，不会看到半更新状态
        entry = self._entry
        if self._is_fresh(entry):
            logger.debug("Cache hit")
            return entry.value

        with self._lock:
            entry = self._entry
            if self._is_fresh(entry):
                logger.debug("Cache hit (after lock)")
                return entry.value

            future = self._inflight
            is_leader = future is None
            if is_leader:
                future = Future()
                self._inflight = future

        if not is_leader:
            logger.debug("Cache refresh in flight, waiting for result")
            return future.result()

        logger.debug("Cache miss or expired, loading value")
        try:
            value = self._loader()
        except BaseException as e:
            with self._lock:
                self._inflight = None
            future.set_exception(e)
            raise

        with self._lock:
            self._entry = _CacheEntry(value, self._clock())
            self._inflight = None
        future.set_result(value)
        logger.debug("Cache set, expires in %s seconds", self.ttl)
        return value
