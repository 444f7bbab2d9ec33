# -*- encoding: utf-8 -*-
# @File   : minion.py
# @Time   : 2024/11/03 16:10:58
# @Author : Kariko Lin

"""`IniStore` bound to a byte source and sink.

    ```python
    minion = Minion.open(MinionConfig(
        readable=FileStorage('app.ini'),
        writable=FileStorage('app.ini')))
    minion.set_value('window', 'size', '800', '600')
    minion.store()
    ```

With `asynchronous=True` loads and stores run on a worker thread owned by
the instance, strictly one after another. Either way the outcome is handed
to a callback, as `Ready` or `Failure`, on the thread that did the work.
Nothing is raised to the caller, and an exception from the callback is
logged rather than propagated.
"""

import logging
from dataclasses import dataclass
from queue import Queue
from threading import Lock, Thread
from typing import Callable

from .abstract import Readable, Writable
from .ini.model import IniStore
from .ini.parser import IniParser, IniSerializer

__all__ = ['Minion', 'MinionConfig', 'Ready', 'Failure', 'Result']


@dataclass(frozen=True)
class Ready:
    minion: 'Minion'


@dataclass(frozen=True)
class Failure:
    error: Exception


Result = Ready | Failure
ResultCallback = Callable[[Result], None]


def _ignore(result: Result) -> None:
    pass


@dataclass(kw_only=True)
class MinionConfig:
    readable: Readable | None = None
    writable: Writable | None = None
    asynchronous: bool = False
    # `None` leaves decoding to `chardet`.
    encoding: str | None = 'utf-8'
    callback: ResultCallback | None = None


class _SerialWorker:
    """One daemon thread draining a task queue, in submission order."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._tasks: Queue[Callable[[], None] | None] = Queue()
        self._thread: Thread | None = None
        self._lock = Lock()

    def submit(self, task: Callable[[], None]) -> None:
        with self._lock:
            if self._thread is None:
                self._thread = Thread(
                    target=self.__consume, name=self._name, daemon=True)
                self._thread.start()
            self._tasks.put(task)

    def __consume(self) -> None:
        logging.debug(f'{self._name} started.')
        while True:
            task = self._tasks.get()
            try:
                if task is None:
                    break
                task()
            except Exception:
                # a raising task shouldn't take the worker down.
                logging.exception(f'{self._name}: task failed.')
            finally:
                self._tasks.task_done()
        logging.debug(f'{self._name} stopped.')

    def join(self) -> None:
        self._tasks.join()

    def shutdown(self) -> None:
        with self._lock:
            thread, self._thread = self._thread, None
            if thread is None:
                return
            self._tasks.put(None)
        thread.join()


class Minion(IniStore):
    def __init__(self, config: MinionConfig | None = None) -> None:
        super().__init__()
        self.config = MinionConfig() if config is None else config
        self._worker = _SerialWorker(f'minion-{id(self):x}')

    @classmethod
    def open(
        cls, config: MinionConfig,
        callback: ResultCallback | None = None
    ) -> 'Minion':
        """Build an instance and load it right away."""
        ret = cls(config)
        ret.load(callback)
        return ret

    @classmethod
    def simple(cls) -> 'Minion':
        """A synchronous store with neither source nor sink."""
        return cls(MinionConfig())

    def load(self, callback: ResultCallback | None = None) -> None:
        """Parse the configured source *into* this store.

        Existing groups are kept; records already present win over the
        ones read. Without a source, this is a no-op that still reports
        `Ready`.
        """
        self.__schedule('load', self.__load, callback)

    def store(self, callback: ResultCallback | None = None) -> None:
        """Serialize this store to the configured sink."""
        self.__schedule('store', self.__store, callback)

    def join(self) -> None:
        """Block until every load / store submitted so far has finished."""
        self._worker.join()

    def close(self) -> None:
        """Finish pending work, then stop the worker."""
        self._worker.shutdown()

    def __enter__(self) -> 'Minion':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __schedule(
        self, name: str, operation: Callable[[], None],
        callback: ResultCallback | None
    ) -> None:
        callback = callback or self.config.callback or _ignore

        def task() -> None:
            try:
                operation()
            except Exception as e:
                logging.warning(
                    f'{name} of {self!r} failed: '
                    f'{type(e).__name__}: {e}')
                result: Result = Failure(e)
            else:
                result = Ready(self)
            try:
                callback(result)
            except Exception:
                logging.exception(f'{name} callback of {self!r} raised.')

        if self.config.asynchronous:
            self._worker.submit(task)
        else:
            task()

    def __load(self) -> None:
        if self.config.readable is None:
            return
        with self.config.readable.read() as fp:
            raw = fp.read()
        IniParser.loads(IniParser.decode(raw, self.config.encoding), self)

    def __store(self) -> None:
        if self.config.writable is None:
            raise OSError('No writable configured to store into.')
        buf = IniSerializer.dumps(self).encode(self.config.encoding or 'utf-8')
        with self.config.writable.write() as fp:
            fp.write(buf)
            fp.flush()
