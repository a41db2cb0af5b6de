# This file is part of the LayerHarvest project.
# Copyright (C) 2026 LayerHarvest contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
File and thread locks.
"""

import os
import threading
import time
import weakref

import zc.lockfile

__all__ = ['LockTimeout', 'FileLock', 'NamedLocks']


class LockTimeout(Exception):
    pass


class FileLock(object):
    """
    Inter-process lock based on ``zc.lockfile``.

    Retries every `step` seconds until the lock is acquired or `timeout`
    is reached.
    """
    def __init__(self, lock_file, timeout=60.0, step=0.01, remove_on_unlock=False):
        self.lock_file = lock_file
        self.timeout = timeout
        self.step = step
        self.remove_on_unlock = remove_on_unlock
        self._lock = None

    def __enter__(self):
        self.lock()
        return self

    def __exit__(self, _exc_type, _exc_value, _traceback):
        self.unlock()

    def _try_lock(self):
        return zc.lockfile.LockFile(self.lock_file)

    def lock(self):
        if self._lock is not None:
            return
        lock_dir = os.path.dirname(self.lock_file)
        if lock_dir:
            os.makedirs(lock_dir, exist_ok=True)

        stop_time = time.time() + self.timeout
        while True:
            try:
                self._lock = self._try_lock()
                return
            except zc.lockfile.LockError:
                if time.time() >= stop_time:
                    raise LockTimeout('could not lock %s within %ss' % (
                        self.lock_file, self.timeout))
                time.sleep(self.step)

    def unlock(self):
        if self._lock is None:
            return
        lock, self._lock = self._lock, None
        if self.remove_on_unlock:
            try:
                os.remove(self.lock_file)
            except OSError:
                pass
        lock.close()


class NamedLocks(object):
    """
    One re-entrant thread lock per name (e.g. per URL).

    Threads that lock different names never block each other. Locks are
    only kept while someone holds a reference to them.

    >>> locks = NamedLocks()
    >>> with locks('http://example.org'):
    ...     pass
    """
    def __init__(self):
        self._locks = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def get(self, name):
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.RLock()
            return lock

    __call__ = get
