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
Disk-backed cache for capability documents.

The cache keeps a JSON index (URL -> entry) and stores the raw documents
in ``payloads/``. The index is loaded on first access and kept in memory.
Entries never expire; use `CapabilityCache.invalidate` to force a new
download.
"""

import errno
import hashlib
import json
import os
import threading
import time

from layerharvest.util.fs import ensure_directory, write_atomic, safe_filename
from layerharvest.util.lock import FileLock, NamedLocks

import logging
log = logging.getLogger(__name__)


class CacheEntry(object):
    """
    Result of one capability download.

    A negative entry (``error`` is set) records a failed download or a
    document that could not be parsed.
    """
    def __init__(self, url, location=None, status=None, error=None,
                 error_type=None, content_type=None, timestamp=None):
        self.url = url
        self.location = location
        self.status = status
        self.error = error
        self.error_type = error_type
        self.content_type = content_type
        self.timestamp = timestamp if timestamp is not None else time.time()

    @property
    def valid(self):
        return self.error is None

    def to_dict(self):
        return {
            'url': self.url,
            'location': self.location,
            'status': self.status,
            'error': self.error,
            'error_type': self.error_type,
            'content_type': self.content_type,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, d):
        return cls(
            d['url'],
            location=d.get('location'),
            status=d.get('status'),
            error=d.get('error'),
            error_type=d.get('error_type'),
            content_type=d.get('content_type'),
            timestamp=d.get('timestamp'),
        )

    def __repr__(self):
        if self.valid:
            return 'CacheEntry(%r, status=%r)' % (self.url, self.status)
        return 'CacheEntry(%r, error=%r)' % (self.url, self.error)


def payload_hash(url):
    return hashlib.md5(url.encode('utf-8')).hexdigest()


class CapabilityCache(object):
    index_filename = 'capabilities-index.json'

    def __init__(self, cache_dir, lock_timeout=60):
        self.cache_dir = cache_dir
        self.index_file = os.path.join(cache_dir, self.index_filename)
        self.lock_file = os.path.join(cache_dir, 'capabilities-index.lck')
        self.payload_dir = os.path.join(cache_dir, 'payloads')
        self.lock_timeout = lock_timeout
        self._entries = None
        self._index_lock = threading.RLock()
        self._url_locks = NamedLocks()

    def load(self):
        """
        Load the index from disk, only on the first call.
        """
        with self._index_lock:
            if self._entries is not None:
                return
            self._entries = self._read_index()
            log.debug('loaded %d capabilities cache entries from %s',
                len(self._entries), self.index_file)

    def _read_index(self):
        if not os.path.exists(self.index_file):
            return {}
        try:
            with open(self.index_file, 'rb') as f:
                index = json.loads(f.read().decode('utf-8'))
        except ValueError as ex:
            log.warning('ignoring corrupt capabilities index %s: %s', self.index_file, ex)
            return {}
        return dict((url, CacheEntry.from_dict(entry)) for url, entry in index.items())

    def lock(self, url):
        """
        Lock for all writers of `url`. Other URLs are not blocked.
        """
        return self._url_locks(url)

    def get(self, url):
        self.load()
        with self._index_lock:
            return self._entries.get(url)

    def entries(self):
        self.load()
        with self._index_lock:
            return [self._entries[url] for url in sorted(self._entries)]

    def payload_location(self, url):
        name = (safe_filename(url) or 'capabilities')[:64]
        return os.path.join(self.payload_dir, '%s_%s.xml' % (name, payload_hash(url)[:12]))

    def put(self, url, payload=None, status=None, error=None, error_type=None,
            content_type=None):
        """
        Store the result of a download. Overwrites existing entries.

        :param payload: the raw document (bytes), if any was received
        :param error: error message for failed downloads
        """
        location = None
        if payload is not None:
            location = self.payload_location(url)
            ensure_directory(location)
            write_atomic(location, payload)

        entry = CacheEntry(url, location=location, status=status, error=error,
            error_type=error_type, content_type=content_type)

        self.load()
        with self._index_lock:
            old_entry = self._update_index({url: entry}).get(url)

        if old_entry is not None and old_entry.location and not location:
            self._remove_payload(old_entry.location)

        if error:
            log.debug('stored failed capabilities request %s: %s', url, error)
        return entry

    def read_payload(self, entry):
        if not entry.location:
            return None
        try:
            with open(entry.location, 'rb') as f:
                return f.read()
        except IOError as ex:
            if ex.errno == errno.ENOENT:
                return None
            raise

    def invalidate(self, url):
        """
        Remove the entry for `url`. Returns ``True`` if there was an entry.
        """
        self.load()
        with self._index_lock:
            entry = self._update_index({url: None}).get(url)
        if entry is None:
            return False
        self._remove_payload(entry.location)
        log.info('invalidated capabilities cache for %s', url)
        return True

    def clear(self):
        self.load()
        with self._index_lock:
            entries = self._update_index(clear=True)
        for entry in entries.values():
            self._remove_payload(entry.location)

    def flush(self):
        """
        Write the index and pick up entries stored by other processes.
        """
        with self._index_lock:
            if self._entries is not None:
                self._update_index()

    close = flush

    def _remove_payload(self, location):
        if not location:
            return
        try:
            os.remove(location)
        except OSError as ex:
            if ex.errno != errno.ENOENT:
                raise

    def _update_index(self, changes=None, clear=False):
        """
        Apply `changes` (URL -> entry, ``None`` removes the URL) to the
        index on disk. The disk index is reloaded first, entries written or
        removed by other cache instances are kept that way.
        Returns the previous entries.
        """
        ensure_directory(self.index_file)
        with FileLock(self.lock_file, timeout=self.lock_timeout):
            previous = self._read_index()
            entries = {} if clear else dict(previous)
            for url, entry in (changes or {}).items():
                if entry is None:
                    entries.pop(url, None)
                else:
                    entries[url] = entry
            index = dict((url, entry.to_dict()) for url, entry in entries.items())
            write_atomic(self.index_file,
                json.dumps(index, indent=2, sort_keys=True).encode('utf-8'))
        self._entries = entries
        return previous
