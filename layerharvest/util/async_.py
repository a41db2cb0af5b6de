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
Thread pool for running independent tasks (e.g. harvesting many data
sources) in parallel.
"""

import queue
import sys
import threading

import logging
log_system = logging.getLogger('layerharvest.system')


class AsyncResult(object):
    """
    Result of one task. `exception` is the ``sys.exc_info()`` tuple of a
    failed task, `result` is `None` in that case.
    """
    def __init__(self, result=None, exception=None):
        self.result = result
        self.exception = exception

    def __repr__(self):
        return "<AsyncResult result='%s' exception='%s'>" % (
            self.result, self.exception)


def _call(func, args):
    try:
        return AsyncResult(func(*args))
    except Exception:
        log_system.debug('exception in task %r', func, exc_info=True)
        return AsyncResult(exception=sys.exc_info())


class ThreadWorker(threading.Thread):
    def __init__(self, task_queue, result_queue):
        threading.Thread.__init__(self)
        self.daemon = True
        self.task_queue = task_queue
        self.result_queue = result_queue

    def run(self):
        while True:
            task = self.task_queue.get()
            if task is None:
                break
            task_id, func, args = task
            self.result_queue.put((task_id, _call(func, args)))


class ThreadPool(object):
    """
    Runs functions in up to `size` worker threads. Results are returned in
    the order of the arguments.

    With ``size < 2`` all functions are called in the current thread.
    """
    def __init__(self, size=4):
        self.pool_size = size

    def imap(self, func, *args, **kw):
        """
        Call `func` for each set of `args` (like the builtin `map`).

        Exceptions are raised, unless ``use_result_objects=True`` is passed.
        In that case all results are `AsyncResult` objects.
        """
        use_result_objects = kw.get('use_result_objects', False)
        tasks = list(zip(*args))
        if self.pool_size < 2 or len(tasks) < 2:
            results = (_call(func, task_args) for task_args in tasks)
        else:
            results = self._run_threaded(func, tasks)

        for result in results:
            if use_result_objects:
                yield result
            elif result.exception is not None:
                _exc_class, exc, tb = result.exception
                raise exc.with_traceback(tb)
            else:
                yield result.result

    def map(self, func, *args, **kw):
        return list(self.imap(func, *args, **kw))

    def _run_threaded(self, func, tasks):
        task_queue = queue.Queue()
        result_queue = queue.Queue()
        workers = [ThreadWorker(task_queue, result_queue)
            for _ in range(min(self.pool_size, len(tasks)))]
        for worker in workers:
            worker.start()
        for task_id, task_args in enumerate(tasks):
            task_queue.put((task_id, func, task_args))
        for _ in workers:
            task_queue.put(None)

        try:
            pending = {}
            for next_id in range(len(tasks)):
                while next_id not in pending:
                    task_id, result = result_queue.get()
                    pending[task_id] = result
                yield pending.pop(next_id)
        finally:
            # drop tasks that did not start yet, if the caller stops early
            while True:
                try:
                    task = task_queue.get_nowait()
                except queue.Empty:
                    break
                if task is None:
                    task_queue.put(None)
                    break
