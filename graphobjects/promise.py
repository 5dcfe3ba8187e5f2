# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

Handles for operations running in the background.

Every fetch has an asynchronous variant that runs the fetch on a worker
thread and returns a `GraphPromise` right away. The promise's `finish()`
method returns the fetch's result, or raises the exception the synchronous
fetch would have raised.

Background operations can be stopped with a `Cancellable`.

"""

import concurrent.futures
import itertools
import logging
import threading

from graphobjects.errors import Cancelled


log = logging.getLogger('graphobjects.promise')


class PromiseError(Exception):
    """An exception representing a misuse of a `GraphPromise`, such as
    waiting too long for it to finish."""
    pass


class Cancellable(object):

    """A signal that an operation should be stopped.

    Operations check `is_cancelled()` before doing anything that can't be
    undone, and `connect()` handlers to be told if the signal is raised while
    they're waiting on something.

    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False
        self._handlers = {}
        self._handles = itertools.count(1)

    def cancel(self):
        """Raises the signal, calling every connected handler once.

        A handler that raises is logged and doesn't stop the others.

        """
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            handlers = list(self._handlers.values())
            self._handlers.clear()
        for handler in handlers:
            self._call(handler)

    def _call(self, handler):
        try:
            handler()
        except Exception:
            log.exception('Cancellation handler %r failed', handler)

    def is_cancelled(self):
        return self._cancelled

    def connect(self, handler):
        """Arranges for `handler` to be called when the signal is raised, and
        returns a handle for `disconnect()`.

        If the signal has already been raised, `handler` is called
        immediately.

        """
        with self._lock:
            if not self._cancelled:
                handle = next(self._handles)
                self._handlers[handle] = handler
                return handle
        self._call(handler)
        return None

    def disconnect(self, handle):
        with self._lock:
            self._handlers.pop(handle, None)


class GraphPromise(object):

    """The eventual result of a background fetch.

    `finish()` waits for the fetch and returns its result or raises its
    exception. `cancel()` raises the fetch's cancellation signal.

    """

    def __init__(self, future, cancellable, operation):
        self.future = future
        self.cancellable = cancellable
        self.operation = operation

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self.operation)

    def done(self):
        return self.future.done()

    def cancel(self):
        """Cancels the fetch.

        A fetch that hasn't started yet won't make any request. A fetch in
        flight is aborted. Either way `finish()` raises `Cancelled`.

        """
        log.debug('Cancelling %s', self.operation)
        self.cancellable.cancel()
        self.future.cancel()

    def finish(self, timeout=None):
        """Returns the result of the fetch, waiting up to `timeout` seconds
        for it if necessary."""
        try:
            return self.future.result(timeout)
        except concurrent.futures.CancelledError:
            raise Cancelled('Cancelled before %s' % (self.operation,),
                operation=self.operation)
        except concurrent.futures.TimeoutError:
            raise PromiseError('%s did not finish within %s seconds'
                % (self.operation, timeout))


def run_in_thread(executor, fn, args, callback=None, cancellable=None,
                  operation=None):
    """Runs ``fn(*args, cancellable=cancellable)`` on `executor` and returns
    a `GraphPromise` for its result.

    If `callback` is given, it is called with the promise when the fetch
    finishes, on the thread that finished it.

    """
    if cancellable is None:
        cancellable = Cancellable()
    future = executor.submit(fn, *args, cancellable=cancellable)
    promise = GraphPromise(future, cancellable, operation)
    if callback is not None:
        future.add_done_callback(lambda f: callback(promise))
    return promise
