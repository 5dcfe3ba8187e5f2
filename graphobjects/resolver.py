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

Resolving nodes, connections and pictures.

A `Resolver` knows the node registry and how to send requests, and with
them turns "node 123 as a User" or "the Users connected to this User" into
requests, and the responses into nodes. Every fetch has an ``_async``
variant that runs the fetch on the resolver's worker threads and returns a
`graphobjects.promise.GraphPromise`.

The module-level functions use a default resolver built on the default
node registry.

"""

import concurrent.futures
import logging
import threading
import weakref

from graphobjects.auth import AuthorizationGate
from graphobjects.errors import BadResponse, DeserializationFailure, NotRegistered
from graphobjects.http import GraphRequester, decode_json, graph_path
from graphobjects.listobject import PageOf
from graphobjects.promise import run_in_thread
from graphobjects.registry import node_tag


log = logging.getLogger('graphobjects.resolver')


class PictureSize(object):

    """The sizes a picture can be fetched at."""

    SMALL  = 'small'
    NORMAL = 'normal'
    ALBUM  = 'album'
    LARGE  = 'large'
    SQUARE = 'square'

    all = (SMALL, NORMAL, ALBUM, LARGE, SQUARE)

    @classmethod
    def param(cls, size):
        """Returns the ``type`` query parameter for `size`."""
        if size not in cls.all:
            raise ValueError('%r is not a picture size; use one of %s'
                % (size, ', '.join(cls.all)))
        return size


class Resolver(object):

    """Fetches nodes, connections and pictures.

    Optional parameter `registry` is the `NodeRegistry` to resolve node types
    and connections with; by default the registry of the built-in node
    types is used. Optional parameter `http` is the user agent to send all
    requests with, which should be compatible with `httplib2.Http` and safe
    to share between the resolver's worker threads. By default each thread
    uses its own `httplib2.Http`. A shared `http` is never closed to abort a
    cancelled fetch, so other fetches on it carry on; the cancelled fetch
    raises `Cancelled` when its request returns.

    """

    max_workers = 4
    refresh_timeout = 30

    def __init__(self, registry=None, http=None, max_workers=None,
                 refresh_timeout=None):
        self._registry = registry
        self.http = http
        if max_workers is not None:
            self.max_workers = max_workers
        if refresh_timeout is not None:
            self.refresh_timeout = refresh_timeout
        self._lock = threading.Lock()
        self._executor = None
        self._gates = weakref.WeakKeyDictionary()

    @property
    def registry(self):
        if self._registry is None:
            import graphobjects.nodes
            self._registry = graphobjects.nodes.default_registry()
        return self._registry

    def executor(self):
        with self._lock:
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix='graphobjects')
            return self._executor

    def shutdown(self, wait=True):
        """Stops the resolver's worker threads."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def requester(self, authorizer):
        """Returns a `GraphRequester` for `authorizer`.

        All requests for the same authorizer share one `AuthorizationGate`,
        so concurrent requests that find the credential expired refresh it
        only once.

        """
        with self._lock:
            try:
                gate = self._gates[authorizer]
            except KeyError:
                gate = AuthorizationGate(authorizer,
                    refresh_timeout=self.refresh_timeout)
                self._gates[authorizer] = gate
        return GraphRequester(gate, http=self.http)

    def fetch_node(self, node_id, node_type, authorizer, cancellable=None):
        """Fetches the node with id `node_id` as a `node_type` node.

        `node_type` may be a registered node class (or a subclass of one) or
        a node type tag. If the response has no ``id`` member, the node gets
        `node_id` as its id.

        """
        cls = self.registry.node_class(node_type)
        context = dict(node_id=node_id,
            operation='fetching %s %s' % (cls.__name__, node_id))
        return self._fetch_node(graph_path(node_id), node_id, cls, authorizer,
            cancellable, context)

    def fetch_me(self, authorizer, node_type='user', cancellable=None):
        """Fetches the node for the user the authorizer's credential
        belongs to."""
        cls = self.registry.node_class(node_type)
        context = dict(node_id='me', operation='fetching the current %s' % (cls.__name__,))
        return self._fetch_node('me', None, cls, authorizer, cancellable, context)

    def _fetch_node(self, path, node_id, cls, authorizer, cancellable, context):
        response, content = self.requester(authorizer).request(path,
            cancellable=cancellable, **context)
        node = cls()
        node.update_from_response(node_id, content, **context)
        return node

    def fetch_connection(self, source, target_type, authorizer, params=None,
                         cancellable=None):
        """Fetches the nodes of type `target_type` connected to the node
        `source`, in the order the server gives them.

        Optional parameter `params` are query parameters for the request,
        which override the connection's own fixed parameters.

        Raises `NotRegistered` without making any request if `source`'s node
        type has no connection to `target_type`. A response with no ``data``
        member yields no nodes.

        """
        if source.id is None:
            raise ValueError('Cannot fetch connections of %r with no id' % (source,))
        connection = self.registry.lookup_connection(node_tag(source), target_type)
        cls = self.registry.node_class(target_type)
        context = dict(node_id=source.id, connection=connection.name)

        response, content = self.requester(authorizer).request(
            graph_path(source.id, connection.name),
            params=connection.request_params(params), cancellable=cancellable,
            **context)

        data = decode_json(content, **context)
        if not isinstance(data, dict):
            raise DeserializationFailure('Connection response is not an object',
                **context)
        if 'data' not in data:
            log.warning('Response for %s of %s has no data member; treating as empty',
                connection.name, source.id)

        page = PageOf(cls)()
        try:
            page.update_from_dict(data)
        except DeserializationFailure as exc:
            raise DeserializationFailure(exc.message, **context) from exc

        nodes = []
        for node in page:
            if node is None:
                raise DeserializationFailure('Connection response has a null entry',
                    **context)
            nodes.append(connection.apply_hook(source, node))
        log.debug('Fetched %d %s of %s', len(nodes), connection.name, source.id)
        return nodes

    def fetch_picture(self, node, size, authorizer, cancellable=None):
        """Fetches the picture of `node` at the given `PictureSize`, as the
        raw bytes the server sent."""
        if not getattr(node, 'has_picture', False):
            raise NotRegistered('%s nodes have no picture' % (type(node).__name__,))
        if node.id is None:
            raise ValueError('Cannot fetch picture of %r with no id' % (node,))
        params = {'redirect': '1', 'type': PictureSize.param(size)}
        context = dict(node_id=node.id, connection='picture')

        response, content = self.requester(authorizer).request(
            graph_path(node.id, 'picture'), params=params, content_types=(),
            cancellable=cancellable, **context)

        length = response.get('content-length')
        if length is not None:
            try:
                length = int(length)
            except ValueError:
                raise BadResponse('Bad payload length %r' % (length,),
                    status=response.status, **context)
            if length < 0:
                raise BadResponse('Negative payload length (%d)' % (length,),
                    status=response.status, **context)
        if content is None:
            raise BadResponse('Response has no payload', status=response.status,
                **context)
        return bytes(content)

    def fetch_node_async(self, node_id, node_type, authorizer, callback=None,
                         cancellable=None):
        return run_in_thread(self.executor(), self.fetch_node,
            (node_id, node_type, authorizer), callback=callback,
            cancellable=cancellable, operation='fetching %s' % (node_id,))

    def fetch_me_async(self, authorizer, node_type='user', callback=None,
                       cancellable=None):
        return run_in_thread(self.executor(), self.fetch_me,
            (authorizer, node_type), callback=callback, cancellable=cancellable,
            operation='fetching me')

    def fetch_connection_async(self, source, target_type, authorizer,
                               params=None, callback=None, cancellable=None):
        return run_in_thread(self.executor(), self.fetch_connection,
            (source, target_type, authorizer, params), callback=callback,
            cancellable=cancellable,
            operation='fetching %s of %s' % (node_tag(target_type), source.id))

    def fetch_picture_async(self, node, size, authorizer, callback=None,
                            cancellable=None):
        return run_in_thread(self.executor(), self.fetch_picture,
            (node, size, authorizer), callback=callback, cancellable=cancellable,
            operation='fetching picture of %s' % (node.id,))


_default = None
_default_lock = threading.Lock()


def default_resolver():
    """Returns the resolver the module-level functions use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Resolver()
        return _default


def fetch_node(node_id, node_type, authorizer, cancellable=None):
    return default_resolver().fetch_node(node_id, node_type, authorizer,
        cancellable=cancellable)


def fetch_node_async(node_id, node_type, authorizer, callback=None, cancellable=None):
    return default_resolver().fetch_node_async(node_id, node_type, authorizer,
        callback=callback, cancellable=cancellable)


def fetch_me(authorizer, cancellable=None):
    return default_resolver().fetch_me(authorizer, cancellable=cancellable)


def fetch_me_async(authorizer, callback=None, cancellable=None):
    return default_resolver().fetch_me_async(authorizer, callback=callback,
        cancellable=cancellable)


def fetch_connection(source, target_type, authorizer, params=None, cancellable=None):
    return default_resolver().fetch_connection(source, target_type, authorizer,
        params=params, cancellable=cancellable)


def fetch_connection_async(source, target_type, authorizer, params=None,
                           callback=None, cancellable=None):
    return default_resolver().fetch_connection_async(source, target_type,
        authorizer, params=params, callback=callback, cancellable=cancellable)


def fetch_picture(node, size, authorizer, cancellable=None):
    return default_resolver().fetch_picture(node, size, authorizer,
        cancellable=cancellable)


def fetch_picture_async(node, size, authorizer, callback=None, cancellable=None):
    return default_resolver().fetch_picture_async(node, size, authorizer,
        callback=callback, cancellable=cancellable)
