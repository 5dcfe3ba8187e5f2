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

The node registry: which kinds of node there are, what their schemas are,
and which connections lead from each kind of node to which other kind.

Node kinds are identified by the tag in their class's ``node_type``
attribute. Connections are keyed by the pair of source and target tags, so
asking for a user's albums is asking the registry for the ``('user',
'album')`` connection.

A registry is built once at startup by registering each node class with its
connection table, then frozen. A frozen registry is read-only and can be
shared between threads without locking.

"""

from graphobjects.errors import NotRegistered


class Connection(object):

    """An entry in a node type's connection table.

    `name` is the path segment under the source node's id where the
    connected nodes are found. `params` are fixed query parameters sent with
    every request for the connection. `hook`, if given, is called as
    ``hook(source, node)`` on each connected node as it is decoded, before
    it is returned to the caller.

    """

    def __init__(self, name, params=None, hook=None):
        self.name = name
        self.params = dict(params or {})
        self.hook = hook

    def request_params(self, params=None):
        """Returns the query parameters for a request for this connection,
        with `params` given at call time overriding the fixed ones."""
        merged = dict(self.params)
        if params:
            merged.update(params)
        return merged

    def apply_hook(self, source, node):
        if self.hook is not None:
            self.hook(source, node)
        return node

    def __repr__(self):
        return '<Connection %r params=%r>' % (self.name, self.params)


def node_tag(node_type):
    """Returns the tag for `node_type`, which can be a node class or a tag."""
    if isinstance(node_type, str):
        return node_type
    try:
        return node_type.node_type
    except AttributeError:
        raise NotRegistered('%r is not a node type' % (node_type,))


class NodeRegistry(object):

    def __init__(self):
        self._classes = {}
        self._connections = {}
        self.frozen = False

    def register(self, node_cls, connections=None):
        """Registers a node class and its connection table.

        Parameter `connections` maps target node types (classes or tags) to
        either a connection name or a `Connection`.

        """
        if self.frozen:
            raise RuntimeError('Cannot register %s with a frozen registry'
                % (node_cls.__name__,))
        tag = node_tag(node_cls)
        if tag is None:
            raise ValueError('%s has no node_type tag' % (node_cls.__name__,))
        if tag in self._classes:
            raise ValueError('Node type %r is already registered to %s'
                % (tag, self._classes[tag].__name__))

        table = {}
        for target, connection in (connections or {}).items():
            if not isinstance(connection, Connection):
                connection = Connection(connection)
            table[node_tag(target)] = connection

        self._classes[tag] = node_cls
        self._connections[tag] = table

    def freeze(self):
        """Checks every connection leads to a registered node type, and makes
        the registry read-only."""
        for source, table in self._connections.items():
            for target in table:
                if target not in self._classes:
                    raise NotRegistered('%r connection %r leads to unregistered node type %r'
                        % (source, table[target].name, target))
        self.frozen = True
        return self

    def __contains__(self, node_type):
        try:
            return node_tag(node_type) in self._classes
        except NotRegistered:
            return False

    def node_class(self, node_type):
        """Returns the class to decode nodes of `node_type` into.

        If `node_type` is a class, it is returned itself, provided its tag is
        registered; this lets callers decode into subclasses of the
        registered classes.

        """
        tag = node_tag(node_type)
        try:
            registered = self._classes[tag]
        except KeyError:
            raise NotRegistered('Node type %r is not registered' % (tag,))
        if isinstance(node_type, type) and issubclass(node_type, registered):
            return node_type
        return registered

    def schema_for(self, node_type):
        """Returns the schema (the mapping of attribute names to fields) of
        `node_type`."""
        return self.node_class(node_type).fields

    def connections_of(self, node_type):
        tag = node_tag(node_type)
        try:
            return dict(self._connections[tag])
        except KeyError:
            raise NotRegistered('Node type %r is not registered' % (tag,))

    def lookup_connection(self, source_type, target_type):
        """Returns the `Connection` from `source_type` nodes to
        `target_type` nodes.

        Raises `NotRegistered` if either type is unknown or there is no such
        connection.

        """
        source = node_tag(source_type)
        target = node_tag(target_type)
        table = self.connections_of(source)
        try:
            return table[target]
        except KeyError:
            raise NotRegistered('Node type %r has no connection to %r'
                % (source, target))
