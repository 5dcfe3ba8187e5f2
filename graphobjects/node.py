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

`GraphNode` is the base class of every kind of node in the graph.

A node has an opaque string `id` and a `node_type` tag naming its kind. The
rest of its attributes are declared as fields by its subclass. Nodes are
either decoded from a response or fetched by id; a node's id never changes
once it is set.

"""

import graphobjects.fields as fields
import graphobjects.resolver
from graphobjects import errors
from graphobjects.dataobject import DataObject
from graphobjects.http import decode_json


class GraphNode(DataObject):

    """A node in the graph.

    Subclasses set `node_type` to their tag and declare their fields. The
    exceptions from `graphobjects.errors` are also available as attributes
    of node classes, so you can write ``except User.NotFound``.

    Methods that fetch take an optional `resolver` keyword argument; without
    one, the default resolver is used.

    """

    node_type = None
    has_picture = False

    id = fields.Identifier()

    NotFound = errors.NotFound
    Unauthorized = errors.Unauthorized
    Forbidden = errors.Forbidden
    RequestError = errors.RequestError
    ServerError = errors.ServerError
    BadResponse = errors.BadResponse

    def update_from_dict(self, data):
        current = self.__dict__.get('id')
        super(GraphNode, self).update_from_dict(data)
        if current is not None:
            if self.id is not None and self.id != current:
                self.__dict__['id'] = current
                raise errors.DeserializationFailure('Data for %s %s has a different id %r'
                    % (type(self).__name__, current, data.get('id')), node_id=current)
            self.__dict__['id'] = current

    def update_from_response(self, fallback_id, content, **context):
        """Fills the node from the body of a response to a request for it.

        The body must be a JSON object. If it has no ``id`` member, the node
        takes `fallback_id` as its id.

        """
        data = decode_json(content, **context)
        if not isinstance(data, dict):
            raise errors.DeserializationFailure('Response body is not a JSON object',
                **context)
        try:
            self.update_from_dict(data)
        except errors.DeserializationFailure as exc:
            raise errors.DeserializationFailure(exc.message, **context) from exc
        if self.id is None and fallback_id is not None:
            self.id = fallback_id

    @staticmethod
    def _resolver(resolver):
        if resolver is None:
            return graphobjects.resolver.default_resolver()
        return resolver

    @classmethod
    def get(cls, node_id, authorizer, resolver=None, cancellable=None):
        """Fetches the node of this class with the given id."""
        return cls._resolver(resolver).fetch_node(node_id, cls, authorizer,
            cancellable=cancellable)

    @classmethod
    def get_async(cls, node_id, authorizer, callback=None, resolver=None,
                  cancellable=None):
        return cls._resolver(resolver).fetch_node_async(node_id, cls,
            authorizer, callback=callback, cancellable=cancellable)

    def get_connection(self, target_type, authorizer, params=None,
                       resolver=None, cancellable=None):
        """Fetches the nodes of `target_type` connected to this node."""
        return self._resolver(resolver).fetch_connection(self, target_type,
            authorizer, params=params, cancellable=cancellable)

    def get_connection_async(self, target_type, authorizer, params=None,
                             callback=None, resolver=None, cancellable=None):
        return self._resolver(resolver).fetch_connection_async(self,
            target_type, authorizer, params=params, callback=callback,
            cancellable=cancellable)
