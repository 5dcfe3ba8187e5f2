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

graphobjects is a client library for the Facebook Graph API, where
everything is a node with an id, and nodes are connected to other nodes.

graphobjects gives you typed node objects decoded from the API's JSON, and
fetches them, and the nodes connected to them, over HTTP:

    >>> from graphobjects import StaticAuthorizer, User
    >>> auth = StaticAuthorizer('my-access-token')
    >>> me = User.get_me(auth)
    >>> [friend.name for friend in me.get_friends(auth)][0:3]
    ['Ada', 'Bob', 'Cleo']

graphobjects has:

* node classes declared with fields, whose schemas decide how the API's
  JSON is decoded (unknown members are ignored)

* a registry of which kinds of node are connected to which, so fetching any
  connection is the same operation: ``fetch_connection(user, Album, auth)``

* an asynchronous variant of every fetch, run on worker threads and
  cancellable

* full HTTP support through the `httplib2` library, with access tokens from
  an `Authorizer` you supply, refreshed once when they stop working


Errors
======

Everything that can go wrong raises a `graphobjects.errors.GraphError`.
Each error says what was being fetched, and keeps the exception that caused
it, so ``graphobjects.errors.format_chain(exc)`` gives the whole story.

graphobjects never prints anything. It logs request traces through the
`logging` module, under the ``graphobjects`` logger, at ``DEBUG`` level.

"""

__version__ = '0.1.0'
__author__ = 'Six Apart Ltd.'

import logging

import graphobjects.dataobject
import graphobjects.fields as fields
from graphobjects import errors
from graphobjects.auth import Authorizer, Credential, StaticAuthorizer
from graphobjects.errors import (AuthFailure, Cancelled, DeserializationFailure,
    GraphError, NotRegistered, RemoteFailure, TransportFailure)
from graphobjects.node import GraphNode
from graphobjects.nodes import Album, Photo, User, default_registry
from graphobjects.promise import Cancellable, GraphPromise
from graphobjects.registry import Connection, NodeRegistry
from graphobjects.resolver import (PictureSize, Resolver, fetch_connection,
    fetch_connection_async, fetch_me, fetch_me_async, fetch_node,
    fetch_node_async, fetch_picture, fetch_picture_async)

__all__ = ('fields', 'errors', 'GraphNode', 'User', 'Album', 'Photo',
    'Authorizer', 'Credential', 'StaticAuthorizer', 'NodeRegistry',
    'Connection', 'default_registry', 'Resolver', 'PictureSize', 'Cancellable',
    'GraphPromise', 'GraphError', 'AuthFailure', 'TransportFailure',
    'RemoteFailure', 'DeserializationFailure', 'NotRegistered', 'Cancelled',
    'fetch_node', 'fetch_node_async', 'fetch_me', 'fetch_me_async',
    'fetch_connection', 'fetch_connection_async', 'fetch_picture',
    'fetch_picture_async')

logging.getLogger('graphobjects').addHandler(logging.NullHandler())
