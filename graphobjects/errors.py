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

Exceptions raised by graphobjects when fetching nodes, connections and
pictures from the graph.

Every failure is a `GraphError`. Failures carry the operation that was being
attempted and the node id and connection name involved, and keep the lower
level exception that caused them as their ``__cause__``, so a caller can
print the whole story with `format_chain()`.

"""

import http.client


class GraphError(Exception):

    """Base class for every error graphobjects raises."""

    def __init__(self, message, node_id=None, connection=None, operation=None):
        super(GraphError, self).__init__(message)
        self.message = message
        self.node_id = node_id
        self.connection = connection
        self.operation = operation

    def context(self):
        """Returns a short description of what was being attempted, such as
        ``fetching friends of 123``."""
        if self.operation is not None:
            return self.operation
        if self.connection is not None and self.node_id is not None:
            return 'fetching %s of %s' % (self.connection, self.node_id)
        if self.node_id is not None:
            return 'fetching %s' % (self.node_id,)
        return None

    def __str__(self):
        context = self.context()
        if context is None or self.message.startswith(context):
            return self.message
        return '%s: %s' % (context, self.message)


class AuthFailure(GraphError):
    """The authorizer could not supply or refresh a credential."""
    pass


class TransportFailure(GraphError):
    """The request could not be completed at the network level."""
    pass


class RemoteFailure(GraphError):

    """The server answered, but with an error.

    When the server sent a Graph API error body, its ``message``, ``type``
    and ``code`` members are available as `error_message`, `error_type` and
    `error_code`.

    """

    def __init__(self, message, status=None, error_message=None,
                 error_type=None, error_code=None, **kwargs):
        super(RemoteFailure, self).__init__(message, **kwargs)
        self.status = status
        self.error_message = error_message
        self.error_type = error_type
        self.error_code = error_code


class NotFound(RemoteFailure):
    """The server reports that the requested node or connection does not
    exist (HTTP 404)."""
    pass


class Unauthorized(RemoteFailure):
    """The server rejected the request's credential (HTTP 401).

    A request that gets this response once is retried with a refreshed
    credential. It is only raised when the retry is rejected too.

    """
    pass


class Forbidden(RemoteFailure):
    """The server reports that the authorized user may not see the requested
    resource (HTTP 403)."""
    pass


class RequestError(RemoteFailure):
    """The server reports an error in the request (HTTP 400)."""
    pass


class ServerError(RemoteFailure):
    """The server reports an unexpected error (HTTP 5xx)."""
    pass


class BadResponse(RemoteFailure):
    """The server answered with something we can't use: an unexpected status,
    the wrong content type, an empty body or a bad length."""
    pass


class DeserializationFailure(GraphError):
    """The response body was not valid JSON, or not shaped as expected."""
    pass


class NotRegistered(GraphError):

    """A node type or connection was asked for that the registry doesn't
    know about.

    This is a configuration error in the calling program. It is raised before
    any request is made and retrying will not help.

    """
    pass


class Cancelled(GraphError):
    """The operation was cancelled by the caller."""
    pass


remote_failures_by_status = {
    http.client.BAD_REQUEST:  RequestError,
    http.client.UNAUTHORIZED: Unauthorized,
    http.client.FORBIDDEN:    Forbidden,
    http.client.NOT_FOUND:    NotFound,
}


def remote_failure_for_status(status):
    """Returns the `RemoteFailure` subclass to raise for an HTTP error
    status."""
    try:
        return remote_failures_by_status[status]
    except KeyError:
        pass
    if status >= 500:
        return ServerError
    return BadResponse


def format_chain(exc):
    """Returns the context chain of an exception as one line of text.

    Each exception in the ``__cause__`` chain of `exc` contributes one
    ``: ``-separated segment, outermost first.

    """
    segments = []
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        text = str(exc) or type(exc).__name__
        segments.append(text)
        exc = exc.__cause__
    return ': '.join(segments)
