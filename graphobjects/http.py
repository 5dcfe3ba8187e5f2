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

Building, signing and sending graph requests.

A `GraphRequester` turns a graph path (``123``, ``123/friends``,
``123/picture``) and its query parameters into an `httplib2` request against
the authorizer's endpoint, signs it with a fresh credential, sends it, and
turns the response into either content or an exception from
`graphobjects.errors`.

"""

import http.client
import logging
import threading
from urllib.parse import quote, urlencode, urljoin

import httplib2
import simplejson as json

from graphobjects.auth import AuthorizationGate
from graphobjects.errors import (AuthFailure, BadResponse, Cancelled,
    DeserializationFailure, TransportFailure, remote_failure_for_status)


log = logging.getLogger('graphobjects.http')

_local = threading.local()


def user_agent():
    """Returns this thread's `httplib2.Http` instance.

    `httplib2.Http` objects can't be shared between threads, so each thread
    that makes requests gets its own.

    """
    try:
        return _local.http
    except AttributeError:
        _local.http = httplib2.Http()
        return _local.http


def graph_path(node_id, *segments):
    """Returns the graph path for a node id and any sub-resource names."""
    parts = [node_id] + list(segments)
    return '/'.join(quote(str(part), safe='') for part in parts)


def decode_json(content, **context):
    """Decodes a JSON response body.

    An empty body raises `BadResponse`; a body that isn't JSON raises
    `DeserializationFailure`. Bytes that aren't valid UTF-8 are decoded as
    replacement characters rather than failing the whole response.

    """
    if isinstance(content, bytes):
        content = content.decode('utf-8', 'replace')
    if content is None or not content.strip():
        raise BadResponse('Response body was empty', **context)
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise DeserializationFailure('Response body is not valid JSON: %s' % (exc,),
            **context) from exc


class GraphRequester(object):

    """Sends signed requests to the graph for an `Authorizer`.

    Parameter `authorizer` is the `Authorizer` (or an `AuthorizationGate`
    already wrapping one) whose credentials sign each request. Optional
    parameter `http` is the user agent to send requests with, and should be
    compatible with `httplib2.Http`; by default each thread uses its own
    `httplib2.Http`. Cancelling a request in flight closes the connections
    of the thread's own user agent, but never those of an `http` passed in.

    """

    content_types = ('application/json', 'text/javascript')

    # Graph API error codes meaning the access token is no good.
    auth_error_codes = (190,)

    def __init__(self, authorizer, http=None, refresh_timeout=None):
        if isinstance(authorizer, AuthorizationGate):
            self.gate = authorizer
        else:
            self.gate = AuthorizationGate(authorizer, refresh_timeout=refresh_timeout)
        self.http = http

    def user_agent(self):
        if self.http is not None:
            return self.http
        return user_agent()

    def build_url(self, path, params=None):
        endpoint = self.gate.endpoint
        # Keep the last segment of an endpoint like ".../v2.8".
        if not endpoint.endswith('/'):
            endpoint += '/'
        url = urljoin(endpoint, path)
        if params:
            url = '%s?%s' % (url, urlencode(sorted(params.items())))
        return url

    def get_request(self, path, credential, params=None, method='GET',
                    content_types=None):
        """Returns the parameters for a request for the given graph path, as
        a dictionary of keyword arguments suitable for passing to
        `httplib2.Http.request()`."""
        if content_types is None:
            content_types = self.content_types
        headers = {
            'accept': ', '.join(content_types) if content_types else '*/*',
            'authorization': credential.authorization_header(),
        }
        # Use 'uri' because httplib2.request does.
        return dict(uri=self.build_url(path, params), method=method,
            headers=headers)

    def request(self, path, params=None, content_types=None, cancellable=None,
                **context):
        """Requests a graph path and returns the `httplib2` response and the
        body content.

        Optional parameter `content_types` lists the content types the
        response may have; pass an empty tuple to accept anything. Optional
        parameter `cancellable` is a `graphobjects.promise.Cancellable`: if
        it is cancelled before the request is sent, no request is sent, and
        if it is cancelled while the request is in flight, it is aborted as
        `send()` describes. Either way `Cancelled` is raised.

        Other keyword parameters (`node_id`, `connection`, `operation`)
        describe the request in any exception raised.

        A credential that is already expired is refreshed before sending,
        and a request the server rejects as unauthorized is retried once with
        a refreshed credential. Only one refresh is attempted per request.

        """
        if content_types is None:
            content_types = self.content_types
        refreshed = False
        while True:
            if cancellable is not None and cancellable.is_cancelled():
                raise Cancelled('Cancelled before requesting %s' % (path,), **context)

            generation, credential = self.credential(context)
            if credential is None or credential.expired:
                if refreshed:
                    raise AuthFailure('Credential is still expired after refreshing',
                        **context)
                self.refresh(generation, context)
                refreshed = True
                continue

            request = self.get_request(path, credential, params=params,
                content_types=content_types)
            response, content = self.send(request, cancellable, context)

            if not refreshed and self.is_auth_rejection(response, content):
                log.debug('Credential for %s was rejected; refreshing', request['uri'])
                self.refresh(generation, context)
                refreshed = True
                continue

            self.raise_for_response(request['uri'], response, content,
                content_types, context)
            return response, content

    def credential(self, context):
        try:
            return self.gate.snapshot()
        except AuthFailure as exc:
            raise AuthFailure(exc.message, **context) from exc

    def refresh(self, generation, context):
        try:
            self.gate.refresh(generation)
        except AuthFailure as exc:
            raise AuthFailure(exc.message, **context) from exc

    def send(self, request, cancellable, context):
        """Sends a request through the user agent, translating network
        errors into `TransportFailure` (or `Cancelled`, if the request was
        cancelled).

        A request in flight is aborted on cancellation only when it's on
        this thread's own user agent. A user agent passed in as `http` may
        be carrying other requests, so it is never closed; a request on it
        that is cancelled in flight raises `Cancelled` once it returns.

        """
        ua = self.user_agent()
        handle = None
        if cancellable is not None:
            if self.http is None:
                handle = cancellable.connect(lambda: self.abort(ua))
            if cancellable.is_cancelled():
                raise Cancelled('Cancelled before requesting %s' % (request['uri'],),
                    **context)

        log.debug('%s %s', request['method'], request['uri'])
        try:
            response, content = ua.request(**request)
        except (httplib2.HttpLib2Error, http.client.HTTPException, OSError) as exc:
            if cancellable is not None and cancellable.is_cancelled():
                raise Cancelled('Cancelled while requesting %s' % (request['uri'],),
                    **context) from exc
            raise TransportFailure('%s requesting %s: %s'
                % (type(exc).__name__, request['uri'], exc), **context) from exc
        finally:
            if handle is not None:
                cancellable.disconnect(handle)

        if cancellable is not None and cancellable.is_cancelled():
            raise Cancelled('Cancelled while requesting %s' % (request['uri'],),
                **context)

        log.debug('%s %s: %d %s', request['method'], request['uri'],
            response.status, response.reason)
        return response, content

    def abort(self, ua):
        """Aborts any request in flight on the user agent `ua` by closing its
        connections."""
        close = getattr(ua, 'close', None)
        if close is not None:
            log.debug('Closing connections of %r to abort request', ua)
            close()

    def is_auth_rejection(self, response, content):
        if response.status == http.client.UNAUTHORIZED:
            return True
        if response.status == http.client.BAD_REQUEST:
            error = self.error_from_content(content)
            return error.get('code') in self.auth_error_codes
        return False

    @staticmethod
    def error_from_content(content):
        """Returns the ``error`` member of a Graph API error body, or an empty
        dictionary if the body isn't one."""
        if isinstance(content, bytes):
            content = content.decode('utf-8', 'replace')
        try:
            data = json.loads(content)
        except (TypeError, ValueError):
            return {}
        if not isinstance(data, dict) or not isinstance(data.get('error'), dict):
            return {}
        return data['error']

    def raise_for_response(self, url, response, content, content_types, context):
        """Raises the exception corresponding to an unusable response.

        Non-success statuses raise the `RemoteFailure` subclass for the
        status, carrying the server's error message if it sent one. A
        success response of the wrong content type raises `BadResponse`.

        """
        if not 200 <= response.status < 300:
            err_cls = remote_failure_for_status(response.status)
            error = self.error_from_content(content)
            message = '%d %s requesting %s' % (response.status, response.reason, url)
            if error.get('message'):
                message = '%s: %s' % (message, error['message'])
            raise err_cls(message, status=response.status,
                error_message=error.get('message'), error_type=error.get('type'),
                error_code=error.get('code'), **context)

        if not content_types:
            return
        content_type = response.get('content-type', '').split(';', 1)[0].strip()
        if content_type not in content_types:
            raise BadResponse('Bad response requesting %s: content-type %s is not an expected type'
                % (url, response.get('content-type')), status=response.status, **context)
