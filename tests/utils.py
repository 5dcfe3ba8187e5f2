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

import logging

import httplib2
import mock

from graphobjects.auth import Authorizer, Credential


ENDPOINT = 'https://graph.facebook.com/'

JSON_ACCEPT = 'application/json, text/javascript'


def graph_request(path, token='token', accept=JSON_ACCEPT):
    """Returns the keyword arguments graphobjects should pass to
    `httplib2.Http.request()` when requesting `path`."""
    return dict(uri=ENDPOINT + path, method='GET', headers={
        'accept': accept,
        'authorization': 'Bearer %s' % (token,),
    })


def make_response(response, url):
    default_response = {
        'status':           200,
        'content-type':     'application/json',
        'content-location': url,
    }

    if isinstance(response, dict):
        response = dict(response)
        if 'content' in response:
            content = response['content']
            del response['content']
        else:
            content = ''

        status = response.get('status', 200)
        if 200 <= status < 300:
            response_info = dict(default_response)
            response_info.update(response)
        else:
            # Homg all bets are off!! Use specified headers only.
            response_info = dict(response)
    else:
        response_info = dict(default_response)
        content = response

    return httplib2.Response(response_info), content


def mock_http(req, *resps_or_contents):
    """Returns a mock `httplib2.Http` that answers requests with the given
    responses, in order."""
    mock_ua = mock.NonCallableMock(spec_set=httplib2.Http)

    if not isinstance(req, dict):
        req = dict(uri=req)

    responses = [make_response(r, req['uri']) for r in resps_or_contents]
    if len(responses) == 1:
        mock_ua.request.return_value = responses[0]
    else:
        mock_ua.request.side_effect = responses
    return mock_ua


class StubAuthorizer(Authorizer):

    """An authorizer whose credential starts out as `token` and becomes
    ``new`` when refreshed."""

    def __init__(self, token='token', expires=None, refreshed_token='new',
                 fail_refresh=False):
        self.credential = Credential(token, expires=expires)
        self.refreshed_token = refreshed_token
        self.fail_refresh = fail_refresh
        self.refreshes = 0

    def current_credential(self):
        return self.credential

    def refresh(self, timeout=None):
        self.refreshes += 1
        if self.fail_refresh:
            raise IOError('token endpoint is down')
        self.credential = Credential(self.refreshed_token)


def log():
    import sys
    logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(asctime)s %(levelname)s %(message)s")
