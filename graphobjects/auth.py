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

Authorization for graph requests.

An `Authorizer` supplies the access token requests are signed with and the
base URL of the API, and can be asked to get a new token when the current one
stops working. Where tokens come from (an OAuth flow, a desktop account
service, a configuration file) is the authorizer's business.

Requests don't talk to the authorizer directly. They go through an
`AuthorizationGate`, which makes sure that when many requests discover at once
that the token needs refreshing, the authorizer is only asked to refresh it
once.

"""

import logging
import threading
import time

from graphobjects.errors import AuthFailure


log = logging.getLogger('graphobjects.auth')


class Credential(object):

    """An access token and, optionally, when it expires.

    Parameter `expires` is a Unix timestamp. A credential with no `expires`
    is considered good until the server says otherwise.

    """

    def __init__(self, token, expires=None):
        self.token = token
        self.expires = expires

    @property
    def expired(self):
        if not self.token:
            return True
        if self.expires is None:
            return False
        return time.time() >= self.expires

    def authorization_header(self):
        return 'Bearer %s' % (self.token,)

    def __repr__(self):
        # Don't put the token itself in logs.
        return '<Credential expires=%r>' % (self.expires,)


class Authorizer(object):

    """The interface graphobjects uses to get access tokens.

    Subclasses must implement `current_credential()` and `refresh()`. Both
    may be called from several threads at once.

    """

    endpoint = 'https://graph.facebook.com/'

    def current_credential(self):
        """Returns the `Credential` requests should be made with now."""
        raise NotImplementedError

    def refresh(self, timeout=None):
        """Obtains a new credential, waiting up to `timeout` seconds.

        Raise an exception (or return ``False``) if no new credential could
        be had.

        """
        raise NotImplementedError


class StaticAuthorizer(Authorizer):

    """An `Authorizer` for an access token you already have.

    A static token can't be refreshed, so once the server rejects it requests
    fail with `AuthFailure`.

    """

    def __init__(self, token, endpoint=None, expires=None):
        self.credential = Credential(token, expires=expires)
        if endpoint is not None:
            self.endpoint = endpoint

    def current_credential(self):
        return self.credential

    def refresh(self, timeout=None):
        raise AuthFailure('Cannot refresh a static access token')


class AuthorizationGate(object):

    """Shares one `Authorizer` among concurrent requests.

    Reading the current credential never blocks. Refreshing is serialized:
    each refresh bumps a generation counter, and a request that asks for a
    refresh of a generation that has already been replaced just picks up the
    result of the refresh that replaced it instead of starting another one.

    """

    def __init__(self, authorizer, refresh_timeout=None):
        self.authorizer = authorizer
        self.refresh_timeout = refresh_timeout
        self._lock = threading.Lock()
        self._generation = 0
        self._last_error = None

    @property
    def endpoint(self):
        return self.authorizer.endpoint

    def snapshot(self):
        """Returns the current generation and credential, for passing back to
        `refresh()` if the credential turns out to be no good."""
        generation = self._generation
        try:
            credential = self.authorizer.current_credential()
        except AuthFailure:
            raise
        except Exception as exc:
            raise AuthFailure('Could not get a credential from %s: %s'
                % (type(self.authorizer).__name__, exc)) from exc
        return generation, credential

    def refresh(self, generation):
        """Refreshes the credential seen at `generation`.

        If another request already refreshed it, waits for that refresh and
        shares its outcome: returns if it worked, raises `AuthFailure` if it
        didn't.

        """
        with self._lock:
            if generation != self._generation:
                log.debug('Credential generation %d already refreshed, now %d',
                    generation, self._generation)
                if self._last_error is not None:
                    raise AuthFailure('Could not refresh credential: %s'
                        % (self._last_error,)) from self._last_error
                return

            log.debug('Refreshing credential generation %d', generation)
            error = None
            try:
                ok = self.authorizer.refresh(timeout=self.refresh_timeout)
            except Exception as exc:
                error = exc
            else:
                if ok is False:
                    error = AuthFailure('%s declined to refresh the credential'
                        % (type(self.authorizer).__name__,))

            self._generation += 1
            self._last_error = error

        if error is not None:
            if isinstance(error, AuthFailure):
                raise error
            raise AuthFailure('Could not refresh credential: %s' % (error,)) from error
