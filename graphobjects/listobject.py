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

Pages of connected nodes.

The graph wraps the nodes of a connection in an object whose ``data`` member
holds the list of them. A `PageObject` decodes such an object, and `PageOf()`
makes the `PageObject` subclass whose entries decode into a particular node
class.

"""

import threading

import graphobjects.fields as fields
from graphobjects.dataobject import DataObject


class SequenceProxy(object):

    """An abstract class implementing the sequence protocol by proxying it to
    the instance's ``data`` attribute."""

    def make_sequence_method(methodname):
        """Makes a new function that proxies calls to `methodname` to the
        `data` attribute of the instance on which the function is called as
        an instance method."""
        def seqmethod(self, *args, **kwargs):
            return getattr(self.data, methodname)(*args, **kwargs)
        seqmethod.__name__ = methodname
        return seqmethod

    __len__      = make_sequence_method('__len__')
    __getitem__  = make_sequence_method('__getitem__')
    __iter__     = make_sequence_method('__iter__')
    __reversed__ = make_sequence_method('__reversed__')
    __contains__ = make_sequence_method('__contains__')

    del make_sequence_method


def empty_list(obj):
    return []


class PageObject(SequenceProxy, DataObject):

    """A page of a connection.

    The entries of a plain `PageObject` are not decoded at all. Use
    `PageOf()` to get a subclass that decodes them into nodes.

    A page whose object has no ``data`` member is empty.

    """

    data = fields.List(fields.Field(), default=empty_list)


_pages = {}
_pages_lock = threading.Lock()


def PageOf(entryclass):
    """Returns the `PageObject` subclass whose entries are instances of
    `entryclass`.

    >>> PageOfUser = PageOf(User)

    is equivalent to:

    >>> class PageOfUser(PageObject):
    ...     data = fields.List(fields.Object(User), default=empty_list)

    The same class is returned every time for the same `entryclass`.

    """
    with _pages_lock:
        try:
            return _pages[entryclass]
        except KeyError:
            pass
        name = 'PageOf' + entryclass.__name__
        newcls = type(PageObject)(name, (PageObject,), {
            '__module__': __name__,
            'data': fields.List(fields.Object(entryclass), default=empty_list),
        })
        _pages[entryclass] = newcls
        return newcls
