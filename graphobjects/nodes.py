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

The kinds of node graphobjects knows about, and the registry connecting them.

* A `User` is connected to the users they are friends with (``friends``),
  the albums they own (``albums``) and the photos they uploaded
  (``photos``), and has a picture.
* An `Album` is connected to the photos in it (``photos``).
* A `Photo` has no connections.

"""

import threading

import graphobjects.fields as fields
from graphobjects.node import GraphNode
from graphobjects.registry import Connection, NodeRegistry
from graphobjects.resolver import PictureSize


class User(GraphNode):

    """A person in the graph."""

    node_type = 'user'
    has_picture = True

    name         = fields.Field()
    first_name   = fields.Field()
    last_name    = fields.Field()
    username     = fields.Field()
    link         = fields.Field()
    gender       = fields.Field()
    locale       = fields.Field()
    updated_time = fields.Datetime()

    @classmethod
    def get_me(cls, authorizer, resolver=None, cancellable=None):
        """Fetches the user the authorizer's credential belongs to."""
        return cls._resolver(resolver).fetch_me(authorizer, node_type=cls,
            cancellable=cancellable)

    @classmethod
    def get_me_async(cls, authorizer, callback=None, resolver=None,
                     cancellable=None):
        return cls._resolver(resolver).fetch_me_async(authorizer, node_type=cls,
            callback=callback, cancellable=cancellable)

    def get_friends(self, authorizer, **kwargs):
        return self.get_connection(User, authorizer, **kwargs)

    def get_friends_async(self, authorizer, **kwargs):
        return self.get_connection_async(User, authorizer, **kwargs)

    def get_albums(self, authorizer, **kwargs):
        return self.get_connection(Album, authorizer, **kwargs)

    def get_albums_async(self, authorizer, **kwargs):
        return self.get_connection_async(Album, authorizer, **kwargs)

    def get_photos(self, authorizer, **kwargs):
        return self.get_connection(Photo, authorizer, **kwargs)

    def get_photos_async(self, authorizer, **kwargs):
        return self.get_connection_async(Photo, authorizer, **kwargs)

    def get_picture(self, authorizer, size=PictureSize.NORMAL, resolver=None,
                    cancellable=None):
        """Fetches the user's picture at the given `PictureSize`, returning
        the image data as bytes."""
        return self._resolver(resolver).fetch_picture(self, size, authorizer,
            cancellable=cancellable)

    def get_picture_async(self, authorizer, size=PictureSize.NORMAL,
                          callback=None, resolver=None, cancellable=None):
        return self._resolver(resolver).fetch_picture_async(self, size,
            authorizer, callback=callback, cancellable=cancellable)


class Album(GraphNode):

    """A photo album."""

    node_type = 'album'

    name         = fields.Field()
    description  = fields.Field()
    link         = fields.Field()
    count        = fields.Field()
    owner        = fields.Object(User, api_name='from')
    cover_photo  = fields.Reference('Photo')
    created_time = fields.Datetime()
    updated_time = fields.Datetime()

    def get_photos(self, authorizer, **kwargs):
        return self.get_connection(Photo, authorizer, **kwargs)

    def get_photos_async(self, authorizer, **kwargs):
        return self.get_connection_async(Photo, authorizer, **kwargs)


class Photo(GraphNode):

    """A photo, as uploaded by a user."""

    node_type = 'photo'

    name         = fields.Field()
    owner        = fields.Object(User, api_name='from')
    album        = fields.Reference(Album)
    picture      = fields.Field()
    source       = fields.Field()
    height       = fields.Field()
    width        = fields.Field()
    link         = fields.Field()
    images       = fields.List(fields.Field())
    created_time = fields.Datetime()
    updated_time = fields.Datetime()


def link_album(user, album):
    """Links an album fetched through a user's ``albums`` connection to its
    owner and its cover photo to it."""
    if album.owner is None:
        album.owner = user
    cover = album.cover_photo
    if cover is not None:
        if cover.album is None:
            cover.album = album
        if cover.owner is None:
            cover.owner = album.owner


def link_photo(album, photo):
    """Links a photo fetched through an album's ``photos`` connection to the
    album."""
    if photo.album is None:
        photo.album = album


def build_registry():
    """Returns a new frozen `NodeRegistry` of the built-in node types."""
    registry = NodeRegistry()
    registry.register(User, {
        User:  'friends',
        Album: Connection('albums', hook=link_album),
        Photo: Connection('photos', params={'type': 'uploaded'}),
    })
    registry.register(Album, {
        Photo: Connection('photos', hook=link_photo),
    })
    registry.register(Photo)
    return registry.freeze()


_registry = None
_registry_lock = threading.Lock()


def default_registry():
    """Returns the registry of the built-in node types, building it the
    first time it's asked for."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = build_registry()
        return _registry
