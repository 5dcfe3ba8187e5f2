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

import unittest

from graphobjects import Album, GraphNode, Photo, User, fields
from graphobjects.errors import NotRegistered
from graphobjects.nodes import build_registry, default_registry, link_album
from graphobjects.registry import Connection, NodeRegistry, node_tag
from tests import utils


class Page(GraphNode):
    node_type = 'page'
    name = fields.Field()


class TestNodeRegistry(unittest.TestCase):

    def test_lookup_connection(self):
        registry = default_registry()
        expected = {
            (User, User):   'friends',
            (User, Album):  'albums',
            (User, Photo):  'photos',
            (Album, Photo): 'photos',
        }
        for (source, target), name in expected.items():
            self.assertEqual(name, registry.lookup_connection(source, target).name)
            self.assertEqual(name, registry.lookup_connection(source.node_type,
                target.node_type).name)

        self.assertTrue(registry.lookup_connection(User, Album).hook is link_album)
        self.assertEqual({'type': 'uploaded'},
            registry.lookup_connection(User, Photo).params)
        self.assertEqual({}, registry.lookup_connection(User, User).params)

    def test_unregistered_connections(self):
        registry = default_registry()
        for source, target in ((Album, User), (Album, Album), (Photo, User),
                               (Photo, Photo), (User, Page), (Page, User),
                               ('user', 'page'), ('nothing', 'user')):
            self.assertRaises(NotRegistered, registry.lookup_connection, source, target)

    def test_schema_for(self):
        registry = default_registry()
        self.assertTrue(registry.schema_for(User) is User.fields)
        self.assertTrue('name' in registry.schema_for('user'))
        self.assertTrue('cover_photo' in registry.schema_for('album'))
        self.assertRaises(NotRegistered, registry.schema_for, 'page')
        self.assertRaises(NotRegistered, registry.schema_for, Page)

    def test_node_class(self):
        registry = default_registry()

        class SpecialUser(User):
            pass

        self.assertTrue(registry.node_class('user') is User)
        self.assertTrue(registry.node_class(User) is User)
        self.assertTrue(registry.node_class(SpecialUser) is SpecialUser)
        self.assertTrue('photo' in registry)
        self.assertFalse('page' in registry)
        self.assertFalse(object in registry)

    def test_node_tag(self):
        self.assertEqual('user', node_tag(User))
        self.assertEqual('user', node_tag(User(id='1')))
        self.assertEqual('user', node_tag('user'))
        self.assertRaises(NotRegistered, node_tag, 7)

    def test_register(self):
        registry = NodeRegistry()
        registry.register(Page, {User: 'likes'})
        self.assertRaises(ValueError, registry.register, Page)
        self.assertRaises(ValueError, registry.register, GraphNode)

        # The connection leads somewhere unregistered.
        self.assertRaises(NotRegistered, registry.freeze)

        registry.register(User)
        registry.freeze()
        self.assertEqual('likes', registry.lookup_connection(Page, User).name)
        self.assertRaises(RuntimeError, registry.register, Album)

    def test_default_registry(self):
        self.assertTrue(default_registry() is default_registry())
        self.assertTrue(default_registry().frozen)
        self.assertFalse(build_registry() is default_registry())


class TestConnections(unittest.TestCase):

    def test_request_params(self):
        c = Connection('photos', params={'type': 'uploaded', 'limit': 25})
        self.assertEqual({'type': 'uploaded', 'limit': 25}, c.request_params())
        self.assertEqual({'type': 'tagged', 'limit': 25},
            c.request_params({'type': 'tagged'}))
        # The fixed params themselves don't change.
        self.assertEqual({'type': 'uploaded', 'limit': 25}, c.params)

    def test_apply_hook(self):
        seen = []
        c = Connection('friends', hook=lambda source, node: seen.append((source, node)))
        source, node = User(id='1'), User(id='2')
        self.assertTrue(c.apply_hook(source, node) is node)
        self.assertEqual([(source, node)], seen)

        self.assertTrue(Connection('friends').apply_hook(source, node) is node)


if __name__ == '__main__':
    utils.log()
    unittest.main()
