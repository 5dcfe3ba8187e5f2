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

from graphobjects import Album, GraphNode, Photo, User, errors, fields
from tests import utils


class TestGraphNodes(unittest.TestCase):

    def test_id_from_data(self):
        u = User.from_dict({'id': '123', 'name': 'Ada'})
        self.assertEqual(u.id, '123')
        self.assertEqual(u.name, 'Ada')
        self.assertEqual(u.node_type, 'user')

    def test_numeric_id(self):
        u = User.from_dict({'id': 123})
        self.assertEqual(u.id, '123')

    def test_id_immutable(self):
        u = User(id='123')
        u.id = '123'
        self.assertEqual(u.id, '123')

        def change():
            u.id = '456'
        self.assertRaises(AttributeError, change)

        def delete():
            del u.id
        self.assertRaises(AttributeError, delete)

        # Data for the same node is fine; data for another node isn't.
        u.update_from_dict({'name': 'Ada'})
        self.assertEqual(u.id, '123')
        self.assertRaises(errors.DeserializationFailure,
            u.update_from_dict, {'id': '456', 'name': 'Bob'})
        self.assertEqual(u.id, '123')

    def test_local_setters(self):
        u = User.from_dict({'id': '123', 'name': 'Ada'})
        u.name = 'Ada Lovelace'
        self.assertEqual(u.name, 'Ada Lovelace')
        self.assertEqual({'id': '123', 'name': 'Ada Lovelace'}, u.to_dict())

    def test_update_from_response(self):
        u = User()
        u.update_from_response('123', b'{"name": "Ada", "favorite_color": "green"}')
        self.assertEqual(u.id, '123')
        self.assertEqual(u.name, 'Ada')
        self.assertEqual({'id': '123', 'name': 'Ada'}, u.to_dict())

        u = User()
        u.update_from_response('me', '{"id": "123", "name": "Ada"}')
        self.assertEqual(u.id, '123')

    def test_update_from_bad_response(self):
        u = User()
        self.assertRaises(errors.BadResponse, u.update_from_response, '123', '')
        self.assertRaises(errors.BadResponse, u.update_from_response, '123', ' \n')
        self.assertRaises(errors.DeserializationFailure,
            u.update_from_response, '123', 'not json')
        self.assertRaises(errors.DeserializationFailure,
            u.update_from_response, '123', '[{"id": "123"}]')

        try:
            u.update_from_response('123', '{"id": "123", "updated_time": 7}',
                node_id='123', operation='fetching User 123')
        except errors.DeserializationFailure as exc:
            self.assertEqual(exc.node_id, '123')
            self.assertTrue(isinstance(exc.__cause__, errors.DeserializationFailure))
        else:
            self.fail('No DeserializationFailure decoding a bad timestamp')

    def test_references(self):
        a = Album.from_dict({
            'id': 'a1',
            'name': 'Trip',
            'from': {'id': '123', 'name': 'Ada'},
            'cover_photo': 'p1',
        })
        self.assertIsInstance(a.owner, User)
        self.assertEqual(a.owner.id, '123')
        self.assertIsInstance(a.cover_photo, Photo)
        self.assertEqual(a.cover_photo.id, 'p1')
        self.assertEqual('p1', a.to_dict()['cover_photo'])

        p = Photo.from_dict({'id': 'p1', 'album': {'id': 'a1', 'name': 'Trip'}})
        self.assertIsInstance(p.album, Album)
        self.assertEqual(p.album.name, 'Trip')
        self.assertEqual({'id': 'a1', 'name': 'Trip'}, p.to_dict()['album'])

        # Made locally, a reference is encoded as its id.
        p = Photo(id='p2', album=Album(id='a2', name='Cats'))
        self.assertEqual('a2', p.to_dict()['album'])

    def test_reference_cycles(self):
        a = Album.from_dict({'id': 'a1', 'cover_photo': 'p1'})
        a.cover_photo.album = a
        b = Album.from_dict({'id': 'a1', 'cover_photo': 'p1'})
        b.cover_photo.album = b

        self.assertEqual(a, b)
        self.assertTrue('p1' in repr(a))

    def test_exception_attributes(self):
        self.assertTrue(User.NotFound is errors.NotFound)
        self.assertTrue(issubclass(Album.ServerError, errors.RemoteFailure))

    def test_subclass_schema(self):

        class Page(GraphNode):
            node_type = 'page'
            name = fields.Field()
            likes = fields.Field()

        self.assertEqual(set(['id', 'name', 'likes']), set(Page.fields))
        self.assertEqual(set(['id']), set(GraphNode.fields))


if __name__ == '__main__':
    utils.log()
    unittest.main()
