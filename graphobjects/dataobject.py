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

`DataObject` is the mechanism for converting between JSON objects (as
dictionaries) and Python objects. The conversions are performed with the aid
of the `Field` instances declared on `DataObject` subclasses, which together
make up the class's schema.

"""


import graphobjects.fields
from graphobjects.errors import DeserializationFailure


classes_by_name = {}



def find_by_name(name):
    """Finds and returns the DataObject subclass with the given name.

    Parameter `name` should be a bare class name with no module. If there is
    no class by that name, raises `KeyError`.

    """
    return classes_by_name[name]


class DataObjectMetaclass(type):

    """Metaclass for `DataObject` classes.

    This metaclass collects the `Field` instances declared on the new class
    (and inherited from its bases) into the class's ``fields`` mapping, and
    makes the class findable by name for forward-referencing `Object`
    fields.

    """

    def __new__(cls, name, bases, attrs):
        fields = {}
        new_fields = {}
        new_properties = {}

        # Inherit all the parent DataObject classes' fields.
        for base in bases:
            if isinstance(base, DataObjectMetaclass):
                fields.update(base.fields)

        for attrname, field in attrs.items():
            if isinstance(field, graphobjects.fields.Property):
                new_properties[attrname] = field
                if isinstance(field, graphobjects.fields.Field):
                    new_fields[attrname] = field
            elif attrname in fields:
                # Throw out any parent fields that the subclass defined as
                # something other than a Field.
                del fields[attrname]

        fields.update(new_fields)
        attrs['fields'] = fields
        obj_cls = super(DataObjectMetaclass, cls).__new__(cls, name, bases, attrs)

        for attrname, prop in new_properties.items():
            prop.install(attrname, obj_cls)

        classes_by_name[name] = obj_cls

        return obj_cls


class DataObject(object, metaclass=DataObjectMetaclass):

    """An object that can be decoded from or encoded as a dictionary.

    DataObject subclasses should be declared with their data attributes
    defined as instances of fields from the `graphobjects.fields` module.
    For example:

    >>> from graphobjects import dataobject, fields
    >>> class Place(dataobject.DataObject):
    ...     name    = fields.Field()
    ...     updated = fields.Datetime(api_name='updated_time')
    ...

    """

    def __init__(self, **kwargs):
        """Initializes a new `DataObject` with the given field values."""
        self.api_data = {}
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __eq__(self, other):
        """Returns whether two `DataObject` instances are equivalent.

        If the `DataObject` instances are of the same type and contain the
        same data in all their fields, the objects are equivalent.

        """
        if type(self) != type(other):
            return False
        for k, field in self.fields.items():
            if not field.equal(getattr(self, k), getattr(other, k)):
                return False
        return True

    def __ne__(self, other):
        return not self == other

    __hash__ = object.__hash__

    def __repr__(self):
        values = ', '.join('%s=%s' % (k, self.fields[k].describe(self.__dict__[k]))
            for k in sorted(self.fields) if self.__dict__.get(k) is not None)
        return '%s(%s)' % (type(self).__name__, values)

    def __iter__(self):
        for key in self.fields.keys():
            yield key

    def to_dict(self):
        """Encodes the DataObject to a dictionary.

        Only the object's fields are encoded, under their API names. Fields
        with no value are omitted.

        """
        data = {}
        for field in self.fields.values():
            value = getattr(self, field.attrname, None)
            if value is not None:
                data[field.api_name] = field.encode(value)
        return data

    @classmethod
    def from_dict(cls, data):
        """Decodes a dictionary into a new `DataObject` instance."""
        self = cls()
        self.update_from_dict(data)
        return self

    def update_from_dict(self, data):
        """Replaces the content of this DataObject with the content of a
        dictionary.

        Every field whose API name is a key of `data` is decoded right away.
        If a value can't be decoded, raises `DeserializationFailure`. Keys
        that aren't any field's API name are kept in ``api_data`` but
        otherwise ignored.

        """
        if not isinstance(data, dict):
            raise DeserializationFailure('Cannot update %s from non-object data %r'
                % (type(self).__name__, data))

        decoded = {}
        for attrname, field in self.fields.items():
            if field.api_name not in data:
                continue
            try:
                decoded[attrname] = field.decode(data[field.api_name])
            except (TypeError, ValueError, KeyError) as exc:
                raise DeserializationFailure('Cannot decode %r member of %s: %s'
                    % (field.api_name, type(self).__name__, exc)) from exc

        # Clear any local instance field data
        for k in self.fields:
            self.__dict__.pop(k, None)
        self.__dict__.update(decoded)
        self.api_data = data
