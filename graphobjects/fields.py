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

Fields are class attributes of `GraphNode` subclasses that describe the node
type's schema: which JSON member each attribute is decoded from, and how.

A node type's fields are the whole of its schema. Members of a response that
no field names are ignored, and members a field names but the response lacks
leave the attribute at the field's default.

"""

from datetime import datetime, timezone

import graphobjects.dataobject


class Property(object):

    """An attribute that can be installed declaratively on a `DataObject`.

    `Field` is the primary kind of `Property`.

    """

    def install(self, attrname, cls):
        """Signals to the `Property` that it has been installed on the given
        class as an attribute with the given name.

        This implementation does nothing.

        """
        pass


class Field(Property):

    """A property for decoding a JSON member into an object attribute, and
    encoding it back.

    Use a `Field` instance directly for strings, numbers and boolean values,
    which need no conversion. Use a `Field` subclass for members that do.

    """

    def __init__(self, api_name=None, default=None):
        """Sets the field's JSON member name and default value.

        Optional parameter `api_name` is the key of this field's value in the
        node's JSON object. If not given, the attribute name of the field is
        used. Use `api_name` for members whose names are not valid Python
        identifiers, like ``from``.

        Optional parameter `default` is the value of the attribute when the
        JSON object has no such member. If `default` is callable, it is called
        with the object and its result used instead.

        """
        self.api_name = api_name
        self.default  = default

    def install(self, attrname, cls):
        self.attrname = attrname
        if self.api_name is None:
            self.api_name = attrname
        self.of_cls = cls

    def __get__(self, obj, cls):
        if obj is None:
            # Yield the real field instance when gotten through the class.
            return self

        try:
            return obj.__dict__[self.attrname]
        except KeyError:
            pass
        if callable(self.default):
            return self.default(obj)
        return self.default

    def __set__(self, obj, value):
        obj.__dict__[self.attrname] = value

    def __delete__(self, obj):
        obj.__dict__.pop(self.attrname, None)

    def decode(self, value):
        """Decodes a JSON value into an attribute value.

        This implementation returns `value` unchanged.

        """
        return value

    def encode(self, value):
        """Encodes an attribute value into a JSON value.

        This implementation returns `value` unchanged.

        """
        return value

    def equal(self, value, other):
        return value == other

    def describe(self, value):
        return repr(value)


class Identifier(Field):

    """A field for a node's opaque identifier.

    Once an identifier has been set it can't be changed to a different one.

    """

    def __set__(self, obj, value):
        current = obj.__dict__.get(self.attrname)
        if current is not None and value != current:
            raise AttributeError('Cannot change %s of %s from %r to %r'
                % (self.attrname, type(obj).__name__, current, value))
        if value is not None and not isinstance(value, str):
            value = str(value)
        obj.__dict__[self.attrname] = value

    def __delete__(self, obj):
        raise AttributeError('Cannot delete %s of %s'
            % (self.attrname, type(obj).__name__))

    def decode(self, value):
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            raise TypeError('Value to decode %r is not a node identifier'
                % (value,))
        return str(value)


class List(Field):

    """A field representing a homogeneous list of data.

    The elements of the list are decoded through another field specified when
    the `List` is declared.

    """

    def __init__(self, fld, **kwargs):
        super(List, self).__init__(**kwargs)
        self.fld = fld

    def install(self, attrname, cls):
        super(List, self).install(attrname, cls)
        self.fld.install(attrname, cls)

    def decode(self, value):
        if not isinstance(value, list):
            raise TypeError('Value to decode %r is not a list' % (value,))
        return [self.fld.decode(v) for v in value]

    def encode(self, value):
        return [self.fld.encode(v) for v in value]


class AcceptsStringCls(object):
    """Mixin for fields with a ``cls`` attribute that can either be a
    ``DataObject`` subclass or the name of one (to allow forward
    references)."""

    def get_cls(self):
        cls = self.__dict__['cls']
        if not callable(cls):
            cls = graphobjects.dataobject.find_by_name(cls)
        return cls

    def set_cls(self, cls):
        self.__dict__['cls'] = cls

    cls = property(get_cls, set_cls)


class Object(AcceptsStringCls, Field):

    """A field representing a nested `DataObject`, such as the ``from``
    member of an album naming its owner."""

    def __init__(self, cls, **kwargs):
        """Sets the `DataObject` class the field represents.

        `cls` may also be the name of a class, which is looked up when a value
        is first decoded.

        """
        super(Object, self).__init__(**kwargs)
        self.cls = cls

    def decode(self, value):
        if value is None:
            return None
        if not isinstance(value, dict):
            raise TypeError('Value to decode %r is not an object' % (value,))
        return self.cls.from_dict(value)

    def encode(self, value):
        return value.to_dict()


class Reference(Object):

    """A field for a node referenced from another node by its identifier.

    The API gives such references either as a bare identifier or as an
    object with an ``id`` member. Either way the attribute is an (unfetched)
    node of the referenced class. A reference is encoded back in the shape
    it was decoded from: a bare identifier, or an object with the members
    the API gave. References made locally are encoded as bare identifiers.

    References are compared and shown by identifier only, as referenced
    nodes may refer back to the referencing one.

    """

    def decode(self, value):
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return self.cls(id=str(value))
        return super(Reference, self).decode(value)

    def encode(self, value):
        if not value.api_data:
            return value.id
        # Only the members the API gave, so nodes linked in after decoding
        # (which may refer back here) aren't encoded.
        data = {}
        for field in value.fields.values():
            if field.api_name not in value.api_data:
                continue
            member = getattr(value, field.attrname, None)
            if member is not None:
                data[field.api_name] = field.encode(member)
        return data

    def equal(self, value, other):
        if value is None or other is None:
            return value is other
        return type(value) == type(other) and value.id == other.id

    def describe(self, value):
        return '<%s %s>' % (type(value).__name__, value.id)


class Datetime(Field):

    """A field representing a timestamp.

    Graph API timestamps look like ``2013-03-12T10:21:48+0000``. Decoded
    values are timezone-aware `datetime` instances in UTC.

    """

    dateformat = "%Y-%m-%dT%H:%M:%S%z"
    utc = timezone.utc

    def __init__(self, dateformat=None, **kwargs):
        super(Datetime, self).__init__(**kwargs)
        if dateformat is not None:
            self.dateformat = dateformat

    def decode(self, value):
        if value is None:
            return None
        try:
            dt = datetime.strptime(value, self.dateformat)
        except (TypeError, ValueError):
            raise TypeError('Value to decode %r is not a valid date time stamp' % (value,))
        if dt.tzinfo is None:
            return dt.replace(tzinfo=Datetime.utc)
        return dt.astimezone(Datetime.utc)

    def encode(self, value):
        if not isinstance(value, datetime):
            raise TypeError('Value to encode %r is not a datetime' % (value,))
        if value.tzinfo is None:
            value = value.replace(tzinfo=Datetime.utc)
        return value.astimezone(Datetime.utc).replace(microsecond=0).strftime(self.dateformat)
