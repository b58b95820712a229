# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
"""Point and centroid records"""
import math
import numbers
from collections.abc import Mapping, Sequence

import numpy as np

from ..errors import InvalidArgument


def _format_coord(v):
    if isinstance(v, numbers.Integral):
        return str(int(v))
    v = float(v)
    if math.isfinite(v) and v.is_integer():
        return str(int(v))
    return repr(v)


def point_key(x, y):
    """key of a position, '10,10.5'. 10 and 10.0 render the same"""
    return '%s,%s' % (_format_coord(x), _format_coord(y))


class Point(object):
    """A 2D point with its current cluster assignment

    Parameters
    ----------
    x: float
    y: float
    label: int
        slot of the centroid that owns the point, None until assigned
    color: str
        display color of that slot
    truth: int
        index of the planted cluster the point was drawn from, set by
        BlobSampler and None otherwise
    """

    __slots__ = ('x', 'y', 'label', 'color', 'truth')

    def __init__(self, x, y, label=None, color=None, truth=None):
        self.x = x
        self.y = y
        self.label = label
        self.color = color
        self.truth = truth

    def key(self):
        return point_key(self.x, self.y)

    @property
    def position(self):
        return np.array([self.x, self.y], dtype=float)

    def copy(self):
        return Point(self.x, self.y, self.label, self.color, self.truth)

    def __repr__(self):
        return 'Point(x=%r, y=%r, label=%r)' % (self.x, self.y, self.label)


class Centroid(object):
    """Representative position of one slot

    The label is the slot index and stays fixed across iterations while
    the coordinates move.
    """

    __slots__ = ('x', 'y', 'label', 'color')

    def __init__(self, x, y, label, color=None):
        self.x = x
        self.y = y
        self.label = label
        self.color = color

    def key(self):
        return point_key(self.x, self.y)

    @property
    def position(self):
        return np.array([self.x, self.y], dtype=float)

    def __eq__(self, other):
        if not isinstance(other, Centroid):
            return NotImplemented
        return (self.x, self.y, self.label) == (other.x, other.y, other.label)

    def __hash__(self):
        return hash((self.x, self.y, self.label))

    def __repr__(self):
        return 'Centroid(x=%r, y=%r, label=%r)' % (self.x, self.y, self.label)


def _check_coord(obj, v):
    if isinstance(v, bool) or not isinstance(v, numbers.Real) or not math.isfinite(v):
        raise InvalidArgument('coordinates must be finite numbers: %r' % (obj,))


def _coerce(obj):
    if isinstance(obj, Point):
        return obj
    if isinstance(obj, Mapping):
        try:
            return Point(obj['x'], obj['y'])
        except KeyError:
            raise InvalidArgument('point mapping needs x and y: %r' % (obj,))
    if isinstance(obj, (Sequence, np.ndarray)) and not isinstance(obj, str) and len(obj) == 2:
        return Point(obj[0], obj[1])
    if hasattr(obj, 'x') and hasattr(obj, 'y'):
        return Point(obj.x, obj.y)
    raise InvalidArgument('cannot use %r as a 2D point' % (obj,))


def as_point(obj):
    """Coerce obj into a Point.

    Points are returned unchanged so the caller keeps seeing the
    assignment written into them. Mappings with x and y keys and
    two-item sequences are wrapped in a new Point. Coordinates must be
    finite real numbers.
    """
    point = _coerce(obj)
    _check_coord(obj, point.x)
    _check_coord(obj, point.y)
    return point
