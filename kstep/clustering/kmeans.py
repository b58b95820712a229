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
# pylint: disable=invalid-name,consider-using-enumerate
"""
kmeans.py: the steps of Lloyd's k-means over 2D points

The engine in engine.py strings these together one iteration at a time.
Assignments are lists indexed by slot, so centroids that land on the
same position never share a cluster.
"""
import logging
import math

import numpy as np

from ..errors import InvalidArgument
from .colors import assign_centroid_colors
from .point import Centroid

logger = logging.getLogger('kstep')


def _coords(p):
    if hasattr(p, 'position'):
        return p.position
    return np.asarray(p, dtype=float)


def distance(p0, p1):
    """euclidean distance between two points"""
    return float(np.sqrt(np.sum((_coords(p0) - _coords(p1))**2)))


def shuffle(points, rng):
    """unbiased permutation of points, the input is left untouched"""
    order = rng.permutation(len(points))
    return [points[i] for i in order]


def initialize_centroids(points, k, rng):
    """Pick k centroids from the point set

    Parameters
    ----------
    points: list of Point
    k: int
        number of slots
    rng: numpy.random.Generator
        source of the shuffle

    Returns
    -------
    centroids: list of Centroid
        copies of k shuffled points, labelled 0..k-1
    assignment: list of list
        k empty clusters
    """
    if k <= 0 or len(points) < k:
        raise InvalidArgument('need 0 < k <= len(points), got k=%r for %d points' % (k, len(points)))

    picked = shuffle(points, rng)[:k]
    centroids = [Centroid(p.x, p.y, slot) for slot, p in enumerate(picked)]
    assign_centroid_colors(centroids)
    return centroids, [[] for _ in range(k)]


def closest_centroid(point, centroids):
    """index of the nearest centroid, the first one wins a tie"""
    closest = 0
    closest_dist = float('inf')
    for c in range(len(centroids)):
        dist = distance(point, centroids[c])
        if dist < closest_dist:
            closest = c
            closest_dist = dist
    return closest


def assign(points, centroids):
    """Assign every point to its nearest centroid.

    Writes the slot label and color into each point.

    Returns
    -------
    list with one list of points per slot
    """
    assignment = [[] for _ in range(len(centroids))]
    for point in points:
        centroid = centroids[closest_centroid(point, centroids)]
        assignment[centroid.label].append(point)
        point.label = centroid.label
        point.color = centroid.color
    return assignment


def recompute(assignment, centroids, floor=True):
    """Move each centroid to the mean of its cluster

    Parameters
    ----------
    assignment: list of list of Point
        clusters indexed by slot
    centroids: list of Centroid
        centroids the assignment was made against
    floor: bool
        floor the mean coordinates to integers

    Returns
    -------
    centroids: list of Centroid
        new centroids in slot order
    assignment: list of list
        empty clusters for the next iteration
    """
    assert len(assignment) == len(centroids)

    new_centroids = []
    for slot, members in enumerate(assignment):
        previous = centroids[slot]
        if not members:
            # an empty cluster keeps its position
            logger.warning('empty cluster in slot %d, keeping centroid at (%s)', slot, previous.key())
            new_centroids.append(Centroid(previous.x, previous.y, slot))
            continue

        x = np.mean([p.x for p in members])
        y = np.mean([p.y for p in members])
        if floor:
            x, y = int(math.floor(x)), int(math.floor(y))
        else:
            x, y = float(x), float(y)
        new_centroids.append(Centroid(x, y, slot))

    assign_centroid_colors(new_centroids)
    return new_centroids, [[] for _ in range(len(new_centroids))]


def inertia(points, centroids):
    """sum of squared distances from each assigned point to its centroid"""
    loss = 0.0
    for p in points:
        if p.label is None:
            continue
        loss += distance(p, centroids[p.label])**2
    return loss
