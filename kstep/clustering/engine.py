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
"""Step-wise k-means driver

A KMeansEngine runs one k-means iteration per call to step() and hands
back a Snapshot of every point with its current slot. The caller pulls
snapshots at its own pace and may stop at any time.
"""
import enum
import logging
import numbers
from collections import namedtuple

import numpy as np

from ..env import CONVERGENCE_MODES, GLOBAL_SCOPE
from ..errors import InvalidArgument
from .colors import assign_centroid_colors
from .kmeans import assign, initialize_centroids, inertia, recompute
from .point import Centroid, as_point

logger = logging.getLogger('kstep')

PointState = namedtuple('PointState', ['x', 'y', 'label', 'color'])


class EngineState(enum.Enum):
    INITIALIZED = 'initialized'
    ASSIGNING = 'assigning'
    CONVERGED = 'converged'
    EXHAUSTED_ITERATIONS = 'exhausted_iterations'


class Snapshot(object):
    """Assignment of every point after one iteration

    Parameters
    ----------
    iteration: int
        1-based iteration that produced the snapshot
    points: tuple of PointState
        points in input order with their slot and color
    centroids: tuple of (x, y)
        centroid positions the points were assigned against, by slot
    """

    __slots__ = ('iteration', 'points', 'centroids')

    def __init__(self, iteration, points, centroids):
        self.iteration = iteration
        self.points = tuple(points)
        self.centroids = tuple(centroids)

    @property
    def labels(self):
        return tuple(p.label for p in self.points)

    def clusters(self):
        """points grouped by slot, one list per centroid"""
        groups = [[] for _ in range(len(self.centroids))]
        for p in self.points:
            groups[p.label].append(p)
        return groups

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __eq__(self, other):
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (self.iteration, self.points, self.centroids) ==                (other.iteration, other.points, other.centroids)

    def __hash__(self):
        return hash((self.iteration, self.points, self.centroids))

    def __repr__(self):
        return 'Snapshot(iteration=%d, points=%d, k=%d)' % (
            self.iteration, len(self.points), len(self.centroids))


def _check_count(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise InvalidArgument('%s must be a positive integer, got %r' % (name, value))
    return int(value)


class KMeansEngine(object):
    """Iterative k-means over 2D points, one iteration per step

    Parameters
    ----------
    points: sequence
        Point objects, {'x', 'y'} mappings or (x, y) pairs. Point objects
        are updated in place with their slot and color.
    k: int
        number of clusters
    max_iterations: int
        upper bound on the number of snapshots
    rng: numpy.random.Generator
        source of the initial shuffle, anything with a permutation(n) method
    seed: int
        seed for a fresh numpy generator when rng is not given
    initial_centroids: sequence
        k positions to start from instead of sampling the points
    convergence: str
        'keys' or 'slots', defaults to GLOBAL_SCOPE.convergence
    floor: bool
        floor recomputed means, defaults to GLOBAL_SCOPE.floor_means
    """

    def __init__(self, points, k, max_iterations, rng=None, seed=None,
                 initial_centroids=None, convergence=None, floor=None):
        self.k = _check_count('k', k)
        self.max_iterations = _check_count('max_iterations', max_iterations)

        if points is None:
            raise InvalidArgument('points must be a sequence')
        self._points = [as_point(p) for p in points]
        if len(self._points) < self.k:
            raise InvalidArgument('k=%d is larger than the number of points (%d)'
                                  % (self.k, len(self._points)))

        self.convergence = convergence or GLOBAL_SCOPE.convergence
        if self.convergence not in CONVERGENCE_MODES:
            raise InvalidArgument('unknown convergence mode %r, expected one of %s'
                                  % (self.convergence, ', '.join(CONVERGENCE_MODES)))
        self.floor = GLOBAL_SCOPE.floor_means if floor is None else bool(floor)

        if rng is not None and seed is not None:
            raise InvalidArgument('pass either rng or seed, not both')
        if rng is None:
            rng = np.random.default_rng(seed)
        elif not hasattr(rng, 'permutation'):
            raise InvalidArgument('rng must provide permutation(n), got %r' % (rng,))
        self._rng = rng

        if initial_centroids is None:
            self._centroids, _ = initialize_centroids(self._points, self.k, self._rng)
        else:
            self._centroids = self._make_centroids(initial_centroids)

        self._assignment = None
        self._assigned_centroids = None
        self._last_keys = set(c.key() for c in self._centroids)
        self._iteration = 0
        self._empty_cluster_events = 0
        self._state = EngineState.INITIALIZED
        logger.debug('initialized %d centroids over %d points: %s', self.k, len(self._points),
                     ' '.join(c.key() for c in self._centroids))

    def _make_centroids(self, positions):
        positions = [as_point(p) for p in positions]
        if len(positions) != self.k:
            raise InvalidArgument('expected %d initial centroids, got %d' % (self.k, len(positions)))
        centroids = [Centroid(p.x, p.y, slot) for slot, p in enumerate(positions)]
        return assign_centroid_colors(centroids)

    @property
    def state(self):
        return self._state

    @property
    def iteration(self):
        """number of snapshots produced so far"""
        return self._iteration

    @property
    def done(self):
        return self._state in (EngineState.CONVERGED, EngineState.EXHAUSTED_ITERATIONS)

    @property
    def centroids(self):
        return list(self._centroids)

    @property
    def points(self):
        return list(self._points)

    @property
    def empty_cluster_events(self):
        """how many times a slot came up empty and kept its position"""
        return self._empty_cluster_events

    def inertia(self):
        """within-cluster sum of squares of the latest assignment

        Points are scored against the centroids they were assigned to,
        the ones recorded in the latest Snapshot, not the recomputed ones.
        """
        if self._assigned_centroids is None:
            return 0.0
        return inertia(self._points, self._assigned_centroids)

    def step(self):
        """Advance one iteration.

        Returns
        -------
        the Snapshot of this iteration, or None once the run has converged
        or used up max_iterations. Further calls keep returning None.
        """
        if self.done:
            return None

        # the previous iteration's recomputation runs on resume, after its
        # snapshot has been handed out
        if self._assignment is not None:
            if self._advance_centroids():
                return None

        self._state = EngineState.ASSIGNING
        self._iteration += 1
        self._assignment = assign(self._points, self._centroids)
        self._assigned_centroids = self._centroids
        logger.debug('iteration %d: cluster sizes %s', self._iteration,
                     [len(members) for members in self._assignment])
        return Snapshot(self._iteration,
                        [PointState(p.x, p.y, p.label, p.color) for p in self._points],
                        [(c.x, c.y) for c in self._centroids])

    def _advance_centroids(self):
        """recompute the centroids, returns True when the run is over"""
        self._empty_cluster_events += sum(1 for members in self._assignment if not members)
        previous = self._centroids
        self._centroids, _ = recompute(self._assignment, previous, floor=self.floor)
        self._assignment = None

        if self._converged(previous):
            self._state = EngineState.CONVERGED
            logger.info('converged after %d iterations', self._iteration)
            return True
        if self._iteration >= self.max_iterations:
            self._state = EngineState.EXHAUSTED_ITERATIONS
            logger.info('stopped after max_iterations=%d without converging', self.max_iterations)
            return True

        self._last_keys = set(c.key() for c in self._centroids)
        return False

    def _converged(self, previous):
        if self.convergence == 'slots':
            return all((c.x, c.y) == (p.x, p.y) for c, p in zip(self._centroids, previous))
        return all(c.key() in self._last_keys for c in self._centroids)

    def __iter__(self):
        while True:
            snapshot = self.step()
            if snapshot is None:
                return
            yield snapshot

    def run(self):
        """drain the engine, returns the last snapshot"""
        last = None
        for snapshot in self:
            last = snapshot
        return last


def cluster(points, k, max_iterations, **kwargs):
    """Snapshots of a k-means run, one per iteration

    Arguments are checked before the first snapshot is requested.
    """
    return iter(KMeansEngine(points, k, max_iterations, **kwargs))
