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
# pylint: disable=invalid-name,abstract-method
"""Point sources

A sampler builds the point set a clustering run starts from. The engine
only relies on the x and y of what it is given.
"""
import numpy as np

from .clustering.point import Point
from .errors import InvalidArgument


class Sampler(object):
    """Base class for point sources

    Parameters
    ----------
    rng: numpy.random.Generator
        source of randomness
    seed: int
        seed for a fresh generator when rng is not given
    """

    def __init__(self, rng=None, seed=None):
        if rng is None:
            rng = np.random.default_rng(seed)
        self.rng = rng

    def sample(self, n):
        """Draw n points

        Parameters
        ----------
        n: int
            number of points

        Returns
        -------
        list of Point
        """
        raise NotImplementedError()


class UniformSampler(Sampler):
    """Integer points spread uniformly over a width x height region

    Parameters
    ----------
    width: int
        x is drawn from [0, width)
    height: int
        y is drawn from [0, height)
    """

    def __init__(self, width, height, rng=None, seed=None):
        super(UniformSampler, self).__init__(rng, seed)
        if width <= 0 or height <= 0:
            raise InvalidArgument('region must have a positive size, got %rx%r' % (width, height))
        self.width = width
        self.height = height

    def sample(self, n=10):
        xs = self.rng.integers(0, self.width, size=n)
        ys = self.rng.integers(0, self.height, size=n)
        return [Point(int(x), int(y)) for x, y in zip(xs, ys)]


class BlobSampler(Sampler):
    """Dense gaussian blobs around fixed centers

    Points are dealt to the centers in turn and floored to integers.
    Each point remembers the index of its center in Point.truth.

    Parameters
    ----------
    centers: list of (x, y)
        blob centers
    spread: float
        standard deviation of every blob
    """

    def __init__(self, centers, spread=1.0, rng=None, seed=None):
        super(BlobSampler, self).__init__(rng, seed)
        if not len(centers):
            raise InvalidArgument('need at least one blob center')
        self.centers = np.asarray(centers, dtype=float)
        self.spread = spread

    def sample(self, n):
        truth = np.arange(n) % len(self.centers)
        coords = self.rng.normal(self.centers[truth], self.spread)
        coords = np.floor(coords).astype(int)
        return [Point(int(x), int(y), truth=int(t)) for (x, y), t in zip(coords, truth)]
