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
import numpy as np
import pytest

from kstep import BlobSampler


class FixedPermutation(object):
    """rng stand-in that always returns the same permutation"""

    def __init__(self, order):
        self.order = list(order)

    def permutation(self, n):
        assert n == len(self.order)
        return np.array(self.order)


@pytest.fixture
def fixed_permutation():
    return FixedPermutation


@pytest.fixture
def two_pairs():
    return [(0, 0), (0, 1), (10, 10), (10, 11)]


@pytest.fixture
def blobs():
    sampler = BlobSampler([(50, 50), (400, 80), (220, 400)], spread=3.0, seed=11)
    return sampler.sample(90)
