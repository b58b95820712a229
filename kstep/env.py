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
# pylint: disable=invalid-name
"""Global defaults for clustering runs

Values can be overridden with KSTEP_* environment variables. Arguments
passed to an engine always take precedence.
"""
import os

CONVERGENCE_MODES = ('keys', 'slots')


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off', '')


def _env_int(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return int(value)


class Environment(object):
    """Default settings shared by every engine in the process

    Parameters
    ----------
    convergence: str
        'keys' compares the set of centroid keys with the previous
        iteration, 'slots' compares positions slot by slot
    floor_means: bool
        floor recomputed centroid coordinates to integers
    saturation: int
        saturation percentage of the generated slot colors
    lightness: int
        lightness percentage of the generated slot colors
    """

    def __init__(self, convergence='keys', floor_means=True, saturation=70, lightness=50):
        self.convergence = os.environ.get('KSTEP_CONVERGENCE', convergence)
        self.floor_means = _env_bool('KSTEP_FLOOR_MEANS', floor_means)
        self.saturation = _env_int('KSTEP_SATURATION', saturation)
        self.lightness = _env_int('KSTEP_LIGHTNESS', lightness)

    def __repr__(self):
        return 'Environment(convergence=%r, floor_means=%r, saturation=%r, lightness=%r)' % (
            self.convergence, self.floor_means, self.saturation, self.lightness)


GLOBAL_SCOPE = Environment()
