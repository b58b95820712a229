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
"""Display colors for cluster slots"""
import math

from ..env import GLOBAL_SCOPE


def generate_distinct_colors(num_colors, saturation=None, lightness=None):
    """Colors evenly spaced by hue

    Parameters
    ----------
    num_colors: int
        number of colors to generate
    saturation: int
        saturation percentage, defaults to GLOBAL_SCOPE.saturation
    lightness: int
        lightness percentage, defaults to GLOBAL_SCOPE.lightness

    Returns
    -------
    list of css hsl() strings, one per slot
    """
    if saturation is None:
        saturation = GLOBAL_SCOPE.saturation
    if lightness is None:
        lightness = GLOBAL_SCOPE.lightness
    if num_colors <= 0:
        return []

    step = 360 / num_colors
    colors = []
    for i in range(num_colors):
        hue = int(math.floor(i * step))
        colors.append('hsl(%d, %d%%, %d%%)' % (hue, saturation, lightness))
    return colors


def assign_centroid_colors(centroids):
    """set the color of each centroid by its slot index"""
    colors = generate_distinct_colors(len(centroids))
    for centroid in centroids:
        centroid.color = colors[centroid.label]
    return centroids
