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
import logging

import numpy as np
import pytest

from kstep import EngineState, InvalidArgument, KMeansEngine, Point, Snapshot, UniformSampler, cluster
from kstep.clustering import assign


def test_two_pairs_converge(two_pairs, fixed_permutation):
    engine = KMeansEngine(two_pairs, k=2, max_iterations=10, rng=fixed_permutation([0, 2, 1, 3]))
    assert engine.state is EngineState.INITIALIZED
    assert [(c.x, c.y) for c in engine.centroids] == [(0, 0), (10, 10)]

    first = engine.step()
    assert isinstance(first, Snapshot)
    assert first.iteration == 1
    assert first.labels == (0, 0, 1, 1)
    assert [[(p.x, p.y) for p in group] for group in first.clusters()] ==         [[(0, 0), (0, 1)], [(10, 10), (10, 11)]]
    assert engine.state is EngineState.ASSIGNING

    assert engine.step() is None
    assert engine.state is EngineState.CONVERGED
    assert [(c.x, c.y) for c in engine.centroids] == [(0, 0), (10, 10)]
    assert engine.iteration == 1


def test_step_after_end_keeps_returning_none(two_pairs):
    engine = KMeansEngine(two_pairs, k=2, max_iterations=10, seed=3)
    engine.run()
    assert engine.done
    assert engine.step() is None
    assert engine.step() is None


@pytest.mark.parametrize('points,k,max_iterations', [
    ([(0, 0)], 5, 10),
    ([(0, 0), (1, 1)], 0, 10),
    ([(0, 0), (1, 1)], -2, 10),
    ([(0, 0), (1, 1)], 1, 0),
    ([(0, 0), (1, 1)], 1, -1),
    ([(0, 0), (1, 1)], 1.5, 10),
    ([(0, 0), (1, 1)], True, 10),
    ([], 1, 10),
    ([(0, 0), (1, 1), (float('nan'), 2), (10, 10)], 2, 10),
    ([('1', '2'), ('3', '4')], 1, 10),
    ([(0, 0), (float('-inf'), 1)], 1, 10),
])
def test_invalid_arguments(points, k, max_iterations):
    with pytest.raises(InvalidArgument):
        KMeansEngine(points, k, max_iterations)


def test_cluster_checks_arguments_eagerly():
    with pytest.raises(InvalidArgument):
        cluster([(0, 0)], k=5, max_iterations=10)


def test_other_invalid_arguments(two_pairs):
    with pytest.raises(InvalidArgument):
        KMeansEngine(two_pairs, 2, 10, convergence='labels')
    with pytest.raises(InvalidArgument):
        KMeansEngine(two_pairs, 2, 10, rng=np.random.default_rng(0), seed=1)
    with pytest.raises(InvalidArgument):
        KMeansEngine(two_pairs, 2, 10, rng=object())
    with pytest.raises(InvalidArgument):
        KMeansEngine(two_pairs, 2, 10, initial_centroids=[(0, 0)])
    with pytest.raises(InvalidArgument):
        KMeansEngine(two_pairs, 2, 10, initial_centroids=[(float('nan'), 2), (10, 10)])


def test_every_point_gets_a_valid_slot():
    points = UniformSampler(800, 600, seed=5).sample(200)
    k = 12
    engine = KMeansEngine(points, k, max_iterations=20, seed=5)
    count = 0
    for snapshot in engine:
        count += 1
        assert len(snapshot) == len(points)
        assert len(snapshot.centroids) == k
        assert all(0 <= label < k for label in snapshot.labels)
        assert len(engine.centroids) == k
    assert 1 <= count <= 20
    assert len(engine.centroids) == k
    assert engine.state in (EngineState.CONVERGED, EngineState.EXHAUSTED_ITERATIONS)


def test_points_are_updated_in_place(two_pairs, fixed_permutation):
    points = [Point(x, y) for x, y in two_pairs]
    engine = KMeansEngine(points, 2, 10, rng=fixed_permutation([0, 2, 1, 3]))
    snapshot = engine.step()
    assert [p.label for p in points] == [0, 0, 1, 1]
    assert [p.color for p in points] == [s.color for s in snapshot]
    assert points[0].color != points[2].color


def test_planted_clusters_are_recovered(blobs):
    # one starting point in each blob
    firsts = [blobs[0], blobs[1], blobs[2]]
    engine = KMeansEngine(blobs, 3, max_iterations=50,
                          initial_centroids=[(p.x, p.y) for p in firsts])
    last = engine.run()

    assert engine.state is EngineState.CONVERGED
    truth_by_slot = {}
    for point in blobs:
        truth_by_slot.setdefault(point.label, set()).add(point.truth)
    assert sorted(truth_by_slot) == [0, 1, 2]
    assert all(len(truths) == 1 for truths in truth_by_slot.values())
    assert len(set(t for truths in truth_by_slot.values() for t in truths)) == 3

    # assigning again against the final centroids changes nothing
    labels = last.labels
    assign(engine.points, engine.centroids)
    assert tuple(p.label for p in engine.points) == labels


def test_same_seed_same_snapshots():
    points = UniformSampler(500, 500, seed=1).sample(150)
    first = list(KMeansEngine([(p.x, p.y) for p in points], 8, 15, seed=42))
    second = list(KMeansEngine([(p.x, p.y) for p in points], 8, 15, seed=42))
    assert first == second
    assert len(first) > 0


def test_k_equal_to_point_count():
    points = [(0, 0), (5, 1), (9, 9), (3, 7), (8, 2)]
    engine = KMeansEngine(points, len(points), 10, seed=9)
    start = sorted(c.key() for c in engine.centroids)

    snapshot = engine.step()
    assert sorted(snapshot.labels) == list(range(len(points)))
    assert engine.step() is None
    assert engine.state is EngineState.CONVERGED
    assert sorted(c.key() for c in engine.centroids) == start


def test_k_equal_to_point_count_with_float_coordinates():
    points = [(0.0, 0.0), (2.0, 3.0), (7.0, 1.0)]
    engine = KMeansEngine(points, 3, 10, seed=2)
    assert len(list(engine)) == 1
    assert engine.state is EngineState.CONVERGED


def test_single_cluster_moves_to_mean():
    points = [(0, 0), (4, 0), (4, 4), (0, 5), (2, 3)]
    engine = KMeansEngine(points, 1, 10, seed=0)
    snapshots = list(engine)

    assert all(label == 0 for s in snapshots for label in s.labels)
    assert engine.state is EngineState.CONVERGED
    assert [(c.x, c.y) for c in engine.centroids] == [(2, 2)]


def test_exhausted_iterations(two_pairs, fixed_permutation):
    engine = KMeansEngine(two_pairs, 1, max_iterations=1, rng=fixed_permutation([0, 1, 2, 3]))
    assert engine.step() is not None
    assert engine.step() is None
    assert engine.state is EngineState.EXHAUSTED_ITERATIONS
    assert engine.iteration == 1


def test_empty_cluster_is_counted(caplog):
    points = [(0, 0), (1, 0), (0, 1)]
    engine = KMeansEngine(points, 2, 5, initial_centroids=[(0, 0), (100, 100)])
    with caplog.at_level(logging.WARNING, logger='kstep'):
        engine.run()
    assert engine.empty_cluster_events >= 1
    assert (engine.centroids[1].x, engine.centroids[1].y) == (100, 100)
    assert 'empty cluster' in caplog.text


def test_slot_convergence(two_pairs, fixed_permutation):
    engine = KMeansEngine(two_pairs, 2, 10, rng=fixed_permutation([0, 2, 1, 3]),
                          convergence='slots')
    assert len(list(engine)) == 1
    assert engine.state is EngineState.CONVERGED


def test_coinciding_centroids_keep_their_slots():
    points = [(0, 0), (0, 0), (10, 10)]
    engine = KMeansEngine(points, 2, 10, initial_centroids=[(0, 0), (0, 0)])
    engine.run()
    assert len(engine.centroids) == 2
    assert [c.label for c in engine.centroids] == [0, 1]


def test_inertia_decreases():
    points = UniformSampler(300, 300, seed=4).sample(120)
    engine = KMeansEngine(points, 6, 30, seed=4, floor=False)
    engine.step()
    before = engine.inertia()
    engine.run()
    assert engine.inertia() <= before


def test_abandoning_the_run_keeps_snapshots():
    points = UniformSampler(300, 300, seed=8).sample(60)
    engine = KMeansEngine(points, 5, 30, seed=8)
    first = engine.step()
    labels = first.labels
    engine.step()
    assert first.labels == labels
    assert first.iteration == 1


def _run_with(convergence):
    # slot 0 starts empty and stays put, slot 1's mean floors onto slot 0
    points = [(0.6, 0.5), (0.7, 0.2)]
    engine = KMeansEngine(points, 2, 10, initial_centroids=[(0, 0), (1, 0)],
                          convergence=convergence)
    return engine, list(engine)


def test_key_convergence_stops_when_a_slot_lands_on_an_old_key():
    engine, snapshots = _run_with('keys')
    assert engine.state is EngineState.CONVERGED
    assert [s.labels for s in snapshots] == [(1, 1)]
    assert [(c.x, c.y) for c in engine.centroids] == [(0, 0), (0, 0)]


def test_slot_convergence_needs_every_slot_to_stay():
    engine, snapshots = _run_with('slots')
    assert engine.state is EngineState.CONVERGED
    assert [s.labels for s in snapshots] == [(1, 1), (0, 0)]
    assert snapshots[1].centroids == ((0, 0), (0, 0))


def test_inertia_uses_the_assigned_centroids(two_pairs, fixed_permutation):
    engine = KMeansEngine(two_pairs, 1, max_iterations=1, rng=fixed_permutation([0, 1, 2, 3]))
    assert engine.inertia() == 0.0
    last = engine.run()
    assert engine.state is EngineState.EXHAUSTED_ITERATIONS
    assert last.centroids == ((0, 0),)
    assert [(c.x, c.y) for c in engine.centroids] == [(5, 5)]
    # 0 + 1 + 200 + 221 against (0, 0), not the recomputed (5, 5)
    assert engine.inertia() == pytest.approx(422.0)
