"""
Performance benchmarks for feature classification.

Run with: python -m benchmarks.bench_classify
"""
import random
import time
from statistics import mean, stdev

from shapely.geometry import LineString, Point, box

from tilekinds.admin import RelationMembership
from tilekinds.features import RelationMember, SimpleFeature
from tilekinds.profile import Profile


WATERWAYS = ["river", "stream", "canal", "drain", "ditch"]
SEAS = ["North Sea", "Black Sea", "Caribbean Sea", "Irish Sea"]


def make_features(count: int = 2000, seed: int = 7) -> list:
    """A mixed batch of OSM and Natural Earth features."""
    rng = random.Random(seed)
    features = []
    for i in range(count):
        x, y = rng.random() * 0.9, rng.random() * 0.9
        size = rng.random() * 0.01
        pick = i % 5
        if pick == 0:
            features.append(SimpleFeature(
                LineString([(x, y), (x + size, y + size)]),
                {"waterway": rng.choice(WATERWAYS), "name": f"River {i}"},
                source="osm", id=i, osm_type="way",
            ))
        elif pick == 1:
            features.append(SimpleFeature(
                box(x, y, x + size, y + size),
                {"natural": "water", "water": "pond", "name": f"Lake {i}"},
                source="osm", id=i, osm_type="way",
            ))
        elif pick == 2:
            level = rng.choice([2, 4, 6, 8])
            features.append(SimpleFeature(
                box(x, y, x + size, y + size),
                {"name": f"Area {i}"},
                source="osm", id=i, osm_type="way",
                relations=[RelationMember("", RelationMembership(i, level))],
            ))
        elif pick == 3:
            features.append(SimpleFeature(
                Point(x, y),
                {"place": "sea", "name:en": rng.choice(SEAS)},
                source="osm", id=i, osm_type="node",
            ))
        else:
            features.append(SimpleFeature(
                box(x, y, x + size, y + size),
                {"featurecla": "Lake", "min_zoom": str(rng.randint(0, 6))},
                source="ne", source_layer=rng.choice(["ne_50m_lakes", "ne_10m_lakes"]), id=i,
            ))
    return features


def _time_classify_all(max_workers, iterations: int):
    profile = Profile()
    features = make_features()

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        profile.classify_all(features, max_workers=max_workers)
        elapsed = time.perf_counter() - start
        times.append(elapsed * 1000)

    return {
        "features": len(features),
        "iterations": iterations,
        "mean_ms": mean(times),
        "stdev_ms": stdev(times) if len(times) > 1 else 0,
    }


def benchmark_sequential(iterations: int = 10):
    """Benchmark classification on the calling thread."""
    return {"test": "sequential", **_time_classify_all(1, iterations)}


def benchmark_thread_pool(iterations: int = 10):
    """Benchmark classification on a thread pool."""
    return {"test": "thread_pool", **_time_classify_all(8, iterations)}


def benchmark_single_feature(iterations: int = 5000):
    """Benchmark one water polygon with a label."""
    profile = Profile()
    sf = SimpleFeature(
        box(0.5, 0.5, 0.501, 0.501),
        {"natural": "water", "name": "Lake", "name:en": "Lake"},
        source="osm", id=1, osm_type="way",
    )

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        profile.classify(sf)
        elapsed = time.perf_counter() - start
        times.append(elapsed * 1000)

    return {
        "test": "single_feature",
        "iterations": iterations,
        "mean_ms": mean(times),
        "stdev_ms": stdev(times) if len(times) > 1 else 0,
    }


def run_benchmarks():
    """Run all classification benchmarks."""
    print("=" * 60)
    print("Classification Performance Benchmarks")
    print("=" * 60)

    benchmarks = [
        ("Single Feature", benchmark_single_feature),
        ("Batch (sequential)", benchmark_sequential),
        ("Batch (8 threads)", benchmark_thread_pool),
    ]

    print(f"\n{'Benchmark':<25} {'Mean (ms)':<12} {'Stdev':<10} {'Status':<15}")
    print("-" * 60)

    for name, func in benchmarks:
        try:
            result = func()
            print(f"{name:<25} {result['mean_ms']:<12.3f} {result['stdev_ms']:<10.3f} {'OK':<15}")
        except Exception as e:
            print(f"{name:<25} {'--':<12} {'--':<10} ERROR: {e}")

    print("=" * 60)


if __name__ == "__main__":
    run_benchmarks()
