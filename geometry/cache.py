"""
Single-entry memo for derived geometry.

Views recompute geometry from (samples, viewport size, target, ...). The last
inputs and their result are kept; any change throws the entry away.
"""
import logging

logger = logging.getLogger(__name__)


class GeometryCache:
    """
    Remembers the geometry built for the most recent inputs.

    The sample sequence is matched by identity (sequences are immutable and
    replaced wholesale), everything else in the key by equality.
    """

    def __init__(self, name: str = "geometry"):
        self.name = name
        self._samples = None
        self._key = None
        self._value = None
        self._filled = False
        self.hits = 0
        self.misses = 0

    def get(self, samples, key, build):
        """
        Return the cached value for (samples, key) or call ``build()``.

        Args:
            samples: Sample sequence the geometry derives from
            key: Hashable/comparable tuple of the remaining inputs
            build: Zero-argument callable producing the geometry
        """
        if self._filled and samples is self._samples and key == self._key:
            self.hits += 1
            return self._value
        self.misses += 1
        value = build()
        self._samples = samples
        self._key = key
        self._value = value
        self._filled = True
        logger.debug(f"{self.name}: rebuilt for key={key}")
        return value

    def clear(self):
        self._samples = None
        self._key = None
        self._value = None
        self._filled = False
