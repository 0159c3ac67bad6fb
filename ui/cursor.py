"""
Shared hover position for all views of the loaded lap.
"""
import logging
import math
from typing import Optional

from PyQt5 import QtCore

logger = logging.getLogger(__name__)


class ActiveCursor(QtCore.QObject):
    """
    Owns the "currently hovered distance" of the loaded lap.

    Views never talk to each other: each one gets ``set`` as its hover
    callback and listens to ``changed``. Writes are last-write-wins.

    Signals:
        changed(object) - new distance in metres, or None when cleared
    """
    changed = QtCore.pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._value: Optional[float] = None

    @property
    def value(self) -> Optional[float]:
        return self._value

    def set(self, distance: Optional[float]):
        if distance is not None:
            distance = float(distance)
            if not math.isfinite(distance):
                distance = None
        if distance == self._value:
            return
        self._value = distance
        self.changed.emit(distance)

    def clear(self):
        self.set(None)
