"""Chord qualities used to map the constellation to pitches."""

from enum import Enum
from typing import List


class Chord(str, Enum):
    """Closed set of chord qualities, all rooted on C."""

    CMAJ = "Cmaj"
    CMIN = "Cmin"
    CAUG = "Caug"  # Kinda dissonant
    C7 = "C7"
    CMAJ7 = "Cmaj7"
    CMIN7 = "Cmin7"
    CHALFDIM7 = "Chalfdim7"
    CMINMAJ7 = "CminMaj7"  # Kinda dissonant
    C9 = "C9"
    CMAJ9 = "Cmaj9"
    CMIN9 = "Cmin9"
    C11 = "C11"
    C13 = "C13"

    @property
    def intervals(self) -> List[int]:
        """Semitone offsets from the root."""
        return list(CHORD_INTERVALS[self])


CHORD_INTERVALS = {
    Chord.CMAJ: (0, 4, 7),
    Chord.CMIN: (0, 3, 7),
    Chord.CAUG: (0, 4, 8),
    Chord.C7: (0, 4, 7, 10),
    Chord.CMAJ7: (0, 4, 7, 11),
    Chord.CMIN7: (0, 3, 7, 10),
    Chord.CHALFDIM7: (0, 3, 6, 10),
    Chord.CMINMAJ7: (0, 3, 7, 11),
    Chord.C9: (0, 4, 7, 10, 14),
    Chord.CMAJ9: (0, 4, 7, 11, 14),
    Chord.CMIN9: (0, 3, 7, 10, 14),
    # 4 clashes with 17 (17 - 12 = 5)
    Chord.C11: (0, 4, 7, 10, 14, 17),
    Chord.C13: (0, 4, 7, 10, 14, 17, 21),
}
