"""
Lookups over the static encoder catalog defined in `config.encoders`.
"""
from typing import Mapping, Optional, Tuple

from ..config.common import GLOBAL_DEFAULT_QUALITY
from ..config.encoders import DEFAULT_QUALITY_VALUES, ENCODER_CANDIDATES
from ..domain.models import CodecFamily


class EncoderCatalog:
    """
    Maps each codec family to its encoder candidates and recommended quality.

    The default tables come from `config.encoders`; tests may pass their
    own. The catalog is read-only.
    """

    def __init__(
        self,
        candidates: Mapping[CodecFamily, Tuple[str, ...]] = ENCODER_CANDIDATES,
        default_qualities: Mapping[CodecFamily, int] = DEFAULT_QUALITY_VALUES,
    ):
        self._candidates = candidates
        self._default_qualities = default_qualities

    def families(self) -> Tuple[CodecFamily, ...]:
        return tuple(self._candidates.keys())

    def candidates_for(self, family: Optional[CodecFamily]) -> Tuple[str, ...]:
        """Returns the candidates for `family` in catalog order, or () if unknown."""
        return tuple(self._candidates.get(family, ()))

    def default_quality_for(self, family: Optional[CodecFamily]) -> int:
        return self._default_qualities.get(family, GLOBAL_DEFAULT_QUALITY)
