"""
Predictor Configuration

Variant selection and table-width parameters, validated before any
predictor state is built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

from .base import ConfigurationError


# Index widths are bounded by the address width
MAX_INDEX_BITS = 32


class Variant(Enum):
    BIMODAL = 'bimodal'
    GSHARE = 'gshare'
    HYBRID = 'hybrid'

    @property
    def parameters(self) -> List[str]:
        """Positional parameter names, in command-line order."""
        return _PARAMETERS[self]

    @classmethod
    def from_name(cls, name: str) -> 'Variant':
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Wrong branch predictor name:{name}"
            ) from None


_PARAMETERS = {
    Variant.BIMODAL: ['M2'],
    Variant.GSHARE: ['M1', 'N'],
    Variant.HYBRID: ['K', 'M1', 'N', 'M2'],
}


@dataclass(frozen=True)
class PredictorConfig:
    """
    Predictor configuration.

    Widths not used by the selected variant stay at zero.
    """
    variant: Variant
    K: int = 0     # Chooser table index bits (hybrid)
    M1: int = 0    # Gshare table index bits (gshare, hybrid)
    N: int = 0     # Global history bits folded into the gshare index
    M2: int = 0    # Bimodal table index bits (bimodal, hybrid)

    def __post_init__(self):
        if not isinstance(self.variant, Variant):
            raise ConfigurationError(f"Unknown variant: {self.variant!r}")

        for name in self.variant.parameters:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"{self.variant.value}: {name} must be an integer, got {value!r}"
                )
            if value < 0:
                raise ConfigurationError(
                    f"{self.variant.value}: {name} must be non-negative, got {value}"
                )
            if value > MAX_INDEX_BITS:
                raise ConfigurationError(
                    f"{self.variant.value}: {name}={value} exceeds the "
                    f"maximum index width of {MAX_INDEX_BITS} bits"
                )

        if self.uses_gshare and self.N > self.M1:
            raise ConfigurationError(
                f"{self.variant.value}: N={self.N} history bits exceed "
                f"the M1={self.M1} bit gshare index"
            )

    @property
    def uses_bimodal(self) -> bool:
        return self.variant in (Variant.BIMODAL, Variant.HYBRID)

    @property
    def uses_gshare(self) -> bool:
        return self.variant in (Variant.GSHARE, Variant.HYBRID)

    @property
    def uses_chooser(self) -> bool:
        return self.variant is Variant.HYBRID

    @property
    def name(self) -> str:
        return self.variant.value

    def parameter_values(self) -> List[int]:
        """Values of the variant's parameters, in command-line order."""
        return [getattr(self, p) for p in self.variant.parameters]

    @classmethod
    def from_args(cls, name: str, params: Sequence[str]) -> 'PredictorConfig':
        """
        Build a configuration from command-line style arguments.

        Args:
            name: Predictor name ('bimodal', 'gshare' or 'hybrid')
            params: Parameter strings in command-line order

        Raises:
            ConfigurationError: Unknown name, wrong parameter count or
                a parameter that is not a non-negative integer
        """
        variant = Variant.from_name(name)
        expected = variant.parameters

        if len(params) != len(expected):
            raise ConfigurationError(
                f"{name} wrong number of inputs:{len(params)} "
                f"(expected {' '.join(expected)})"
            )

        values = {}
        for param, raw in zip(expected, params):
            try:
                values[param] = int(raw, 10)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"{name}: {param} must be an integer, got {raw!r}"
                ) from None

        return cls(variant=variant, **values)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'PredictorConfig':
        """
        Build a configuration from a mapping such as a loaded YAML file.

        Keys: 'predictor' plus the variant's parameters (case-insensitive).
        """
        if 'predictor' not in config:
            raise ConfigurationError("Config is missing 'predictor'")

        variant = Variant.from_name(str(config['predictor']).lower())
        lowered = {str(k).lower(): v for k, v in config.items()}

        missing = [p for p in variant.parameters if p.lower() not in lowered]
        if missing:
            raise ConfigurationError(
                f"{variant.value}: missing parameters {', '.join(missing)}"
            )

        values = {p: lowered[p.lower()] for p in variant.parameters}
        return cls(variant=variant, **values)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'predictor': self.name}
        for param in self.variant.parameters:
            result[param] = getattr(self, param)
        return result
