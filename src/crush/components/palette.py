from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple


@dataclass(slots=True)
class PaletteRegistry:
    """Tag marking the singleton entity that carries the ColorPalette."""


@dataclass(slots=True)
class ColorPalette:
    """Canonical token colors stored on a single entity.

    ``colors`` maps each color name to the RGB used by presentation layers;
    ``spawnable`` lists the names new tokens are drawn from.
    """
    colors: Dict[str, Tuple[int, int, int]]
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.set_spawnable(self.spawnable or self.colors.keys())

    def _filter(self, names: Iterable[str]) -> List[str]:
        seen: set[str] = set()
        filtered: List[str] = []
        for name in names:
            if name in self.colors and name not in seen:
                filtered.append(name)
                seen.add(name)
        return filtered

    def rgb_for(self, name: str) -> Tuple[int, int, int]:
        return self.colors[name]

    def spawnable_colors(self) -> List[str]:
        return list(self.spawnable)

    def set_spawnable(self, names: Iterable[str]) -> None:
        filtered = self._filter(names)
        if len(filtered) < 3:
            raise ValueError(f"At least three spawnable colors are required, got {filtered}")
        self.spawnable = filtered
