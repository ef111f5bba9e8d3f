from typing import Dict, Iterable

SATURATION = 70
LIGHTNESS = 50


def get_packet_color_map(packet_ids: Iterable[str]) -> Dict[str, str]:
    """
    Spread packet ids evenly around the hue wheel.

    Ids are de-duplicated and sorted first so the same set always maps to the
    same colors, whatever order it arrives in.
    """
    unique_ids = sorted(set(packet_ids))
    count = len(unique_ids)

    colors: Dict[str, str] = {}
    for i, packet_id in enumerate(unique_ids):
        hue = _round_half_up(i * 360 / count)
        colors[packet_id] = f"hsl({hue}, {SATURATION}%, {LIGHTNESS}%)"
    return colors


def _round_half_up(value: float) -> int:
    # round() would send 22.5 to 22
    return int(value + 0.5)
