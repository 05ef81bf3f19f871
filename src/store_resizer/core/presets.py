"""常见商店素材尺寸预设。"""

from __future__ import annotations

from dataclasses import dataclass

from store_resizer.core.exceptions import InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class DevicePreset:
    key: str
    label: str
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


PRESETS: tuple[DevicePreset, ...] = (
    DevicePreset("iphone-5.5", 'iPhone 5.5"', 1242, 2208),
    DevicePreset("iphone-6.5", 'iPhone 6.5"', 1242, 2688),
    DevicePreset("iphone-6.7", 'iPhone 6.7"', 1290, 2796),
    DevicePreset("iphone-6.9", 'iPhone 6.9"', 1320, 2868),
    DevicePreset("ipad-12.9", 'iPad Pro 12.9"', 2048, 2732),
    DevicePreset("ipad-11", 'iPad Pro 11"', 1668, 2388),
    DevicePreset("mac", "Mac App Store", 2880, 1800),
    DevicePreset("app-icon", "App Store 图标", 1024, 1024),
    DevicePreset("play-icon", "Google Play 图标", 512, 512),
    DevicePreset("play-feature", "Google Play 宣传图", 1024, 500),
)

DEFAULT_PRESET = PRESETS[0]

_BY_KEY = {preset.key: preset for preset in PRESETS}


def get_preset(key: str) -> DevicePreset:
    """按 key 查找预设。"""

    try:
        return _BY_KEY[key.strip().lower()]
    except KeyError as exc:
        known = ", ".join(_BY_KEY)
        raise InvalidConfigurationError(f"未知的预设: {key}（可选: {known}）") from exc


def find_preset_by_label(label: str) -> DevicePreset | None:
    return next((preset for preset in PRESETS if preset.label == label), None)
