"""Settings and statistics side-stores persisted alongside the game."""

from .constants import (DEFAULT_FONT, DEFAULT_GAMEPLAY_SETTINGS, DEFAULT_THEME, DIFFICULTIES,
                        FONTS, THEMES)


class SettingsState:
    def __init__(self, theme=DEFAULT_THEME, font=DEFAULT_FONT, gameplay=None):
        self.theme = theme
        self.font = font
        # Missing keys fall back to defaults so older toggles never vanish
        self.gameplay = dict(DEFAULT_GAMEPLAY_SETTINGS)
        self.gameplay.update(gameplay or {})

    def get(self, key):
        return self.gameplay[key]

    def set(self, key, value):
        if key not in DEFAULT_GAMEPLAY_SETTINGS:
            raise KeyError(f"Unknown gameplay setting: {key!r}")
        self.gameplay[key] = bool(value)

    def set_theme(self, theme):
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self.theme = theme

    def to_dict(self):
        return {'theme': self.theme, 'font': self.font, 'gameplay': dict(self.gameplay)}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("Stored settings must be an object")
        gameplay = {key: bool(value) for key, value in data.get('gameplay', {}).items()
                    if key in DEFAULT_GAMEPLAY_SETTINGS}
        theme = data.get('theme', DEFAULT_THEME)
        font = data.get('font', DEFAULT_FONT)
        return cls(theme if theme in THEMES else DEFAULT_THEME,
                   font if font in FONTS else DEFAULT_FONT,
                   gameplay)


class Statistics:
    """Completion count, best time per difficulty (0 = none yet) and total play time."""

    def __init__(self, games_completed=0, best_times=None, total_play_time=0):
        self.games_completed = games_completed
        self.best_times = {difficulty: 0 for difficulty in DIFFICULTIES}
        self.best_times.update(best_times or {})
        self.total_play_time = total_play_time

    def record_completion(self, difficulty, seconds):
        self.games_completed += 1
        self.total_play_time += seconds
        best = self.best_times.get(difficulty, 0)
        if best == 0 or seconds < best:
            self.best_times[difficulty] = seconds

    def to_dict(self):
        return {
            'gamesCompleted': self.games_completed,
            'bestTimes': dict(self.best_times),
            'totalPlayTime': self.total_play_time,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("Stored statistics must be an object")
        best_times = {key: int(value) for key, value in data.get('bestTimes', {}).items()
                      if key in DIFFICULTIES}
        return cls(int(data.get('gamesCompleted', 0)), best_times, int(data.get('totalPlayTime', 0)))
