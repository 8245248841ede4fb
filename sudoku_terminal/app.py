"""
Pygame front end: renders the engine state and turns clicks, keys and the
one-second timer cadence into engine calls.
"""

import logging

import pygame

from .constants import DIFFICULTIES, DIFFICULTY_CONFIG, GRID_SIZE
from .constraints import box_origin
from .controls import KeyboardController
from .storage import GameStorage

logger = logging.getLogger(__name__)

TICK_EVENT = pygame.USEREVENT + 1


class SudokuApp:
    def __init__(self, storage=None, provider=None):
        pygame.init()
        self.WINDOW_WIDTH = 800
        self.WINDOW_HEIGHT = 700

        self.screen = pygame.display.set_mode((self.WINDOW_WIDTH, self.WINDOW_HEIGHT))
        pygame.display.set_caption("Sudoku Terminal")

        # Color Palette
        self.BG_COLOR = (245, 247, 250)
        self.GRID_BG = (255, 255, 255)
        self.BLACK = (30, 30, 30)
        self.GRAY = (180, 190, 200)
        self.PRIMARY = (79, 70, 229)
        self.PRIMARY_LIGHT = (129, 140, 248)
        self.PRIMARY_DARK = (55, 48, 163)
        self.SUCCESS = (34, 197, 94)
        self.ERROR = (239, 68, 68)
        self.WARNING = (251, 191, 36)
        self.SELECTION_BORDER = (129, 140, 248)
        self.IDENTICAL = (199, 210, 254)
        self.TEXT_GRAY = (100, 116, 139)
        self.SUBGRID_LINE = (203, 213, 225)
        self.CONFLICT_HIGHLIGHT = (255, 100, 100)

        # Grid positioning
        self.GRID_SIZE = 450
        self.CELL_SIZE = self.GRID_SIZE // GRID_SIZE
        self.GRID_X = 30
        self.GRID_Y = 80
        self.PANEL_X = self.GRID_X + self.GRID_SIZE + 20
        self.PANEL_WIDTH = 280

        # Fonts
        self.font_title = pygame.font.Font(None, 48)
        self.font_large = pygame.font.Font(None, 42)
        self.font_medium = pygame.font.Font(None, 32)
        self.font_small = pygame.font.Font(None, 22)
        self.font_tiny = pygame.font.Font(None, 16)

        # Engine restored from disk; saved again after every change but timer ticks
        self.storage = storage or GameStorage()
        self.engine = self.storage.restore_engine(provider=provider)
        self.keyboard = KeyboardController(self.engine)
        self.engine.subscribe(self.on_engine_change)

        self.message = ""
        self.message_color = self.TEXT_GRAY
        self.buttons = []

        if not self.engine.has_game:
            self.engine.start_new_game(self.engine.difficulty)

    def on_engine_change(self, engine, action):
        if action != 'tick':
            self.storage.save_engine(engine)

    def show_message(self, text, color):
        self.message = text
        self.message_color = color

    # ---------------------------------------------------------------------
    # Button actions
    # ---------------------------------------------------------------------
    def new_game(self, difficulty=None):
        self.engine.start_new_game(difficulty or self.engine.difficulty)
        self.show_message("", self.TEXT_GRAY)

    def check_cell(self):
        result = self.engine.check_cell()
        if not result.checked:
            self.show_message("Select a filled cell to check", self.TEXT_GRAY)
        elif result.correct:
            self.show_message("Correct!", self.SUCCESS)
        else:
            self.show_message("Incorrect", self.ERROR)

    def check_puzzle(self):
        result = self.engine.check_puzzle()
        color = self.ERROR if result.incorrect else self.SUCCESS
        self.show_message(f"{result.correct} correct, {result.incorrect} incorrect "
                          f"of {result.filled} entries", color)

    def toggle_auto_notes(self):
        self.engine.set_gameplay_setting('autoNotes', not self.engine.auto_notes)

    def toggle_pause(self):
        if self.engine.is_paused:
            self.engine.resume_game()
        else:
            self.engine.pause_game()

    def toggle_pencil(self):
        self.keyboard.pencil_mode = not self.keyboard.pencil_mode

    def button_specs(self):
        notes_label = "Notes: ON" if self.keyboard.pencil_mode else "Notes: OFF"
        auto_label = "Auto notes: ON" if self.engine.auto_notes else "Auto notes: OFF"
        hint_label = f"Hint ({self.engine.hints_remaining})" if self.engine.hints_allowed else "No hints"
        return [
            ("New Game", self.new_game, self.PRIMARY),
            (hint_label, self.engine.use_hint, self.SUCCESS),
            ("Undo", self.engine.undo, self.TEXT_GRAY),
            ("Redo", self.engine.redo, self.TEXT_GRAY),
            (notes_label, self.toggle_pencil, self.PRIMARY_LIGHT),
            (auto_label, self.toggle_auto_notes, self.PRIMARY_LIGHT),
            ("Check Cell", self.check_cell, self.WARNING),
            ("Check Puzzle", self.check_puzzle, self.WARNING),
            ("Reveal Cell", self.engine.reveal_cell, self.ERROR),
            ("Reveal Puzzle", self.engine.reveal_puzzle, self.ERROR),
            ("Reset", self.engine.reset_puzzle, self.TEXT_GRAY),
            ("Pause", self.toggle_pause, self.TEXT_GRAY),
        ]

    # ---------------------------------------------------------------------
    # Drawing
    # ---------------------------------------------------------------------
    def draw_rounded_rect(self, surface, color, rect, radius=8):
        pygame.draw.rect(surface, color, pygame.Rect(rect), border_radius=radius)

    def draw_button(self, text, x, y, width, height, color, text_color):
        """Draws a clickable button and returns its rect."""
        self.draw_rounded_rect(self.screen, color, (x, y, width, height), 8)
        text_surface = self.font_small.render(text, True, text_color)
        self.screen.blit(text_surface, text_surface.get_rect(center=(x + width // 2, y + height // 2)))
        return pygame.Rect(x, y, width, height)

    def cell_rect(self, row, col):
        return pygame.Rect(self.GRID_X + col * self.CELL_SIZE, self.GRID_Y + row * self.CELL_SIZE,
                           self.CELL_SIZE, self.CELL_SIZE)

    def fill_cell(self, row, col, color, alpha):
        rect = self.cell_rect(row, col)
        surf = pygame.Surface((rect.width, rect.height))
        surf.set_alpha(alpha)
        surf.fill(color)
        self.screen.blit(surf, rect.topleft)

    def draw_highlights(self):
        """Paints selection-related highlights according to the gameplay settings."""
        engine = self.engine
        settings = engine.settings

        if engine.selected is not None:
            row, col = engine.selected
            if settings.get('highlightRowColumn'):
                for i in range(GRID_SIZE):
                    self.fill_cell(row, i, self.PRIMARY_LIGHT, 30)
                    self.fill_cell(i, col, self.PRIMARY_LIGHT, 30)
            if settings.get('highlightBox'):
                box_row, box_col = box_origin(row, col)
                for i in range(box_row, box_row + 3):
                    for j in range(box_col, box_col + 3):
                        self.fill_cell(i, j, self.PRIMARY_LIGHT, 30)
            value = engine.selected_value()
            if value and settings.get('highlightIdentical'):
                for r, c, cell in engine.grid.positions():
                    if cell.value == value:
                        self.fill_cell(r, c, self.IDENTICAL, 120)
            pygame.draw.rect(self.screen, self.SELECTION_BORDER, self.cell_rect(row, col).inflate(-4, -4), 3)

        if settings.get('highlightConflicts'):
            for row, col in engine.conflicting_cells():
                self.fill_cell(row, col, self.CONFLICT_HIGHLIGHT, 80)

    def draw_grid(self):
        """Draws the main Sudoku grid lines."""
        self.draw_rounded_rect(self.screen, self.GRID_BG,
                               (self.GRID_X, self.GRID_Y, self.GRID_SIZE, self.GRID_SIZE), 4)
        for i in range(GRID_SIZE + 1):
            thickness = 3 if i % 3 == 0 else 1
            color = self.BLACK if i % 3 == 0 else self.SUBGRID_LINE
            offset = i * self.CELL_SIZE
            pygame.draw.line(self.screen, color, (self.GRID_X, self.GRID_Y + offset),
                             (self.GRID_X + self.GRID_SIZE, self.GRID_Y + offset), thickness)
            pygame.draw.line(self.screen, color, (self.GRID_X + offset, self.GRID_Y),
                             (self.GRID_X + offset, self.GRID_Y + self.GRID_SIZE), thickness)

    def draw_numbers(self):
        """Renders values, or the active note layer for empty cells."""
        engine = self.engine
        show_mistakes = (engine.settings.get('autoCheckMistakes')
                         and DIFFICULTY_CONFIG[engine.difficulty]['highlight_mistakes'])
        third = self.CELL_SIZE // 3

        for r, c, cell in engine.grid.positions():
            rect = self.cell_rect(r, c)
            if cell.value:
                if cell.is_given:
                    color = self.BLACK
                elif show_mistakes and engine.is_incorrect(r, c):
                    color = self.ERROR
                else:
                    color = self.PRIMARY
                text = self.font_large.render(str(cell.value), True, color)
                self.screen.blit(text, text.get_rect(center=rect.center))
                continue

            notes = cell.auto_notes if engine.auto_notes else cell.manual_notes
            for num in notes:
                nx = rect.x + ((num - 1) % 3) * third + third // 2
                ny = rect.y + ((num - 1) // 3) * third + third // 2
                text = self.font_tiny.render(str(num), True, self.TEXT_GRAY)
                self.screen.blit(text, text.get_rect(center=(nx, ny)))

    def draw_stat_card(self, label, value, x, y, width):
        """Draws a statistic display card."""
        self.draw_rounded_rect(self.screen, self.GRID_BG, (x, y, width, 50), 8)
        self.screen.blit(self.font_tiny.render(label, True, self.TEXT_GRAY), (x + 12, y + 10))
        self.screen.blit(self.font_medium.render(str(value), True, self.BLACK), (x + 12, y + 24))

    def draw_ui(self):
        """Draws the title, the side panel and the message line."""
        engine = self.engine
        title = self.font_title.render("Sudoku Terminal", True, self.PRIMARY_DARK)
        self.screen.blit(title, title.get_rect(center=(self.WINDOW_WIDTH // 2, 35)))

        panel_x, width = self.PANEL_X, self.PANEL_WIDTH
        half = (width - 10) // 2
        if engine.settings.get('showTimer'):
            self.draw_stat_card("TIME", format_time(engine.timer), panel_x, 80, half)
        if engine.settings.get('showMistakes'):
            self.draw_stat_card("MISTAKES", engine.mistakes, panel_x + half + 10, 80, half)

        best = engine.stats.best_times.get(engine.difficulty, 0)
        self.draw_stat_card("BEST", format_time(best) if best else "--:--", panel_x, 140, half)
        self.draw_stat_card("SOLVED", engine.stats.games_completed, panel_x + half + 10, 140, half)

        # Difficulty selector
        self.buttons = []
        diff_width = (width - 10) // len(DIFFICULTIES)
        for i, diff in enumerate(DIFFICULTIES):
            active = diff == engine.difficulty
            rect = self.draw_button(DIFFICULTY_CONFIG[diff]['label'], panel_x + i * (diff_width + 5), 205,
                                    diff_width, 32, self.PRIMARY if active else self.GRAY, (255, 255, 255))
            self.buttons.append((rect, lambda d=diff: self.new_game(d)))

        # Action buttons in two columns
        for i, (label, action, color) in enumerate(self.button_specs()):
            x = panel_x + (i % 2) * (half + 10)
            y = 250 + (i // 2) * 44
            rect = self.draw_button(label, x, y, half, 36, color, (255, 255, 255))
            self.buttons.append((rect, action))

        if self.message:
            msg_y = self.GRID_Y + self.GRID_SIZE + 15
            text = self.font_small.render(self.message, True, self.message_color)
            self.screen.blit(text, (self.GRID_X, msg_y))

    def draw_overlay(self, title, subtitle, color):
        overlay = pygame.Surface((self.WINDOW_WIDTH, self.WINDOW_HEIGHT))
        overlay.set_alpha(200)
        overlay.fill((20, 20, 30))
        self.screen.blit(overlay, (0, 0))

        mx, my = (self.WINDOW_WIDTH - 400) // 2, (self.WINDOW_HEIGHT - 200) // 2
        self.draw_rounded_rect(self.screen, self.GRID_BG, (mx, my, 400, 200), 16)
        t = self.font_title.render(title, True, color)
        self.screen.blit(t, t.get_rect(center=(self.WINDOW_WIDTH // 2, my + 60)))
        s = self.font_small.render(subtitle, True, self.TEXT_GRAY)
        self.screen.blit(s, s.get_rect(center=(self.WINDOW_WIDTH // 2, my + 130)))

    def draw(self):
        self.screen.fill(self.BG_COLOR)
        self.draw_grid()
        self.draw_highlights()
        self.draw_numbers()
        self.draw_ui()

        if self.engine.is_paused:
            self.draw_overlay("Paused", "Press ESC or click to resume", self.PRIMARY)
        elif self.engine.is_complete:
            self.draw_overlay("Solved!", f"Time {format_time(self.engine.timer)}  -  "
                              f"press SPACE for a new game", self.SUCCESS)

    # ---------------------------------------------------------------------
    # Input
    # ---------------------------------------------------------------------
    def handle_click(self, pos):
        """Processes mouse clicks for grid selection and UI buttons."""
        if self.engine.is_paused:
            self.engine.resume_game()
            return

        x, y = pos
        if (self.GRID_X <= x < self.GRID_X + self.GRID_SIZE and
                self.GRID_Y <= y < self.GRID_Y + self.GRID_SIZE):
            col = (x - self.GRID_X) // self.CELL_SIZE
            row = (y - self.GRID_Y) // self.CELL_SIZE
            self.engine.select_cell(row, col)
            return

        for rect, action in self.buttons:
            if rect.collidepoint(pos):
                action()
                return

    def handle_key(self, event):
        if self.engine.is_complete and event.key == pygame.K_SPACE:
            self.new_game()
            return
        self.keyboard.handle_event(event)

    def run(self):
        """Main game loop."""
        clock = pygame.time.Clock()
        pygame.time.set_timer(TICK_EVENT, 1000)
        running = True

        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == TICK_EVENT:
                    self.engine.increment_timer()
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)
                elif event.type == pygame.KEYDOWN:
                    self.handle_key(event)

            self.draw()
            pygame.display.flip()
            clock.tick(30)

        # Stop the cadence before tearing the view down
        pygame.time.set_timer(TICK_EVENT, 0)
        self.storage.save_engine(self.engine)
        logger.info("Saved game to %s", self.storage.filename)
        pygame.quit()


def format_time(seconds):
    minutes, seconds = divmod(int(seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"
