"""Keyboard bindings: translates pygame key events into engine calls."""

import pygame

# Digit keys on the main row and on the keypad
KEY_DIGITS = {
    pygame.K_1: 1, pygame.K_2: 2, pygame.K_3: 3, pygame.K_4: 4, pygame.K_5: 5,
    pygame.K_6: 6, pygame.K_7: 7, pygame.K_8: 8, pygame.K_9: 9,
    pygame.K_KP1: 1, pygame.K_KP2: 2, pygame.K_KP3: 3, pygame.K_KP4: 4, pygame.K_KP5: 5,
    pygame.K_KP6: 6, pygame.K_KP7: 7, pygame.K_KP8: 8, pygame.K_KP9: 9
}

ARROWS = {
    pygame.K_UP: (-1, 0),
    pygame.K_DOWN: (1, 0),
    pygame.K_LEFT: (0, -1),
    pygame.K_RIGHT: (0, 1),
}

CLEAR_KEYS = (pygame.K_DELETE, pygame.K_BACKSPACE, pygame.K_0, pygame.K_KP0)
PENCIL_KEYS = (pygame.K_n, pygame.K_p)


class KeyboardController:
    def __init__(self, engine):
        self.engine = engine
        # In pencil mode digits toggle notes instead of placing values
        self.pencil_mode = False

    def handle_key(self, key, mod=0):
        """Processes one key press. Returns True if the key was bound to an action."""
        engine = self.engine
        ctrl = bool(mod & (pygame.KMOD_CTRL | pygame.KMOD_META))
        shift = bool(mod & pygame.KMOD_SHIFT)

        if ctrl and key == pygame.K_z:
            if shift:
                engine.redo()
            else:
                engine.undo()
            return True
        if ctrl and key == pygame.K_y:
            engine.redo()
            return True

        if key in PENCIL_KEYS:
            self.pencil_mode = not self.pencil_mode
            return True

        if key == pygame.K_ESCAPE:
            if engine.is_paused:
                engine.resume_game()
            else:
                engine.pause_game()
            return True

        if key in ARROWS:
            engine.move_selection(*ARROWS[key])
            return True

        # Ignore number entry if no cell is selected
        if engine.selected is None:
            return False

        num = KEY_DIGITS.get(key)
        if num is not None:
            if self.pencil_mode:
                engine.toggle_note(num)
            else:
                engine.set_number(num)
            return True

        if key in CLEAR_KEYS:
            engine.clear_cell()
            return True
        return False

    def handle_event(self, event):
        if event.type != pygame.KEYDOWN:
            return False
        return self.handle_key(event.key, getattr(event, 'mod', 0))
