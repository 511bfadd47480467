import math
import pygame
from klondike import common as C


class TitleScene(C.Scene):
    def __init__(self, app):
        super().__init__(app)
        self._prompt_text = "Click or press Enter/Space to play - Esc quits"
        self._pulse_period_ms = 1600  # slow flash

    def _start_game(self):
        from klondike.scenes.game import KlondikeGameScene
        rng = self.app.make_rng() if self.app is not None else None
        self.next_scene = KlondikeGameScene(self.app, rng=rng)

    def handle_event(self, e):
        # Enter/Space: start a deal; Esc or Q: confirm quit
        if e.type == pygame.KEYDOWN:
            if e.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                self._start_game(); return
            elif e.key in (pygame.K_ESCAPE, pygame.K_q):
                pygame.event.post(pygame.event.Event(pygame.QUIT))
        if e.type == pygame.MOUSEBUTTONDOWN:
            if e.button in (1, 2, 3):
                self._start_game(); return

    def draw(self, screen):
        screen.fill(C.TABLE_BG)
        title = C.FONT_TITLE.render("Klondike Patience", True, C.WHITE)
        screen.blit(title, (C.SCREEN_W//2 - title.get_width()//2, C.SCREEN_H//2 - title.get_height() - 20))

        prompt = C.FONT_UI.render(self._prompt_text, True, C.WHITE)
        # Pulse alpha between ~110 and 255
        t = pygame.time.get_ticks() % self._pulse_period_ms
        phase = (t / self._pulse_period_ms) * 2 * math.pi
        alpha = int(110 + 145 * (0.5 + 0.5 * math.sin(phase)))  # [110..255]
        prompt.set_alpha(alpha)
        rect = prompt.get_rect()
        rect.centerx = C.SCREEN_W // 2
        rect.top = C.SCREEN_H // 2 + 24
        screen.blit(prompt, rect)
