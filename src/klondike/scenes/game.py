# game.py - Klondike table: drag/drop, click-to-draw, flip-on-click, auto finish and win cascade
import logging
import random
import pygame
from typing import Callable, List, Optional, Tuple

from klondike import common as C
from klondike.cards import Card
from klondike.solitaire import DISCARD, FOUNDATION_COUNT, TABLEAU_COUNT, Solitaire

logger = logging.getLogger(__name__)

FAN_FACE_DOWN = 14
FAN_FACE_UP = 30
MIN_FAN_FACE_DOWN = 6
MIN_FAN_FACE_UP = 12
DOUBLE_CLICK_MS = 350
AUTO_INTERVAL_MS = 180
CASCADE_INTERVAL_MS = 90
BOTTOM_BAR_H = 40

TOOL_BUTTON_H = 36
TOOL_BUTTON_PAD_X = 12
TOOL_BUTTON_GAP = 8
TOOLBAR_MARGIN = 12

FOUNDATION = "foundation"
TABLEAU = "tableau"


class _FallingCard:
    __slots__ = ("card", "x", "y", "vx", "vy")

    def __init__(self, card, x, y, vx, vy):
        self.card = card
        self.x, self.y = x, y
        self.vx, self.vy = vx, vy


class _ToolButton:
    """One toolbar action; greyed out while ``enabled`` returns False."""
    __slots__ = ("label", "action", "enabled", "rect", "hover")

    def __init__(self, label: str, action: Callable[[], None], enabled: Optional[Callable[[], bool]] = None):
        self.label = label
        self.action = action
        self.enabled = enabled
        self.hover = False
        text_w, _ = C.FONT_SMALL.size(label)
        self.rect = pygame.Rect(0, 0, text_w + 2 * TOOL_BUTTON_PAD_X, TOOL_BUTTON_H)

    def is_enabled(self) -> bool:
        return self.enabled is None or bool(self.enabled())


class KlondikeGameScene(C.Scene):
    def __init__(self, app, rng=None):
        super().__init__(app)
        self.rng = rng if rng is not None else random.Random()
        self.game = Solitaire(rng=self.rng)
        self.moves = 0
        self.message = ""
        self.drag = None  # (source_kind, source_index, card_index, cards, (offset_x, offset_y))
        self.drag_pos = (0, 0)
        self._last_click: Tuple[int, object, int] = (-10_000, None, -1)

        self.elapsed_ms = 0
        self.timer_running = False

        self.auto_play_active = False
        self.auto_last_time = 0
        self.cascade_active = False
        self.cascade_last_time = 0
        self.falling: List[_FallingCard] = []

        self.tool_buttons = [
            _ToolButton("Menu", self.goto_title),
            _ToolButton("New", self.deal_new),
            _ToolButton("Auto", self.start_auto_finish, self._auto_finish_available),
            _ToolButton("Back", self.cycle_card_back),
        ]
        self.compute_layout()
        self.deal_new()

    # ---------- Layout ----------
    def compute_layout(self):
        left = 40
        top = C.TOP_BAR_H + 10
        col_w = C.CARD_W + C.CARD_GAP_X
        self.tableau_x = [left + i * col_w for i in range(TABLEAU_COUNT)]
        self.stock_xy = (self.tableau_x[0], top)
        self.waste_xy = (self.tableau_x[1], top)
        self.foundation_xy = [(self.tableau_x[3 + i], top) for i in range(FOUNDATION_COUNT)]
        self.tableau_y = top + C.CARD_H + 30

        # Toolbar hugs the top-right corner
        width = sum(b.rect.width for b in self.tool_buttons) + TOOL_BUTTON_GAP * (len(self.tool_buttons) - 1)
        x = C.SCREEN_W - TOOLBAR_MARGIN - width
        for b in self.tool_buttons:
            b.rect.topleft = (x, TOOLBAR_MARGIN)
            x += b.rect.width + TOOL_BUTTON_GAP

    def _card_rect(self, xy):
        return pygame.Rect(xy[0], xy[1], C.CARD_W, C.CARD_H)

    def tableau_fan(self, ti: int) -> Tuple[int, int]:
        """(face-down, face-up) offsets for column ti, squeezed so the last card clears the bottom bar."""
        pile = self.game.tableau_piles[ti]
        above = pile[:-1]
        ups = sum(1 for c in above if c.face_up)
        downs = len(above) - ups
        needed = downs * FAN_FACE_DOWN + ups * FAN_FACE_UP
        room = C.SCREEN_H - BOTTOM_BAR_H - C.CARD_H - self.tableau_y
        if needed <= room:
            return FAN_FACE_DOWN, FAN_FACE_UP
        scale = max(room, 0) / needed
        return (max(MIN_FAN_FACE_DOWN, int(FAN_FACE_DOWN * scale)),
                max(MIN_FAN_FACE_UP, int(FAN_FACE_UP * scale)))

    def tableau_card_y(self, ti: int, index: int) -> int:
        down, up = self.tableau_fan(ti)
        y = self.tableau_y
        for c in self.game.tableau_piles[ti][:index]:
            y += up if c.face_up else down
        return y

    def tableau_rect(self, ti: int, index: int):
        return pygame.Rect(self.tableau_x[ti], self.tableau_card_y(ti, index), C.CARD_W, C.CARD_H)

    def tableau_column_rect(self, ti: int):
        pile = self.game.tableau_piles[ti]
        bottom = self.tableau_card_y(ti, max(0, len(pile) - 1)) + C.CARD_H
        return pygame.Rect(self.tableau_x[ti], self.tableau_y, C.CARD_W, bottom - self.tableau_y)

    def hit_tableau(self, pos) -> Optional[Tuple[int, int]]:
        """Return (pile, card index) under pos; card index is -1 for an empty column."""
        for ti, pile in enumerate(self.game.tableau_piles):
            if not pile:
                if self._card_rect((self.tableau_x[ti], self.tableau_y)).collidepoint(pos):
                    return ti, -1
                continue
            for i in reversed(range(len(pile))):
                if self.tableau_rect(ti, i).collidepoint(pos):
                    return ti, i
        return None

    def hit_foundation(self, pos) -> Optional[int]:
        for fi, xy in enumerate(self.foundation_xy):
            if self._card_rect(xy).collidepoint(pos):
                return fi
        return None

    # ---------- Game flow ----------
    def deal_new(self):
        self.game.new_game()
        self.moves = 0
        self.message = ""
        self.drag = None
        self.elapsed_ms = 0
        self.timer_running = True
        self.auto_play_active = False
        self.cascade_active = False
        self.falling = []

    def goto_title(self):
        from klondike.scenes.title import TitleScene
        self.next_scene = TitleScene(self.app)

    def cycle_card_back(self):
        name = C.next_back_color(C.BACK_COLOR)
        C.apply_card_settings(back_color=name)
        C.save_settings({"back_color": name})

    def _clock_text(self) -> str:
        secs = self.elapsed_ms // 1000
        return f"{secs // 60}:{secs % 60:02d}"

    def _record(self, moved: bool) -> bool:
        if moved:
            self.moves += 1
            self._check_win()
        return moved

    def _check_win(self):
        if self.game.is_won_game and not self.cascade_active:
            self.timer_running = False
            self.auto_play_active = False
            self.cascade_active = True
            self.cascade_last_time = pygame.time.get_ticks()
            self.message = f"You won in {self.moves} moves, {self._clock_text()}! Press N for a new game."
            logger.info("Won in %d moves, %d ms", self.moves, self.elapsed_ms)

    def click_stock(self) -> bool:
        if self.game.draw_pile:
            return self._record(self.game.draw_card())
        if not self.game.discard_pile:
            return False
        return self._record(self.game.shuffle_discard_pile())

    def send_to_foundation(self, source) -> bool:
        moved = self._record(self.game.auto_move_to_foundation(source))
        if moved and source != DISCARD:
            self.game.flip_tableau_card(source)
        return moved

    def drop(self, source_kind, source_index, card_index, count, pos) -> bool:
        """Issue the engine command matching a drag from source onto whatever is under pos."""
        g = self.game
        fi = self.hit_foundation(pos)
        if fi is not None:
            if source_kind == DISCARD:
                return self._record(g.play_discard_pile_card_to_foundation(fi))
            if source_kind == TABLEAU and count == 1:
                moved = self._record(g.move_tableau_card_to_foundation(source_index, fi))
                if moved:
                    g.flip_tableau_card(source_index)
                return moved
            if source_kind == FOUNDATION:
                return self._record(g.move_foundation_card_to_foundation(source_index, fi))
            return False
        for ti in range(TABLEAU_COUNT):
            if not self.tableau_column_rect(ti).collidepoint(pos):
                continue
            if source_kind == DISCARD:
                return self._record(g.play_discard_pile_card_to_tableau(ti))
            if source_kind == TABLEAU:
                moved = self._record(g.move_tableau_card_to_tableau(source_index, card_index, ti))
                if moved:
                    g.flip_tableau_card(source_index)
                return moved
            if source_kind == FOUNDATION:
                return self._record(g.move_foundation_card_to_tableau(source_index, ti))
        return False

    # ---------- Auto finish ----------
    def _auto_finish_available(self) -> bool:
        return not self.cascade_active and self.game.can_auto_finish()

    def start_auto_finish(self):
        if not self._auto_finish_available():
            return
        self.auto_play_active = True
        self.auto_last_time = pygame.time.get_ticks()

    def step_auto_finish(self):
        if not self._record(self.game.auto_finish_step()):
            self.auto_play_active = False

    def step_cascade(self):
        card = self.game.cascade_step()
        if card is None:
            self.cascade_active = False
            return
        fi = next((i for i, f in enumerate(self.game.foundation_piles) if f.suit == card.suit), 0)
        x, y = self.foundation_xy[fi]
        vx = self.rng.choice((-1, 1)) * self.rng.uniform(120, 320)
        self.falling.append(_FallingCard(card, x, y, vx, -self.rng.uniform(0, 200)))

    # ---------- Event handling ----------
    def _is_double_click(self, target, index) -> bool:
        now = pygame.time.get_ticks()
        last_time, last_target, last_index = self._last_click
        self._last_click = (now, target, index)
        return last_target == target and last_index == index and now - last_time <= DOUBLE_CLICK_MS

    def _toolbar_event(self, e) -> bool:
        if e.type == pygame.MOUSEMOTION:
            for b in self.tool_buttons:
                b.hover = b.rect.collidepoint(e.pos)
        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            for b in self.tool_buttons:
                if b.rect.collidepoint(e.pos) and b.is_enabled():
                    b.action()
                    return True
        return False

    def handle_event(self, e):
        if self._toolbar_event(e):
            return
        # Table is frozen while the win cascade runs
        if self.cascade_active and not (e.type == pygame.KEYDOWN and e.key in (pygame.K_n, pygame.K_ESCAPE)):
            return
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            self.auto_play_active = False
            pos = e.pos

            if self._card_rect(self.stock_xy).collidepoint(pos):
                self.click_stock()
                return

            if self._card_rect(self.waste_xy).collidepoint(pos) and self.game.discard_pile:
                if self._is_double_click(DISCARD, 0):
                    self.send_to_foundation(DISCARD)
                    return
                self._start_drag(DISCARD, None, len(self.game.discard_pile) - 1, [self.game.discard_pile[-1]], self.waste_xy, pos)
                return

            fi = self.hit_foundation(pos)
            if fi is not None:
                top = self.game.foundation_piles[fi].top_card()
                if top is not None:
                    self._start_drag(FOUNDATION, fi, None, [top], self.foundation_xy[fi], pos)
                return

            hit = self.hit_tableau(pos)
            if hit is None:
                return
            ti, idx = hit
            pile = self.game.tableau_piles[ti]
            if idx == -1:
                return
            if idx == len(pile) - 1 and not pile[idx].face_up:
                self._record(self.game.flip_tableau_card(ti))
                return
            if pile[idx].face_up:
                if idx == len(pile) - 1 and self._is_double_click(TABLEAU, ti):
                    self.send_to_foundation(ti)
                    return
                r = self.tableau_rect(ti, idx)
                self._start_drag(TABLEAU, ti, idx, pile[idx:], (r.x, r.y), pos)

        elif e.type == pygame.MOUSEMOTION:
            if self.drag:
                self.drag_pos = e.pos

        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            if not self.drag:
                return
            kind, index, card_index, cards, _ = self.drag
            self.drag = None
            self.drop(kind, index, card_index, len(cards), e.pos)

        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.deal_new()
            elif e.key == pygame.K_a:
                self.start_auto_finish()
            elif e.key == pygame.K_b:
                self.cycle_card_back()
            elif e.key == pygame.K_ESCAPE:
                self.goto_title()

    def _start_drag(self, kind, index, card_index, cards, card_xy, pos):
        self.drag = (kind, index, card_index, list(cards), (pos[0] - card_xy[0], pos[1] - card_xy[1]))
        self.drag_pos = pos

    # ---------- Per-frame ----------
    def update(self, dt):
        if self.timer_running:
            self.elapsed_ms += int(dt * 1000)
        now = pygame.time.get_ticks()
        if self.auto_play_active and now - self.auto_last_time >= AUTO_INTERVAL_MS:
            self.step_auto_finish()
            self.auto_last_time = now
        if self.cascade_active and now - self.cascade_last_time >= CASCADE_INTERVAL_MS:
            self.step_cascade()
            self.cascade_last_time = now
        for f in self.falling:
            f.vy += 900 * dt
            f.x += f.vx * dt
            f.y += f.vy * dt
            floor = C.SCREEN_H - BOTTOM_BAR_H - C.CARD_H
            if f.y > floor:
                f.y = floor
                f.vy = -f.vy * 0.7
        self.falling = [f for f in self.falling if -C.CARD_W < f.x < C.SCREEN_W]

    def _dragged(self, kind, index) -> int:
        """Number of cards hidden from a pile because they are being dragged."""
        if not self.drag or self.drag[0] != kind or self.drag[1] != index:
            return 0
        return len(self.drag[3])

    def draw(self, screen):
        screen.fill(C.TABLE_BG)
        g = self.game

        # Stock
        if g.draw_pile:
            screen.blit(C.get_back_surface(), self.stock_xy)
        else:
            C.draw_empty_slot(screen, *self.stock_xy, label="↻" if g.discard_pile else None)

        # Waste: show up to three cards fanned
        shown = len(g.discard_pile) - self._dragged(DISCARD, None)
        if shown <= 0:
            C.draw_empty_slot(screen, *self.waste_xy)
        for j, c in enumerate(g.discard_pile[max(0, shown - 3):shown]):
            screen.blit(C.get_card_surface(c), (self.waste_xy[0] + j * 18, self.waste_xy[1]))

        # Foundations
        for fi, f in enumerate(g.foundation_piles):
            x, y = self.foundation_xy[fi]
            dragging = self._dragged(FOUNDATION, fi)
            top = f.top_card()
            if dragging and f.value > 1:
                top = Card(f.suit, f.value - 1, face_up=True)
            elif dragging:
                top = None
            if top is None:
                C.draw_empty_slot(screen, x, y, label="A")
            else:
                screen.blit(C.get_card_surface(top), (x, y))

        # Tableau
        for ti, pile in enumerate(g.tableau_piles):
            visible = len(pile)
            if self.drag and self.drag[0] == TABLEAU and self.drag[1] == ti:
                visible = self.drag[2]
            if not pile:
                C.draw_empty_slot(screen, self.tableau_x[ti], self.tableau_y, label="K")
            for i in range(visible):
                screen.blit(C.get_card_surface(pile[i]), self.tableau_rect(ti, i).topleft)

        # Falling cards from the win cascade
        for f in self.falling:
            screen.blit(C.get_card_surface(f.card), (int(f.x), int(f.y)))

        # Drag visuals
        if self.drag:
            _, _, _, cards, (ox, oy) = self.drag
            mx, my = self.drag_pos
            for i, c in enumerate(cards):
                screen.blit(C.get_card_surface(c), (mx - ox, my - oy + i * FAN_FACE_UP))

        self.draw_toolbar(screen)
        self.draw_bottom_bar(screen)

        if self.message:
            msg = C.FONT_UI.render(self.message, True, (255, 255, 180))
            screen.blit(msg, (C.SCREEN_W//2 - msg.get_width()//2, C.SCREEN_H//2 - msg.get_height()//2))

    def draw_toolbar(self, screen):
        for b in self.tool_buttons:
            enabled = b.is_enabled()
            bg = (200, 200, 205) if not enabled else ((215, 215, 225) if b.hover else (230, 230, 235))
            pygame.draw.rect(screen, bg, b.rect, border_radius=8)
            pygame.draw.rect(screen, (160, 160, 170), b.rect, width=1, border_radius=8)
            label = C.FONT_SMALL.render(b.label, True, (30, 30, 35) if enabled else (120, 120, 130))
            screen.blit(label, label.get_rect(center=b.rect.center))

    def draw_bottom_bar(self, screen):
        bar = pygame.Surface((C.SCREEN_W, BOTTOM_BAR_H), pygame.SRCALPHA)
        bar.fill((0, 0, 0, 90))
        screen.blit(bar, (0, C.SCREEN_H - BOTTOM_BAR_H))
        left = C.FONT_SMALL.render(f"Moves: {self.moves}", True, C.WHITE)
        right = C.FONT_SMALL.render(f"Time: {self._clock_text()}", True, C.WHITE)
        y = C.SCREEN_H - BOTTOM_BAR_H + (BOTTOM_BAR_H - left.get_height()) // 2
        screen.blit(left, (10, y))
        screen.blit(right, (C.SCREEN_W - right.get_width() - 10, y))
