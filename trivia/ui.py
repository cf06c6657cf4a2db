"""
Chess Stream Trivia - UI Manager
Renders a RoundSnapshot: question card, answer cards, timer, leaderboard.
"""

import pygame
import math
import time
import random

from trivia.config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS,
    COLOR_BG_DARK, COLOR_BG_FELT, COLOR_GOLD, COLOR_AMBER,
    COLOR_CARD_BG, COLOR_CARD_BORDER, COLOR_CORRECT, COLOR_WRONG,
    COLOR_TEXT_PRIMARY, COLOR_TEXT_SECONDARY, COLOR_TEXT_GOLD, COLOR_TEXT_DIM,
    COLOR_TIMER_BAR, COLOR_TIMER_BAR_LOW, COLOR_HUD_BG,
    COLOR_CONNECTED, COLOR_DISCONNECTED, FONT_PATH,
)
from trivia.models import Phase, RoundSnapshot
from trivia.parser import option_label


# ==========================================
# EASING
# ==========================================
def ease_out_cubic(t):
    return 1 - (1 - t) ** 3

def ease_out_back(t):
    c = 1.7
    return 1 + (c + 1) * ((t - 1) ** 3) + c * ((t - 1) ** 2)

def _alpha(value):
    """Clamp a 0-255 alpha value (guards against easing overshoot)."""
    return max(0, min(255, int(value)))

def lerp(a, b, t):
    return a + (b - a) * max(0, min(1, t))

def lerp_color(c1, c2, t):
    t = max(0, min(1, t))
    return tuple(int(a + (b - a) * t) for a, b in zip(c1, c2))


class Confetti:
    __slots__ = ("x", "y", "vx", "vy", "color", "life", "max_life", "size")

    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.vx = random.uniform(-6, 6)
        self.vy = random.uniform(-10, -3)
        self.color = random.choice([COLOR_TEXT_GOLD, COLOR_CORRECT, COLOR_AMBER])
        self.max_life = random.uniform(1.0, 2.5)
        self.life = self.max_life
        self.size = random.randint(3, 7)


# Phases that show a question, and how long each lasts for the timer bar
QUESTION_PHASES = (Phase.PREVIEW, Phase.OPEN, Phase.REVEAL)


class UIManager:
    def __init__(self, screen: pygame.Surface, phase_durations: dict):
        self.screen = screen
        self._durations = phase_durations
        self._load_fonts()
        self._create_background()

        self.confetti: list[Confetti] = []
        self._phase_enter_time = 0.0
        self._last_key = None
        self._displayed_timer_frac = 1.0

    def _load_fonts(self):
        try:
            self.font_tiny = pygame.font.Font(FONT_PATH, 18)
            self.font_small = pygame.font.Font(FONT_PATH, 22)
            self.font_medium = pygame.font.Font(FONT_PATH, 30)
            self.font_large = pygame.font.Font(FONT_PATH, 44)
            self.font_title = pygame.font.Font(FONT_PATH, 64)
            self.font_huge = pygame.font.Font(FONT_PATH, 140)
        except (FileNotFoundError, OSError):
            print("[UI] Custom font not found, using system font")
            self.font_tiny = pygame.font.SysFont("Arial", 18)
            self.font_small = pygame.font.SysFont("Arial", 22)
            self.font_medium = pygame.font.SysFont("Arial", 30)
            self.font_large = pygame.font.SysFont("Arial", 44)
            self.font_title = pygame.font.SysFont("Arial", 64)
            self.font_huge = pygame.font.SysFont("Arial", 140)

    def _create_background(self):
        """Pre-render radial gradient background at half resolution."""
        half_w, half_h = SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2
        cx, cy = half_w // 2, half_h // 2
        max_dist = math.sqrt(cx * cx + cy * cy)
        small = pygame.Surface((half_w, half_h))
        for y in range(0, half_h, 2):
            for x in range(0, half_w, 2):
                t = min(1.0, math.hypot(x - cx, y - cy) / max_dist * 1.2)
                pygame.draw.rect(small, lerp_color(COLOR_BG_FELT, COLOR_BG_DARK, t), (x, y, 2, 2))
        self._bg_surface = pygame.transform.smoothscale(small, (SCREEN_WIDTH, SCREEN_HEIGHT))

    # ------------------------------------------
    # MAIN DRAW DISPATCH
    # ------------------------------------------
    def draw(self, snap: RoundSnapshot, data: dict):
        key = (snap.phase, snap.question_number)
        if key != self._last_key:
            self._phase_enter_time = time.time()
            self._last_key = key
            if snap.phase == Phase.FINISHED:
                self.spawn_celebration(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 3)

        dt = 1.0 / FPS
        phase_age = time.time() - self._phase_enter_time
        fade = ease_out_cubic(min(1.0, phase_age / 0.6))

        duration = self._durations.get(snap.phase, 0)
        target_frac = snap.seconds_remaining / duration if duration else 0.0
        self._displayed_timer_frac = lerp(self._displayed_timer_frac, target_frac, 12 * dt)

        self.screen.blit(self._bg_surface, (0, 0))

        if snap.phase == Phase.IDLE:
            self._draw_idle(data, fade)
        elif snap.phase == Phase.COUNTDOWN:
            self._draw_countdown(snap, phase_age)
        elif snap.phase in QUESTION_PHASES:
            self._draw_question(snap, fade, phase_age)
        elif snap.phase == Phase.FINISHED:
            self._draw_final(snap, data, fade)

        if snap.phase != Phase.FINISHED:
            self._draw_leaderboard_panel(snap)
        self._draw_hud(snap, data)
        self._update_and_draw_confetti(dt)

        pygame.display.flip()

    # ------------------------------------------
    # PRIMITIVES
    # ------------------------------------------
    def _draw_card(self, rect, color=COLOR_CARD_BG, border_color=COLOR_CARD_BORDER,
                   border_width=2, radius=12, alpha=255):
        x, y, w, h = rect
        surf = pygame.Surface((w, h), pygame.SRCALPHA)
        pygame.draw.rect(surf, (*color[:3], alpha), (0, 0, w, h), border_radius=radius)
        if border_width > 0:
            pygame.draw.rect(surf, (*border_color[:3], alpha), (0, 0, w, h),
                             width=border_width, border_radius=radius)
        self.screen.blit(surf, (x, y))

    def _draw_letter_badge(self, index, x, y, color=COLOR_GOLD, size=40):
        pygame.draw.circle(self.screen, color, (x, y), size // 2)
        pygame.draw.circle(self.screen, (255, 255, 255), (x, y), size // 2, 2)
        txt = self.font_medium.render(option_label(index), True, COLOR_BG_DARK)
        self.screen.blit(txt, (x - txt.get_width() // 2, y - txt.get_height() // 2))

    def _text_centered(self, text, font, color, y, alpha=255, center_x=None):
        surf = font.render(text, True, color)
        if alpha < 255:
            surf.set_alpha(alpha)
        cx = center_x if center_x is not None else SCREEN_WIDTH // 2
        self.screen.blit(surf, (cx - surf.get_width() // 2, y))

    def _text_shadowed(self, text, font, color, pos, shadow_offset=2):
        shadow = font.render(text, True, (0, 0, 0))
        self.screen.blit(shadow, (pos[0] + shadow_offset, pos[1] + shadow_offset))
        self.screen.blit(font.render(text, True, color), pos)

    def _wrap_text(self, text, font, max_width):
        lines = []
        current = ""
        for word in text.split():
            test = f"{current} {word}".strip()
            if font.size(test)[0] <= max_width:
                current = test
            else:
                if current:
                    lines.append(current)
                current = word
        if current:
            lines.append(current)
        return lines or [""]

    def _draw_timer_bar(self, fraction, rect, low_threshold=0.25):
        x, y, w, h = rect
        pygame.draw.rect(self.screen, (20, 18, 15), (x, y, w, h), border_radius=h // 2)
        fill_w = max(0, int(w * fraction))
        if fill_w <= 0:
            return
        if fraction > 0.5:
            color = COLOR_TIMER_BAR
        elif fraction > low_threshold:
            color = lerp_color(COLOR_TIMER_BAR_LOW, COLOR_TIMER_BAR,
                               (fraction - low_threshold) / (0.5 - low_threshold))
        else:
            pulse = 0.7 + 0.3 * math.sin(time.time() * 8)
            color = tuple(int(c * pulse) for c in COLOR_TIMER_BAR_LOW)
        pygame.draw.rect(self.screen, color, (x, y, fill_w, h), border_radius=h // 2)

    # ------------------------------------------
    # IDLE / COUNTDOWN
    # ------------------------------------------
    def _draw_idle(self, data, fade):
        alpha = _alpha(255 * fade)
        cy = SCREEN_HEIGHT // 2
        cx = self._stage_center_x()
        bounce = math.sin(time.time() * 1.5) * 5
        self._text_centered(data.get("title", "CHESS TRIVIA"), self.font_title,
                            COLOR_GOLD, int(cy - 180 + bounce), alpha, cx)
        self._text_centered(f"{data.get('question_total', 0)} questions ready",
                            self.font_medium, COLOR_TEXT_SECONDARY, cy - 80, alpha, cx)
        self._text_centered("Answer in chat with !a  !b  !c  !d",
                            self.font_medium, COLOR_TEXT_PRIMARY, cy, alpha, cx)
        self._text_centered("Faster correct answers earn more points. Only your first answer counts!",
                            self.font_small, COLOR_TEXT_SECONDARY, cy + 50, alpha, cx)
        pulse = 0.4 + 0.6 * abs(math.sin(time.time() * 2))
        self._text_centered("Press SPACE to start", self.font_medium, COLOR_AMBER,
                            cy + 140, _alpha(alpha * pulse), cx)

    def _draw_countdown(self, snap, phase_age):
        number = max(1, math.ceil(snap.seconds_remaining))
        frac = snap.seconds_remaining % 1.0
        scale_alpha = _alpha(255 * (0.3 + 0.7 * frac))
        self._text_centered(str(number), self.font_huge, COLOR_TEXT_GOLD,
                            SCREEN_HEIGHT // 2 - 100, scale_alpha, self._stage_center_x())
        self._text_centered("Get ready!", self.font_large, COLOR_TEXT_SECONDARY,
                            SCREEN_HEIGHT // 2 + 80, center_x=self._stage_center_x())

    # ------------------------------------------
    # QUESTION PHASES
    # ------------------------------------------
    def _stage_center_x(self):
        return (SCREEN_WIDTH - 460) // 2

    def _draw_question(self, snap: RoundSnapshot, fade, phase_age):
        card_w = 1300
        card_x = 40
        cx = card_x + card_w // 2

        self._text_centered(
            f"Question {snap.question_number} of {snap.total_questions}   [ {snap.category} ]",
            self.font_small, COLOR_AMBER, 72, center_x=cx,
        )

        q_card_y = 110
        q_lines = self._wrap_text(snap.prompt, self.font_large, card_w - 80)
        q_card_h = max(140, 50 + len(q_lines) * 52)
        slide = ease_out_back(min(1.0, phase_age / 0.5)) if snap.phase == Phase.PREVIEW else 1.0
        actual_y = int(lerp(q_card_y - 40, q_card_y, slide))
        self._draw_card((card_x, actual_y, card_w, q_card_h),
                        border_color=COLOR_GOLD, alpha=_alpha(255 * fade))
        for i, line in enumerate(q_lines):
            self._text_centered(line, self.font_large, COLOR_TEXT_PRIMARY,
                                actual_y + 25 + i * 52, center_x=cx)

        ans_y_start = actual_y + q_card_h + 35
        ans_w = (card_w - 20) // 2
        ans_h = 130
        gap = 20

        if snap.phase == Phase.PREVIEW:
            self._text_centered("Options coming up...", self.font_medium,
                                COLOR_TEXT_DIM, ans_y_start + 100, center_x=cx)
        else:
            for i, option_text in enumerate(snap.options):
                col, row = i % 2, i // 2
                ax = card_x + col * (ans_w + gap)
                ay = ans_y_start + row * (ans_h + gap)
                border, badge = COLOR_CARD_BORDER, COLOR_GOLD
                if snap.correct_index is not None:
                    if i == snap.correct_index:
                        border, badge = COLOR_CORRECT, COLOR_CORRECT
                    else:
                        border, badge = COLOR_WRONG, COLOR_TEXT_DIM
                self._draw_card((ax, ay, ans_w, ans_h), border_color=border,
                                border_width=4 if border == COLOR_CORRECT else 2)
                self._draw_letter_badge(i, ax + 40, ay + ans_h // 2, badge)
                opt_lines = self._wrap_text(option_text, self.font_medium, ans_w - 110)
                for j, line in enumerate(opt_lines):
                    txt = self.font_medium.render(line, True, COLOR_TEXT_PRIMARY)
                    self.screen.blit(txt, (ax + 80, ay + ans_h // 2 - len(opt_lines) * 16 + j * 32))

        timer_y = ans_y_start + 2 * (ans_h + gap) + 25
        self._draw_timer_bar(self._displayed_timer_frac, (card_x, timer_y, card_w, 24))
        labels = {Phase.PREVIEW: "Read the question", Phase.OPEN: "Answer now!",
                  Phase.REVEAL: "Correct answer"}
        time_color = COLOR_TIMER_BAR if self._displayed_timer_frac > 0.25 else COLOR_TIMER_BAR_LOW
        self._text_centered(f"{labels[snap.phase]}  -  {math.ceil(snap.seconds_remaining)}s",
                            self.font_small, time_color, timer_y + 32, center_x=cx)
        if snap.phase != Phase.PREVIEW:
            self._text_centered(f"{snap.answered_count} answered", self.font_small,
                                COLOR_TEXT_SECONDARY, timer_y + 58, center_x=cx)

    # ------------------------------------------
    # LEADERBOARD
    # ------------------------------------------
    def _draw_leaderboard_panel(self, snap: RoundSnapshot):
        panel_w = 420
        panel_x = SCREEN_WIDTH - panel_w - 30
        panel_y = 72
        row_h = 56
        rows = snap.leaderboard
        panel_h = 70 + max(1, len(rows)) * row_h
        self._draw_card((panel_x, panel_y, panel_w, panel_h), color=(25, 22, 18),
                        border_color=COLOR_GOLD, alpha=230)
        self._text_centered("LEADERBOARD", self.font_medium, COLOR_GOLD,
                            panel_y + 18, center_x=panel_x + panel_w // 2)
        if not rows:
            self._text_centered("No scores yet", self.font_small, COLOR_TEXT_DIM,
                                panel_y + 80, center_x=panel_x + panel_w // 2)
            return
        for i, entry in enumerate(rows):
            ry = panel_y + 70 + i * row_h
            name_color = COLOR_TEXT_GOLD if i == 0 else COLOR_TEXT_PRIMARY
            self.screen.blit(self.font_small.render(str(i + 1), True, COLOR_GOLD if i < 3 else COLOR_TEXT_SECONDARY),
                             (panel_x + 20, ry))
            self.screen.blit(self.font_small.render(entry.participant_id[:16], True, name_color),
                             (panel_x + 60, ry))
            score_txt = self.font_small.render(f"{entry.score:,}", True, COLOR_GOLD)
            self.screen.blit(score_txt, (panel_x + panel_w - 20 - score_txt.get_width(), ry))
            if entry.streak >= 2:
                self.screen.blit(self.font_tiny.render(f"x{entry.streak} streak", True, COLOR_CORRECT),
                                 (panel_x + 60, ry + 24))

    def _draw_final(self, snap: RoundSnapshot, data, fade):
        alpha = _alpha(255 * fade)
        self._text_centered(data.get("title", "CHESS TRIVIA"), self.font_title, COLOR_GOLD, 90, alpha)
        self._text_centered("FINAL STANDINGS", self.font_large, COLOR_AMBER, 170, alpha)

        table_w = 1000
        table_x = (SCREEN_WIDTH - table_w) // 2
        row_h = 62
        for i, entry in enumerate(snap.leaderboard):
            ry = 250 + i * row_h
            row_color = (50, 42, 20) if i == 0 else ((35, 32, 28) if i % 2 == 0 else (28, 25, 22))
            self._draw_card((table_x, ry, table_w, row_h - 6), color=row_color, border_width=0, radius=8)
            rt = self.font_medium.render(str(i + 1), True, COLOR_GOLD if i < 3 else COLOR_TEXT_PRIMARY)
            self.screen.blit(rt, (table_x + 30, ry + 12))
            nt = self.font_medium.render(entry.participant_id[:20], True,
                                         COLOR_TEXT_GOLD if i == 0 else COLOR_TEXT_PRIMARY)
            self.screen.blit(nt, (table_x + 100, ry + 12))
            st = self.font_medium.render(f"{entry.score:,} pts", True, COLOR_GOLD)
            self.screen.blit(st, (table_x + table_w - 40 - st.get_width(), ry + 12))

        if not snap.leaderboard:
            self._text_centered("Nobody scored this time!", self.font_medium, COLOR_TEXT_DIM, 300)
        self._text_centered("Press R to play again", self.font_small, COLOR_TEXT_DIM,
                            SCREEN_HEIGHT - 80, alpha)

    # ------------------------------------------
    # HUD
    # ------------------------------------------
    def _draw_hud(self, snap: RoundSnapshot, data):
        bar_h = 48
        hud_surf = pygame.Surface((SCREEN_WIDTH, bar_h), pygame.SRCALPHA)
        pygame.draw.rect(hud_surf, (*COLOR_HUD_BG, 210), (0, 0, SCREEN_WIDTH, bar_h))
        self.screen.blit(hud_surf, (0, 0))

        y = 12
        self._text_shadowed(data.get("title", ""), self.font_small, COLOR_TEXT_PRIMARY, (20, y))
        pt = self.font_small.render(snap.phase.name, True, COLOR_AMBER)
        self.screen.blit(pt, (SCREEN_WIDTH // 2 - pt.get_width() // 2, y))

        connected = data.get("connected", False)
        chat_color = COLOR_CONNECTED if connected else COLOR_DISCONNECTED
        pygame.draw.circle(self.screen, chat_color, (SCREEN_WIDTH - 430, y + 10), 6)
        if connected:
            chat_label = f"CHAT ({data.get('chat_msg_count', 0)} msgs)"
        else:
            chat_label = data.get("chat_status") or "NO CHAT"
        if len(chat_label) > 35:
            chat_label = chat_label[:33] + ".."
        self.screen.blit(self.font_small.render(chat_label, True, chat_color),
                         (SCREEN_WIDTH - 418, y))

    # ------------------------------------------
    # CONFETTI
    # ------------------------------------------
    def spawn_celebration(self, x, y):
        for _ in range(80):
            self.confetti.append(Confetti(x, y))

    def _update_and_draw_confetti(self, dt):
        alive = []
        for p in self.confetti:
            p.life -= dt
            if p.life <= 0:
                continue
            p.vy += 12 * dt
            p.x += p.vx
            p.y += p.vy
            frac = p.life / p.max_life
            size = max(1, int(p.size * (0.5 + 0.5 * frac)))
            surf = pygame.Surface((size * 2, size * 2), pygame.SRCALPHA)
            pygame.draw.circle(surf, (*p.color[:3], _alpha(255 * frac)), (size, size), size)
            self.screen.blit(surf, (int(p.x - size), int(p.y - size)))
            alive.append(p)
        self.confetti = alive
