"""
Chess Stream Trivia - Main Game Controller
Ties together chat, round logic and UI into the game loop.
"""

import pygame
import queue
import time

from trivia.config import SCREEN_WIDTH, SCREEN_HEIGHT, FPS, WINDOW_TITLE, TICK_INTERVAL
from trivia.chat import ChatManager
from trivia.logic import RoundEngine
from trivia.models import Phase, RoundSettings
from trivia.parser import AnswerParser
from trivia.ui import UIManager


class MainGameController:
    def __init__(self, questions, title: str, chat_source: str, chat_channel: str,
                 offline: bool = False, settings: RoundSettings | None = None,
                 extended_commands: bool = True):
        pygame.init()
        pygame.display.set_caption(WINDOW_TITLE)
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.running = True
        self.title = title

        settings = settings or RoundSettings()
        self.msg_queue = queue.Queue()
        self.engine = RoundEngine(questions, settings=settings,
                                  parser=AnswerParser(extended=extended_commands))
        self.chat = ChatManager(chat_source, chat_channel, self.msg_queue, offline=offline)
        self.ui = UIManager(self.screen, {
            Phase.COUNTDOWN: settings.countdown_seconds,
            Phase.PREVIEW: settings.preview_seconds,
            Phase.OPEN: settings.open_seconds,
            Phase.REVEAL: settings.reveal_seconds,
        })

        self._last_tick_time = 0.0
        self._shutdown_done = False

    def run(self):
        self.chat.start()
        print("[Game] Chess Stream Trivia is running! SPACE = start, R = restart, F1 = skip, ESC = quit")

        while self.running:
            self.clock.tick(FPS)
            self._handle_events()
            self._process_chat()
            self._tick()
            self._render()

        self.shutdown()

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.engine.start()
                elif event.key == pygame.K_r:
                    self.engine.restart()
                    self._drain_chat()
                    print("[Game] Round reset (R)")
                elif event.key == pygame.K_F1:
                    self.engine.skip_phase()

    def _process_chat(self):
        while True:
            try:
                msg = self.msg_queue.get_nowait()
            except queue.Empty:
                break
            self.engine.submit_answer(msg.participant_id, msg.message, msg.timestamp)

    def _drain_chat(self):
        """Drop messages that arrived before a restart."""
        while True:
            try:
                self.msg_queue.get_nowait()
            except queue.Empty:
                break

    def _tick(self):
        now = time.time()
        if now - self._last_tick_time >= TICK_INTERVAL:
            self._last_tick_time = now
            self.engine.tick(now)

    def _render(self):
        data = {
            "title": self.title,
            "question_total": len(self.engine.questions),
            "connected": self.chat.is_connected,
            "chat_status": self.chat.status_text,
            "chat_msg_count": self.chat.message_count,
        }
        self.ui.draw(self.engine.snapshot(), data)

    def shutdown(self):
        if self._shutdown_done:
            return
        self._shutdown_done = True
        print("[Game] Shutting down...")
        self.chat.stop()
        pygame.quit()
        print("[Game] Goodbye!")
