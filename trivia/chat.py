"""
Chess Stream Trivia - Chat Manager
Reads Twitch IRC or YouTube live chat (via pytchat) in a background
thread and queues ChatMessage objects. Offline mode runs fake bots.
"""

import threading
import queue
import random
import re
import socket
import time

from trivia.config import (
    TWITCH_IRC_HOST, TWITCH_IRC_PORT, CHAT_RECONNECT_MAX_WAIT,
)
from trivia.models import ChatMessage


SOURCES = ("twitch", "youtube", "offline")

# Fake bot usernames (used for offline testing only)
FAKE_USERNAMES = [
    "KnightRider", "PawnStorm", "BishopPair", "RookLift",
    "EnPassant", "ZugzwangZed", "FianchettoFan", "BlunderCheck",
    "CastleLong", "SicilianSam", "GambitGirl", "TimeScramble",
]
FAKE_ANSWERS = ["!a", "!b", "!c", "!d", "a", "2", "!3", "gg", "lol", "hi chat"]

# Optional IRCv3 tags, then ":login!login@login.tmi.twitch.tv PRIVMSG #channel :text"
_PRIVMSG_RE = re.compile(
    r"^(?:@\S+ )?:(\w+)!\w+@[\w.]+ PRIVMSG #\w+ :(.*)$"
)


def parse_irc_privmsg(line: str):
    """Returns (login, text) for a chat line, or None for anything else."""
    if not isinstance(line, str):
        return None
    match = _PRIVMSG_RE.match(line.rstrip("\r\n"))
    if not match:
        return None
    return match.group(1).lower(), match.group(2).strip()


class ChatManager:
    def __init__(self, source: str, channel: str, message_queue: queue.Queue,
                 offline: bool = False):
        if source not in SOURCES:
            raise ValueError(f"Unknown chat source '{source}'")
        self._source = "offline" if offline else source
        self._channel = (channel or "").lstrip("#").lower() if source == "twitch" else channel
        self._queue = message_queue
        self._running = False
        self._connected = False
        self._thread = None
        self._sock = None

        # Diagnostics
        self._message_count = 0
        self._status_text = "Initializing..."

    def start(self):
        self._running = True
        if self._source == "offline":
            self._status_text = "Offline mode (fake bots)"
            print("[Chat] Offline mode - starting fake chat bots")
            target = self._fake_chat_thread
        elif self._source == "twitch":
            self._status_text = f"Connecting to #{self._channel}..."
            target = self._twitch_thread
        else:
            self._status_text = f"Connecting to {self._channel}..."
            target = self._youtube_thread
        self._thread = threading.Thread(target=target, daemon=True)
        self._thread.start()

    def _emit(self, username: str, text: str):
        text = text.strip()
        if not username or not text:
            return
        self._queue.put(ChatMessage(participant_id=username, message=text,
                                    timestamp=time.time()))
        self._message_count += 1

    # ------------------------------------------
    # TWITCH IRC
    # ------------------------------------------
    def _twitch_thread(self):
        consecutive_failures = 0
        while self._running:
            try:
                self._read_twitch()
                consecutive_failures = 0
            except OSError as e:
                if not self._running:
                    break
                consecutive_failures += 1
                wait_time = min(CHAT_RECONNECT_MAX_WAIT, 10 * consecutive_failures)
                self._status_text = f"Error #{consecutive_failures}, retry in {wait_time}s"
                print(
                    f"[Chat] Error (attempt {consecutive_failures}): {e}. "
                    f"Retrying in {wait_time}s"
                )
                time.sleep(wait_time)
            finally:
                self._connected = False

    def _read_twitch(self):
        nick = f"justinfan{random.randint(10000, 99999)}"
        print(f"[Chat] Connecting to Twitch #{self._channel} as {nick}...")
        with socket.create_connection((TWITCH_IRC_HOST, TWITCH_IRC_PORT), timeout=300) as sock:
            self._sock = sock
            sock.sendall(b"CAP REQ :twitch.tv/tags twitch.tv/commands\r\n")
            sock.sendall(f"NICK {nick}\r\n".encode())
            sock.sendall(f"JOIN #{self._channel}\r\n".encode())

            buffer = ""
            while self._running:
                data = sock.recv(4096)
                if not data:
                    raise ConnectionError("connection closed by server")
                buffer += data.decode("utf-8", errors="ignore")
                *lines, buffer = buffer.split("\r\n")
                for line in lines:
                    self._handle_irc_line(sock, line)

    def _handle_irc_line(self, sock, line: str):
        if line.startswith("PING"):
            sock.sendall(b"PONG :tmi.twitch.tv\r\n")
            return
        if "End of /NAMES list" in line or " 366 " in line:
            self._connected = True
            self._status_text = f"LIVE - reading #{self._channel}"
            print(f"[Chat] Connected to Twitch chat #{self._channel}!")
            return
        parsed = parse_irc_privmsg(line)
        if parsed:
            self._emit(*parsed)

    # ------------------------------------------
    # YOUTUBE
    # ------------------------------------------
    def _youtube_thread(self):
        try:
            import pytchat
        except ImportError:
            self._status_text = "ERROR: pytchat not installed"
            print("[Chat] pytchat not installed!")
            print("[Chat] Install it: pip install 'chess-stream-trivia[youtube]'")
            return

        consecutive_failures = 0
        while self._running:
            try:
                vid = self._channel
                print(f"[Chat] Connecting to video {vid}...")
                chat = pytchat.create(video_id=vid, interruptable=False)
                self._connected = True
                self._status_text = f"LIVE - reading chat ({vid})"
                consecutive_failures = 0
                print(f"[Chat] Connected to YouTube live chat! (video: {vid})")

                while chat.is_alive() and self._running:
                    for c in chat.get().sync_items():
                        self._emit(c.author.name, c.message)
                    time.sleep(0.1)

                self._connected = False
                if self._running:
                    self._status_text = f"Waiting for stream {vid} to go live..."
                    print(f"[Chat] Stream {vid} not active, retrying in 10s...")
                    time.sleep(10)

            except Exception as e:
                self._connected = False
                consecutive_failures += 1
                wait_time = min(CHAT_RECONNECT_MAX_WAIT, 10 * consecutive_failures)
                self._status_text = f"Error #{consecutive_failures}, retry in {wait_time}s"
                print(
                    f"[Chat] Error (attempt {consecutive_failures}): {e}. "
                    f"Retrying in {wait_time}s"
                )
                time.sleep(wait_time)

    # ------------------------------------------
    # OFFLINE BOTS
    # ------------------------------------------
    def _fake_chat_thread(self):
        self._connected = True
        self._status_text = "Offline (fake bots)"
        print("[Chat] Fake chat running (offline testing mode)")

        while self._running:
            time.sleep(random.uniform(0.2, 1.2))
            self._emit(random.choice(FAKE_USERNAMES), random.choice(FAKE_ANSWERS))

    def stop(self):
        self._running = False
        if self._sock is not None:
            self._sock.close()  # unblocks recv() in the reader thread
        print(f"[Chat] Stopped ({self._message_count} messages total)")

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def is_fake(self) -> bool:
        return self._source == "offline"

    @property
    def message_count(self) -> int:
        return self._message_count

    @property
    def status_text(self) -> str:
        return self._status_text
