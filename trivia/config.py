"""
Chess Stream Trivia - Configuration
All tunable constants for question generation, rounds, chat and display.
"""

# ==========================================
# WINDOW
# ==========================================
SCREEN_WIDTH = 1920
SCREEN_HEIGHT = 1080
FPS = 60
WINDOW_TITLE = "Chess Stream Trivia"

# ==========================================
# COLORS (dark poker room palette)
# ==========================================
COLOR_BG_DARK = (15, 12, 10)
COLOR_BG_FELT = (20, 45, 25)
COLOR_GOLD = (212, 175, 55)
COLOR_AMBER = (191, 144, 64)
COLOR_CARD_BG = (35, 30, 28)
COLOR_CARD_BORDER = (80, 70, 55)
COLOR_CORRECT = (50, 205, 50)
COLOR_WRONG = (180, 40, 40)
COLOR_TEXT_PRIMARY = (240, 235, 220)
COLOR_TEXT_SECONDARY = (160, 150, 130)
COLOR_TEXT_GOLD = (255, 215, 0)
COLOR_TEXT_DIM = (100, 95, 85)
COLOR_TIMER_BAR = (200, 160, 50)
COLOR_TIMER_BAR_LOW = (200, 50, 40)
COLOR_HUD_BG = (10, 8, 6)
COLOR_CONNECTED = (50, 205, 50)
COLOR_DISCONNECTED = (200, 50, 40)

# ==========================================
# TIMING (seconds)
# ==========================================
COUNTDOWN_SECONDS = 3
PREVIEW_SECONDS = 5
OPEN_SECONDS = 15
REVEAL_SECONDS = 10
TICK_INTERVAL = 0.25  # how often the main loop evaluates phase deadlines

# ==========================================
# SCORING
# ==========================================
BASE_MAX_POINTS = 500
POINTS_INCREMENT_PER_QUESTION = 100  # later questions are worth more
MIN_POINTS = 100  # a correct answer at the buzzer
STREAK_BONUS = 100
STREAK_MIN_LENGTH = 2

# ==========================================
# QUESTIONS
# ==========================================
ROUND_SIZE = 15
MIN_QUESTIONS = 1
NUM_ANSWER_OPTIONS = 4
DISTRACTOR_MAX_ATTEMPTS = 200

FORMATS = ("bullet", "blitz", "rapid", "daily")

# Rule guards (all compared with a strict ">")
MIN_GAMES_FOR_RATE = 100
MIN_LOSSES_FOR_QUESTION = 50
MIN_DRAWS_FOR_QUESTION = 20
MIN_PEAK_GAP = 10
MIN_FORMAT_GAP = 10
MIN_TACTICS_SPREAD = 100

FIRST_JOIN_YEAR = 2007  # Chess.com accounts older than this don't exist

TITLES = ["GM", "IM", "FM", "NM", "CM", "WGM", "WIM", "WFM", "WCM"]

LEAGUES = ["Legend", "Champion", "Master", "Expert", "Elite", "Challenger",
           "Crystal", "Silver", "Bronze", "Stone", "Wood"]

COUNTRY_NAMES = {
    "US": "United States", "NL": "Netherlands", "AU": "Australia",
    "GB": "United Kingdom", "DE": "Germany", "FR": "France",
    "NO": "Norway", "RU": "Russia", "IN": "India", "CA": "Canada",
    "SE": "Sweden", "PL": "Poland", "ES": "Spain", "IT": "Italy",
    "BR": "Brazil", "AR": "Argentina", "IR": "Iran", "AZ": "Azerbaijan",
    "AM": "Armenia", "CN": "China", "JP": "Japan", "KR": "South Korea",
    "PH": "Philippines", "VN": "Vietnam", "UA": "Ukraine", "HU": "Hungary",
    "UZ": "Uzbekistan", "TR": "Turkey", "MX": "Mexico", "PE": "Peru",
}

# ==========================================
# CHAT
# ==========================================
# "!a".."!d" only, or also "a".."d", "1".."4" and "!1".."!4"
EXTENDED_ANSWER_COMMANDS = True

TWITCH_IRC_HOST = "irc.chat.twitch.tv"
TWITCH_IRC_PORT = 6667
CHAT_RECONNECT_MAX_WAIT = 60

# ==========================================
# CHESS.COM API
# ==========================================
CHESSCOM_API_URL = "https://api.chess.com/pub/player"
CHESSCOM_TIMEOUT = 10
CHESSCOM_USER_AGENT = "chess-stream-trivia/1.0"

# ==========================================
# LEADERBOARD
# ==========================================
LEADERBOARD_SIZE = 10

# ==========================================
# FONTS
# ==========================================
from pathlib import Path as _Path
_ROOT = _Path(__file__).resolve().parent.parent

FONT_PATH = str(_ROOT / "assets" / "fonts" / "display.ttf")  # optional; system font otherwise
