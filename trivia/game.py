"""
Chess Stream Trivia - Live chat trivia about a Chess.com player

Usage:
    python -m trivia.game USERNAME --twitch CHANNEL       # Twitch chat answers
    python -m trivia.game USERNAME --youtube VIDEO_ID     # YouTube live chat answers
    python -m trivia.game USERNAME --offline              # Fake chat bots

Options:
    --name NAME          Name used in the questions (defaults to the profile name)
    --occasion KIND      chess | birthday | anniversary (changes the title)
    --strict             Only accept !a !b !c !d (not a/b/c/d or 1-4)

Controls:
    Chat: !a !b !c !d (or a-d, 1-4) to answer
    Host: SPACE to start, R to restart, F1 to skip current phase, ESC to quit
"""

import sys

from trivia.chessdotcom import ChessComClient
from trivia.errors import TriviaError
from trivia.questions import QuestionBuilder


OCCASION_TITLES = {
    "chess": "{name}'s Chess Trivia",
    "birthday": "{name}'s Birthday Trivia",
    "anniversary": "{name}'s Stream Anniversary Trivia",
}


def round_title(name: str, occasion: str = "chess") -> str:
    template = OCCASION_TITLES.get(occasion, OCCASION_TITLES["chess"])
    return template.format(name=name)


def _pop_option(args: list, flag: str) -> str | None:
    if flag not in args:
        return None
    i = args.index(flag)
    if i + 1 >= len(args):
        raise SystemExit(f"[Game] {flag} needs a value")
    value = args[i + 1]
    del args[i:i + 2]
    return value


def _pop_flag(args: list, flag: str) -> bool:
    if flag in args:
        args.remove(flag)
        return True
    return False


def parse_args(argv: list) -> dict:
    args = list(argv)
    options = {
        "offline": _pop_flag(args, "--offline"),
        "strict": _pop_flag(args, "--strict"),
        "name": _pop_option(args, "--name"),
        "occasion": _pop_option(args, "--occasion") or "chess",
        "twitch": _pop_option(args, "--twitch"),
        "youtube": _pop_option(args, "--youtube"),
    }
    if len(args) != 1:
        raise SystemExit(__doc__)
    options["username"] = args[0]

    if options["offline"]:
        options["source"], options["channel"] = "offline", ""
    elif options["twitch"]:
        options["source"], options["channel"] = "twitch", options["twitch"]
    elif options["youtube"]:
        options["source"], options["channel"] = "youtube", options["youtube"]
    else:
        raise SystemExit("[Game] Pick a chat source: --twitch CHANNEL, --youtube VIDEO_ID or --offline")
    return options


def main():
    options = parse_args(sys.argv[1:])

    try:
        profile, stats = ChessComClient().fetch_player(options["username"], options["name"])
        questions = QuestionBuilder().build_round(profile, stats, options["name"])
    except TriviaError as e:
        print(f"[Game] {e}")
        sys.exit(1)

    # pygame is only needed once there is a round to show
    from trivia.controller import MainGameController

    controller = MainGameController(
        questions,
        title=round_title(profile.display_name, options["occasion"]),
        chat_source=options["source"],
        chat_channel=options["channel"],
        offline=options["offline"],
        extended_commands=not options["strict"],
    )
    try:
        controller.run()
    except KeyboardInterrupt:
        pass
    finally:
        controller.shutdown()


if __name__ == "__main__":
    main()
