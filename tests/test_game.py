import pytest

from trivia.game import parse_args, round_title


def test_parse_twitch_args():
    options = parse_args(["hikaru", "--twitch", "gmhikaru", "--name", "Hikaru"])
    assert options["username"] == "hikaru"
    assert (options["source"], options["channel"]) == ("twitch", "gmhikaru")
    assert options["name"] == "Hikaru"
    assert options["occasion"] == "chess"
    assert not options["strict"]


def test_parse_offline_strict():
    options = parse_args(["--offline", "magnuscarlsen", "--strict"])
    assert options["source"] == "offline"
    assert options["strict"]


def test_missing_chat_source():
    with pytest.raises(SystemExit):
        parse_args(["hikaru"])


def test_missing_username():
    with pytest.raises(SystemExit):
        parse_args(["--offline"])


def test_round_title():
    assert round_title("Anna", "birthday") == "Anna's Birthday Trivia"
    assert round_title("Anna", "unknown") == "Anna's Chess Trivia"
