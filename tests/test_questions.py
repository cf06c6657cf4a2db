import random

import pytest

from trivia.config import ROUND_SIZE
from trivia.errors import InsufficientData
from trivia.models import ProfileRecord, StatRecord, FormatRecord
from trivia.questions import QuestionBuilder, country_name


def _all_questions(profile, stats, today, seed=0):
    builder = QuestionBuilder(rng=random.Random(seed), now=today, round_size=1000)
    return builder.build(profile, stats, "Hikaru")


def _by_prompt(questions, fragment):
    matches = [q for q in questions if fragment in q.prompt]
    assert len(matches) == 1, f"expected one question containing {fragment!r}"
    return matches[0]


@pytest.mark.parametrize("seed", range(10))
def test_questions_are_well_formed(profile, stats, today, seed):
    for q in _all_questions(profile, stats, today, seed):
        assert 2 <= len(q.options) <= 4
        assert len(set(q.options)) == len(q.options)
        assert 0 <= q.correct_index < len(q.options)


SPARSE_CASES = {
    "rating_one": (
        ProfileRecord(username="low"),
        StatRecord(formats={"rapid": FormatRecord(current_rating=1, best_rating=1)}),
    ),
    "no_wins": (
        ProfileRecord(username="winless"),
        StatRecord(formats={"blitz": FormatRecord(current_rating=400, wins=0,
                                                  losses=200, draws=0)}),
    ),
    "all_wins": (
        ProfileRecord(username="perfect"),
        StatRecord(formats={"bullet": FormatRecord(current_rating=2000, wins=150,
                                                   losses=0, draws=0)}),
    ),
    "joined_2007": (
        ProfileRecord(username="veteran", joined_epoch_seconds=1180000000),  # 2007-05-24
        StatRecord(),
    ),
    "two_formats": (
        ProfileRecord(username="duo"),
        StatRecord(formats={"blitz": FormatRecord(current_rating=1800),
                            "bullet": FormatRecord(current_rating=1650)}),
    ),
}


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("case", sorted(SPARSE_CASES))
def test_sparse_records_give_well_formed_questions(case, seed, today):
    profile, stats = SPARSE_CASES[case]
    questions = _all_questions(profile, stats, today, seed)
    assert questions
    for q in questions:
        assert 2 <= len(q.options) <= 4
        assert len(set(q.options)) == len(q.options)
        assert 0 <= q.correct_index < len(q.options)


def test_out_of_range_join_date_skips_date_rules(stats, today):
    profile = ProfileRecord(username="future", joined_epoch_seconds=10**20)
    questions = _all_questions(profile, stats, today)
    assert questions
    assert not [q for q in questions if "join Chess.com" in q.prompt]
    assert not [q for q in questions if "been on Chess.com" in q.prompt]


def test_round_is_truncated_and_renumbered(profile, stats, today):
    builder = QuestionBuilder(rng=random.Random(5), now=today)
    questions = builder.build(profile, stats, "Hikaru")
    assert len(questions) == ROUND_SIZE
    assert [q.id for q in questions] == list(range(1, ROUND_SIZE + 1))


def test_same_seed_gives_same_round(profile, stats, today):
    first = QuestionBuilder(rng=random.Random(9), now=today).build(profile, stats)
    second = QuestionBuilder(rng=random.Random(9), now=today).build(profile, stats)
    assert first == second


def test_rating_answers(profile, stats, today):
    questions = _all_questions(profile, stats, today)
    assert _by_prompt(questions, "highest bullet rating").correct_answer == "3400"
    assert _by_prompt(questions, "What is Hikaru's current blitz rating?").correct_answer == "3100"
    assert _by_prompt(questions, "FIDE rating").correct_answer == "2800"
    assert _by_prompt(questions, "best Puzzle Rush").correct_answer == "75"


def test_count_and_rate_answers(profile, stats, today):
    questions = _all_questions(profile, stats, today)
    assert _by_prompt(questions, "blitz games has Hikaru played").correct_answer == "53k"
    assert _by_prompt(questions, "followers").correct_answer == "1.2M"
    # 40000 / 53000 = 75.5%
    assert _by_prompt(questions, "blitz win rate").correct_answer == "75%"
    assert _by_prompt(questions, "blitz games end in a draw").correct_answer == "8%"


def test_profile_answers(profile, stats, today):
    questions = _all_questions(profile, stats, today)
    assert _by_prompt(questions, "What year did").correct_answer == "2014"
    assert _by_prompt(questions, "full years").correct_answer == "12"
    assert _by_prompt(questions, "What country").correct_answer == "United States"
    assert _by_prompt(questions, "What title").correct_answer == "GM"
    assert _by_prompt(questions, "league").correct_answer == "Legend"
    streamer = _by_prompt(questions, "verified Chess.com streamer")
    assert sorted(streamer.options) == ["No", "Yes"]
    assert streamer.correct_answer == "Yes"


def test_cross_format_answers(profile, stats, today):
    questions = _all_questions(profile, stats, today)
    assert _by_prompt(questions, "below their peak is Hikaru's current blitz").correct_answer == "200"
    assert _by_prompt(questions, "points higher is Hikaru's bullet").correct_answer == "100"
    highest = _by_prompt(questions, "highest rating?")
    assert highest.correct_answer == "Bullet"
    assert set(highest.options) == {"Bullet", "Blitz", "Rapid"}
    assert _by_prompt(questions, "won combined").correct_answer == "60.3k"


def test_threshold_guards_skip_meaningless_questions(profile, stats, today):
    questions = _all_questions(profile, stats, today)
    prompts = " ".join(q.prompt for q in questions)
    # rapid: 350 games but only 40 losses, 10 draws, peak gap of 50
    assert "rapid games has Hikaru LOST" not in prompts
    assert "rapid games has Hikaru drawn" not in prompts
    assert "rapid win rate" in prompts
    assert "daily" not in prompts


def test_peak_gap_at_threshold_is_skipped(today):
    profile = ProfileRecord(username="x")
    stats = StatRecord(formats={"blitz": FormatRecord(current_rating=1500, best_rating=1510)})
    questions = _all_questions(profile, stats, today)
    assert not [q for q in questions if "below their peak" in q.prompt]


def test_tactics_lowest_needs_spread(profile, today):
    stats = StatRecord(tactics_highest=1500, tactics_lowest=1450)
    prompts = [q.prompt for q in _all_questions(profile, stats, today)]
    assert any("highest tactics" in p for p in prompts)
    assert not any("LOWEST tactics" in p for p in prompts)


def test_young_account_asks_months(today):
    joined = int(today.replace(year=2025, month=12).timestamp())
    profile = ProfileRecord(username="newbie", joined_epoch_seconds=joined)
    questions = _all_questions(profile, StatRecord(), today)
    assert _by_prompt(questions, "full months").correct_answer == "10"
    assert not [q for q in questions if "full years" in q.prompt]


def test_sparse_profile_returns_short_round(today):
    profile = ProfileRecord(username="ghost", is_verified_streamer=False)
    questions = QuestionBuilder(rng=random.Random(1), now=today).build(profile, None)
    assert len(questions) == 1
    assert questions[0].id == 1
    assert questions[0].correct_answer == "No"


def test_empty_profile_is_insufficient(today):
    builder = QuestionBuilder(rng=random.Random(1), now=today)
    with pytest.raises(InsufficientData) as info:
        builder.build_round(ProfileRecord(username="ghost"), StatRecord())
    assert info.value.count == 0


def test_country_name_falls_back_to_code():
    assert country_name("no") == "Norway"
    assert country_name("xk") == "XK"
    assert country_name("") == ""


def test_unknown_country_question(today):
    profile = ProfileRecord(username="x", country_code="xk")
    question = _by_prompt(_all_questions(profile, StatRecord(), today), "What country")
    assert question.correct_answer == "XK"
    assert len(question.options) == 4
