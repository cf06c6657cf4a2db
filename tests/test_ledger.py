import threading

from trivia.ledger import ScoreLedger


def test_rank_orders_by_score_descending():
    ledger = ScoreLedger()
    ledger.apply_answer("A", True, 500)
    ledger.apply_answer("B", False, 0)
    ledger.apply_answer("C", True, 500)
    ledger.apply_answer("A", True, 100, streak_bonus=100)
    ranked = ledger.rank()
    assert [(e.participant_id, e.score) for e in ranked] == [("a", 700), ("c", 500), ("b", 0)]


def test_ties_keep_insertion_order():
    ledger = ScoreLedger()
    for name in ("zed", "amy", "bob"):
        ledger.apply_answer(name, True, 300)
    assert [e.participant_id for e in ledger.rank()] == ["zed", "amy", "bob"]
    assert [e.participant_id for e in ledger.top(2)] == ["zed", "amy"]


def test_participant_ids_are_case_normalized():
    ledger = ScoreLedger()
    ledger.apply_answer("MagnusFan", True, 200)
    ledger.apply_answer("  magnusfan ", True, 200)
    assert len(ledger) == 1
    assert ledger.get("MAGNUSFAN").score == 400


def test_streak_bonus_from_second_correct_answer():
    ledger = ScoreLedger()
    assert ledger.apply_answer("p", True, 500, streak_bonus=100) == 500
    assert ledger.apply_answer("p", True, 100, streak_bonus=100) == 200
    entry = ledger.get("p")
    assert (entry.score, entry.streak, entry.best_streak) == (700, 2, 2)


def test_wrong_answer_resets_streak_but_keeps_score():
    ledger = ScoreLedger()
    ledger.apply_answer("p", True, 500)
    assert ledger.apply_answer("p", False, 999) == 0
    entry = ledger.get("p")
    assert (entry.score, entry.streak) == (500, 0)


def test_reset_streaks_except_answered():
    ledger = ScoreLedger()
    ledger.apply_answer("quiet", True, 300)
    ledger.apply_answer("busy", True, 300)
    broken = ledger.reset_streaks_except({"busy"})
    assert broken == ["quiet"]
    assert ledger.get("quiet").streak == 0
    assert ledger.get("quiet").score == 300
    assert ledger.get("busy").streak == 1


def test_returned_entries_are_copies():
    ledger = ScoreLedger()
    ledger.apply_answer("p", True, 100)
    ledger.rank()[0].score = 10_000
    assert ledger.get("p").score == 100


def test_concurrent_answers_are_not_lost():
    ledger = ScoreLedger()

    def worker():
        for _ in range(500):
            ledger.apply_answer("crowd", True, 1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert ledger.get("crowd").score == 8 * 500


def test_clear():
    ledger = ScoreLedger()
    ledger.apply_answer("p", True, 100)
    ledger.clear()
    assert len(ledger) == 0
    assert ledger.rank() == []
