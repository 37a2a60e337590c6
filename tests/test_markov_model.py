# tests/test_markov_model.py
# training and backoff prediction

import pytest

from markov_chain_model.core.markov_model import MarkovModel


@pytest.fixture
def model():
    return MarkovModel(order=3)


def test_order_must_be_positive():
    for bad in (0, -1, 1.5, "2", True, None):
        with pytest.raises(ValueError):
            MarkovModel(order=bad)


def test_unknown_key_format_rejected():
    with pytest.raises(ValueError):
        MarkovModel(order=2, key_format="xml")


def test_short_sequences_are_noop(model):
    model.train(["A", "B", "C"])
    before = model.transitions()
    model.train([])
    model.train(["X"])
    assert model.transitions() == before


def test_empty_model_starts_empty(model):
    assert model.is_empty()
    assert len(model) == 0
    assert model.transitions() == {}


def test_context_coverage_order_3(model):
    model.train(["A", "B", "C", "D"])
    assert model.transitions() == {
        ("A",): {"B": 1},
        ("B",): {"C": 1},
        ("C",): {"D": 1},
        ("A", "B"): {"C": 1},
        ("B", "C"): {"D": 1},
        ("A", "B", "C"): {"D": 1},
    }


def test_contexts_never_exceed_order():
    m = MarkovModel(order=2)
    m.train(list("abcdefg"))
    assert all(1 <= len(ctx) <= 2 for ctx in m.transitions())


def test_training_accumulates_across_calls():
    m = MarkovModel(order=1)
    m.train(["A", "B"])
    assert m.histogram(["A"]) == {"B": 1}
    m.train(["A", "B"])
    assert m.histogram(["A"]) == {"B": 2}
    m.train(["A", "B"])
    assert m.histogram(["A"]) == {"B": 3}


def test_train_accepts_any_iterable():
    m = MarkovModel(order=2)
    m.train(iter(["x", "y", "z"]))
    m.train(("x", "y"))
    assert m.histogram(("x",)) == {"y": 2}
    assert m.histogram(["x", "y"]) == {"z": 1}


def test_train_many_is_sequential_train():
    a, b = MarkovModel(order=2), MarkovModel(order=2)
    seqs = [["a", "b", "c"], ["b", "c", "a"], ["c"]]
    a.train_many(seqs)
    for s in seqs:
        b.train(s)
    assert a.transitions() == b.transitions()


def test_generic_over_token_type():
    m = MarkovModel(order=2)
    m.train([1, 2, 3, 1, 2, 4])
    assert m.predict([1, 2], top_tokens=2) == [(3, 50), (4, 50)]


# Prediction ------------------------------------------------------------------------

def test_backoff_to_shorter_context():
    m = MarkovModel(order=2)
    m.train(["A", "B"])
    assert m.histogram(["X", "A"]) is None
    assert m.predict(["X", "A"], top_tokens=1) == [("B", 100)]


def test_longest_context_wins_over_shorter():
    m = MarkovModel(order=2)
    m.train(["X", "A", "C"])
    m.train(["A", "B"])
    m.train(["A", "B"])
    # [A] alone prefers B, but [X, A] has been seen and only ever led to C
    assert m.predict(["X", "A"], top_tokens=3) == [("C", 100)]
    assert m.predict(["A"], top_tokens=3) == [("B", 67), ("C", 33)]


def test_total_miss_returns_empty():
    m = MarkovModel(order=1)
    m.train(["A", "B"])
    assert m.predict(["Z"], top_tokens=5) == []


def test_empty_context_returns_empty(model):
    model.train(["A", "B"])
    assert model.predict([], top_tokens=3) == []


def test_untrained_model_predicts_nothing(model):
    assert model.predict(["A", "B", "C"], top_tokens=3) == []


def test_percentages():
    m = MarkovModel(order=1)
    m.train(["A", "B", "A", "C", "A", "B", "A", "B"])
    assert m.histogram(["A"]) == {"B": 3, "C": 1}
    assert m.predict(["A"], top_tokens=2) == [("B", 75), ("C", 25)]


def test_top_tokens_truncates_and_percent_uses_full_total():
    m = MarkovModel(order=1)
    m.train(["A", "B", "A", "C", "A", "D", "A", "B"])
    # B:2, C:1, D:1 of 4
    assert m.predict(["A"], top_tokens=1) == [("B", 50)]


def test_ties_keep_first_observed_order():
    m = MarkovModel(order=1)
    m.train(["A", "Z", "A", "M", "A", "B", "A", "M"])
    # Z:1, M:2, B:1 -> M first, then Z before B because Z was seen first
    assert m.predict(["A"], top_tokens=3) == [("M", 50), ("Z", 25), ("B", 25)]


def test_half_percent_rounds_up():
    m = MarkovModel(order=1)
    seq = []
    for nxt in ["B"] * 7 + ["C"]:
        seq += ["A", nxt]
    m.train(seq)
    # 7/8 = 87.5 -> 88, 1/8 = 12.5 -> 13
    assert m.predict(["A"], top_tokens=2) == [("B", 88), ("C", 13)]


def test_context_longer_than_order_uses_its_suffix():
    m = MarkovModel(order=2)
    m.train(["B", "C", "D"])
    assert m.predict(["Q", "R", "B", "C"], top_tokens=1) == [("D", 100)]


@pytest.mark.parametrize("bad", [0, -3, 2.0, None, True])
def test_top_tokens_must_be_positive_int(model, bad):
    model.train(["A", "B"])
    with pytest.raises(ValueError):
        model.predict(["A"], top_tokens=bad)


def test_predict_does_not_mutate_table(model):
    model.train(["A", "B", "C"])
    before = model.transitions()
    model.predict(["Q", "A"], top_tokens=2)
    model.predict(["nope"], top_tokens=2)
    assert model.transitions() == before


def test_introspection_returns_copies(model):
    model.train(["A", "B"])
    model.transitions()[("A",)]["B"] = 99
    model.histogram(["A"])["B"] = 99
    assert model.histogram(["A"]) == {"B": 1}


def test_stats(model):
    model.train(["A", "B", "C", "D"])
    model.train(["A", "C"])
    st = model.stats()
    assert st["order"] == 3
    assert st["contexts"] == 6
    assert st["transitions"] == 7
    assert st["observations"] == 7
    assert st["contexts_by_length"] == {1: 3, 2: 2, 3: 1}
