import random

import pytest

from wordplay.services.games import UnscrambleRules, Verdict, WordChainRules
from wordplay.services.games.unscramble import scramble
from wordplay.services.games.wordchain import RARE_LETTERS
from wordplay.services.sessions import ConfigurationError, ManualClock, SessionRegistry
from wordplay.services.sessions.session import Player


def _session(game, players=('p1', 'p2')):
    session = SessionRegistry(ManualClock()).create('chan', game)
    for pid in players:
        session.players[pid] = Player(player_id=pid, name=pid.upper(), joined_at=0)
    session.turn_order = list(players)
    return session


def test_scramble_always_differs_for_longer_words():
    rng = random.Random(3)
    for word in ['APPLE', 'AAB', 'ABAB', 'LIGHTHOUSE']:
        for _ in range(20):
            out = scramble(word, rng)
            assert out != word
            assert sorted(out) == sorted(word)


def test_scramble_short_and_uniform_words_are_allowed_to_match():
    assert sorted(scramble('AB', random.Random(1))) == ['A', 'B']
    assert scramble('AAA', random.Random(1)) == 'AAA'


def test_unscramble_word_length_follows_round_tier(words):
    rules = UnscrambleRules(words, rounds=10, rng=random.Random(5))
    session = _session('unscramble')
    for round_no, (low, high) in [(1, (5, 6)), (3, (5, 6)), (4, (7, 8)), (7, (7, 8)), (8, (9, 12))]:
        session.round = round_no
        payload = rules.new_round(session)
        assert low <= len(payload.target) <= high
        assert payload.scrambled != payload.target
        assert payload.duration == rules.round_seconds


def test_unscramble_check_is_case_insensitive_exact_match(words):
    rules = UnscrambleRules(words)
    session = _session('unscramble')
    session.round = 1
    session.payload = rules.new_round(session)
    target = session.payload.target
    assert rules.check(session, f"  {target.lower()} ").accepted
    verdict = rules.check(session, target[:-1])
    assert not verdict.accepted
    assert verdict.reason == 'wrong'


def test_unscramble_accept_scores_one_point(words):
    rules = UnscrambleRules(words)
    session = _session('unscramble')
    session.round = 1
    session.payload = rules.new_round(session)
    verdict = rules.check(session, session.payload.target)
    rules.accept(session, 'p2', verdict)
    assert session.players['p2'].score == 1
    assert session.players['p1'].score == 0
    assert not rules.is_over(session)


def test_unscramble_empty_tier_is_configuration_error(words):
    rules = UnscrambleRules(words, tiers=((None, 13, 14),))
    session = _session('unscramble')
    session.round = 1
    with pytest.raises(ConfigurationError):
        rules.new_round(session)


def test_wordchain_payload_uses_common_letters_and_tiered_lengths(dictionary):
    rules = WordChainRules(dictionary, rng=random.Random(11))
    session = _session('wordchain')
    for round_no, (low, high), seconds in [(1, (3, 4), 30), (6, (4, 6), 25), (11, (5, 8), 20)]:
        session.round = round_no
        for _ in range(30):
            payload = rules.new_round(session)
            assert payload.letter not in RARE_LETTERS
            assert low <= payload.min_length <= high
            assert payload.duration == seconds
            assert payload.player_id == 'p1'


def test_wordchain_checks_in_order(dictionary):
    rules = WordChainRules(dictionary, rng=random.Random(2))
    session = _session('wordchain')
    session.round = 1
    session.payload = rules.new_round(session)
    letter, min_length = session.payload.letter, session.payload.min_length
    other = 'B' if letter != 'B' else 'C'

    # wrong letter wins over too short
    assert rules.check(session, other).reason == 'letter'
    assert rules.check(session, letter).reason == 'length'
    word = letter + 'O' * (min_length - 1)
    session.used_words.add(word)
    assert rules.check(session, word.lower()).reason == 'used'
    fresh = letter + 'E' * min_length
    assert rules.check(session, fresh).accepted
    assert dictionary.calls == []


def test_wordchain_rejection_messages_are_distinct(dictionary):
    rules = WordChainRules(dictionary, rng=random.Random(2))
    session = _session('wordchain')
    session.round = 1
    session.payload = rules.new_round(session)
    letter, min_length = session.payload.letter, session.payload.min_length
    other = 'B' if letter != 'B' else 'C'
    used = letter + 'I' * min_length
    session.used_words.add(used)
    messages = {
        rules.check(session, other).message,
        rules.check(session, letter).message,
        rules.check(session, used).message,
    }
    assert len(messages) == 3


def test_wordchain_lookup_rejects_unknown_words(dictionary):
    dictionary.accept_all = False
    dictionary.words = {'APPLE'}
    rules = WordChainRules(dictionary)
    assert rules.lookup(Verdict.ok('APPLE')).accepted
    verdict = rules.lookup(Verdict.ok('APPLZ'))
    assert not verdict.accepted
    assert verdict.reason == 'dictionary'


def test_wordchain_accept_records_word_and_passes_turn(dictionary):
    rules = WordChainRules(dictionary)
    session = _session('wordchain', players=('p1', 'p2', 'p3'))
    session.round = 1
    session.payload = rules.new_round(session)
    rules.accept(session, 'p1', Verdict.ok('APPLE'))
    assert 'APPLE' in session.used_words
    assert session.players['p1'].score == 1
    assert session.current_player_id == 'p2'


def test_wordchain_timeout_eliminates_player_on_turn(dictionary):
    rules = WordChainRules(dictionary)
    session = _session('wordchain', players=('p1', 'p2', 'p3'))
    session.current_index = 1
    rules.timeout(session)
    assert session.turn_order == ['p1', 'p3']
    assert session.eliminated == ['p2']
    assert session.current_player_id == 'p3'
    assert not rules.is_over(session)
    session.current_index = 1
    rules.timeout(session)
    assert session.turn_order == ['p1']
    assert rules.is_over(session)
    assert rules.winner(session) == 'p1'
