from projectcheck.utils.lexical_utils import (
    count_term,
    matching_sentences,
    similarity,
    split_into_paragraphs,
    split_into_sentences,
)


def test_similarity_of_identical_texts_is_100():
    text = "Students built a library management system for the campus."
    assert similarity(text, text) == 100.0


def test_similarity_is_symmetric():
    a = "the cat sat on the mat"
    b = "a dog sat on the rug"
    assert similarity(a, b) == similarity(b, a)


def test_similarity_uses_token_sets():
    # {the, cat, sat} vs {the, cat, ran}: 2 shared of 4
    assert similarity("the cat sat", "The cat ran") == 50.0


def test_similarity_of_empty_text_is_zero():
    assert similarity("", "") == 0.0
    assert similarity("", "some words") == 0.0


def test_sentences_shorter_than_ten_chars_are_dropped():
    sentences = split_into_sentences("Too short. This sentence is long enough to keep! Ok?")
    assert sentences == ["This sentence is long enough to keep"]


def test_paragraphs_split_on_blank_lines():
    text = "First paragraph is long enough to count here.\n\nTiny.\n\nSecond paragraph also has enough characters."
    assert len(split_into_paragraphs(text)) == 2


def test_count_term_matches_whole_words_and_plurals():
    text = "Businesses and a business; no businessman."
    assert count_term(text, "business") == 2
    assert count_term("React, react-native", "react") == 1


def test_matching_sentences_finds_copied_sentence():
    copied = "The system stores every order in a relational database table"
    a = f"{copied}. Something entirely different is written here by the student."
    b = f"Unrelated opening sentence about weather patterns today. {copied}."
    assert matching_sentences(a, b) == [copied]
